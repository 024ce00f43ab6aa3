import json

import pytest
from fastapi.testclient import TestClient

from book_catalog_api.app.core.config import Settings
from book_catalog_api.app.main import create_app
from book_catalog_api.app.storage import JSONFileBookStorage, SQLiteBookStorage


@pytest.fixture
def sqlite_storage(tmp_path):
    storage = SQLiteBookStorage(str(tmp_path / "books.db"))
    storage.initialize()
    return storage


@pytest.fixture
def json_file(tmp_path):
    path = tmp_path / "books.json"
    path.write_text(json.dumps({"books": []}), encoding="utf-8")
    return path


@pytest.fixture
def json_storage(json_file):
    storage = JSONFileBookStorage(str(json_file))
    storage.initialize()
    return storage


@pytest.fixture(params=["sqlite", "json"])
def storage(request):
    # Runs the test once against each backend.
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def client(storage):
    app = create_app(Settings(), storage=storage)
    with TestClient(app) as test_client:
        yield test_client

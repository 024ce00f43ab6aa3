import json
import os
import sqlite3
import stat
import threading

import pytest

from book_catalog_api.app.core.config import Settings
from book_catalog_api.app.core.exceptions import StorageError
from book_catalog_api.app.storage import JSONFileBookStorage, SQLiteBookStorage, build_storage


def _reopen(storage):
    """Build a fresh backend over the same medium, as after a restart."""
    if isinstance(storage, SQLiteBookStorage):
        reopened = SQLiteBookStorage(storage.db_path)
    else:
        reopened = JSONFileBookStorage(storage.path)
    reopened.initialize()
    return reopened


# ------------------------- Both backends ------------------------- #
def test_starts_empty(storage):
    assert storage.list_all() == []


def test_insert_assigns_increasing_ids(storage):
    first = storage.insert("Ulysses", "James Joyce", False)
    second = storage.insert("Dune", "Frank Herbert", True)
    third = storage.insert("Sapiens", "Yuval Noah Harari", False)
    assert first < second < third
    assert first == 1


def test_list_all_returns_records_in_id_order(storage):
    storage.insert("Ulysses", "James Joyce", False)
    storage.insert("Dune", "Frank Herbert", True)

    books = storage.list_all()
    assert [b.id for b in books] == [1, 2]
    assert books[0].name == "Ulysses"
    assert books[0].author == "James Joyce"
    assert books[0].finished is False
    assert books[1].finished is True


def test_get(storage):
    book_id = storage.insert("The Stranger", "Albert Camus", True)
    book = storage.get(book_id)
    assert book is not None
    assert (book.id, book.name, book.author, book.finished) == (book_id, "The Stranger", "Albert Camus", True)
    assert storage.get(book_id + 1) is None


def test_initialize_is_idempotent(storage):
    storage.insert("Ulysses", "James Joyce", False)
    storage.initialize()
    assert len(storage.list_all()) == 1


def test_ids_continue_after_restart(storage):
    storage.insert("Ulysses", "James Joyce", False)
    storage.insert("Dune", "Frank Herbert", True)

    reopened = _reopen(storage)
    assert [b.name for b in reopened.list_all()] == ["Ulysses", "Dune"]
    assert reopened.insert("Sapiens", "Yuval Noah Harari", False) == 3


# ------------------------- SQLite ------------------------- #
def test_sqlite_table_layout(sqlite_storage):
    conn = sqlite3.connect(sqlite_storage.db_path)
    try:
        columns = [(row[1], row[2]) for row in conn.execute("PRAGMA table_info(Books)")]
    finally:
        conn.close()
    assert columns == [("id", "INTEGER"), ("name", "TEXT"), ("author", "TEXT"), ("finished", "INTEGER")]


def test_sqlite_stores_finished_as_integer(sqlite_storage):
    sqlite_storage.insert("Dune", "Frank Herbert", True)
    conn = sqlite3.connect(sqlite_storage.db_path)
    try:
        assert conn.execute("SELECT finished FROM Books").fetchone()[0] == 1
    finally:
        conn.close()


def test_sqlite_values_are_bound_not_interpolated(sqlite_storage):
    hostile = "Robert'); DROP TABLE Books;--"
    book_id = sqlite_storage.insert(hostile, "O'Brien", False)
    assert sqlite_storage.get(book_id).name == hostile
    assert sqlite_storage.get(book_id).author == "O'Brien"
    assert len(sqlite_storage.list_all()) == 1


def test_sqlite_orders_by_id_regardless_of_row_order(sqlite_storage):
    conn = sqlite3.connect(sqlite_storage.db_path)
    try:
        conn.execute("INSERT INTO Books (id, name, author, finished) VALUES (5, 'E', 'e', 0)")
        conn.execute("INSERT INTO Books (id, name, author, finished) VALUES (2, 'B', 'b', 0)")
        conn.commit()
    finally:
        conn.close()
    assert [b.id for b in sqlite_storage.list_all()] == [2, 5]
    assert sqlite_storage.insert("F", "f", False) == 6


def test_sqlite_initialize_fails_for_unopenable_path(tmp_path):
    storage = SQLiteBookStorage(str(tmp_path))  # a directory, not a file
    with pytest.raises(StorageError):
        storage.initialize()


def test_sqlite_query_errors_become_storage_errors(tmp_path):
    storage = SQLiteBookStorage(str(tmp_path / "uninitialised.db"))
    with pytest.raises(StorageError) as excinfo:
        storage.list_all()
    assert isinstance(excinfo.value.__cause__, sqlite3.Error)
    with pytest.raises(StorageError):
        storage.insert("Dune", "Frank Herbert", False)


# ------------------------- JSON file ------------------------- #
def test_json_missing_file_fails_fast(tmp_path):
    storage = JSONFileBookStorage(str(tmp_path / "absent.json"))
    with pytest.raises(StorageError, match="does not exist"):
        storage.initialize()


def test_json_missing_file_created_when_allowed(tmp_path):
    path = tmp_path / "absent.json"
    storage = JSONFileBookStorage(str(path), create_missing=True)
    storage.initialize()
    assert json.loads(path.read_text(encoding="utf-8")) == {"books": []}
    assert storage.list_all() == []


@pytest.mark.parametrize(
    "content",
    [
        b"",
        b"{not json",
        b"[]",
        b'{"items": []}',
        b'{"books": {}}',
        b'{"books": [{"name": "no id", "author": "x"}]}',
        b'{"books": [{"id": 1, "name": "\xff", "author": "x"}]}',
    ],
)
def test_json_corrupt_document_is_not_treated_as_empty(json_file, content):
    json_file.write_bytes(content)
    storage = JSONFileBookStorage(str(json_file))
    with pytest.raises(StorageError):
        storage.initialize()


def test_json_next_id_recomputed_from_contents(json_file):
    json_file.write_text(
        json.dumps(
            {
                "books": [
                    {"id": 7, "name": "G", "author": "g", "finished": True},
                    {"id": 3, "name": "C", "author": "c"},
                ]
            }
        ),
        encoding="utf-8",
    )
    storage = JSONFileBookStorage(str(json_file))
    storage.initialize()

    books = storage.list_all()
    assert [b.id for b in books] == [3, 7]
    assert books[0].finished is False
    assert storage.insert("H", "h", False) == 8


def test_json_document_shape(json_storage, json_file):
    json_storage.insert("The Stranger", "Albert Camus", True)
    document = json.loads(json_file.read_text(encoding="utf-8"))
    assert document == {
        "books": [{"id": 1, "name": "The Stranger", "author": "Albert Camus", "finished": True}]
    }


def test_json_rewrite_keeps_file_mode(json_storage, json_file):
    os.chmod(json_file, 0o644)
    json_storage.insert("Dune", "Frank Herbert", False)
    assert stat.S_IMODE(os.stat(json_file).st_mode) == 0o644


def test_json_concurrent_inserts_do_not_lose_updates(json_storage):
    ids = []
    ids_lock = threading.Lock()

    def worker(n):
        book_id = json_storage.insert(f"Book {n}", "Author", False)
        with ids_lock:
            ids.append(book_id)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(ids) == list(range(1, 21))
    assert [b.id for b in json_storage.list_all()] == list(range(1, 21))


def test_json_write_failure_keeps_previous_document(json_storage, json_file, monkeypatch):
    json_storage.insert("Ulysses", "James Joyce", False)
    before = json_file.read_text(encoding="utf-8")

    def failing_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("book_catalog_api.app.storage.json_storage.os.replace", failing_replace)
    with pytest.raises(StorageError, match="disk full"):
        json_storage.insert("Dune", "Frank Herbert", False)

    assert json_file.read_text(encoding="utf-8") == before
    assert [p.name for p in json_file.parent.iterdir()] == ["books.json"]


# ------------------------- Factory ------------------------- #
def test_build_storage_selects_backend(tmp_path):
    sqlite_backend = build_storage(Settings(storage_backend="sqlite", database_url=str(tmp_path / "a.db")))
    assert isinstance(sqlite_backend, SQLiteBookStorage)
    assert sqlite_backend.db_path == str(tmp_path / "a.db")

    json_backend = build_storage(
        Settings(storage_backend="JSON", data_file=str(tmp_path / "a.json"), create_data_file=False)
    )
    assert isinstance(json_backend, JSONFileBookStorage)
    assert json_backend.create_missing is False


def test_build_storage_resolves_relative_paths(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    backend = build_storage(Settings(storage_backend="sqlite", database_url="relative.db"))
    assert backend.db_path == str((tmp_path / "relative.db").resolve())


def test_build_storage_rejects_unknown_backend():
    with pytest.raises(ValueError, match="Unknown storage backend"):
        build_storage(Settings(storage_backend="postgres"))

"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts with a local SQLite file and no further setup.  Tests
and the ``run.py`` script construct their own ``Settings`` instances
instead of mutating the shared one.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Book Catalog API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Which storage backend to wire into the service: ``sqlite`` keeps
    # books in a single table, ``json`` in one flat JSON document.
    storage_backend: str = os.getenv("STORAGE_BACKEND", "sqlite")

    # Path of the SQLite database file used by the ``sqlite`` backend.
    database_url: str = os.getenv("DATABASE_URL", "app.db")

    # Path of the JSON document used by the ``json`` backend.  When
    # ``create_data_file`` is false the file must already exist and
    # contain ``{"books": []}`` or startup fails.
    data_file: str = os.getenv("BOOKS_DATA_FILE", "books.json")
    create_data_file: bool = _env_flag("BOOKS_CREATE_DATA_FILE", "true")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))


def resolve_path(value: str) -> str:
    """Return ``value`` as an absolute path.

    Absolute paths are returned unchanged; relative ones are resolved
    against the current working directory.
    """
    if os.path.isabs(value):
        return value
    return str(Path(value).resolve())


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# must be set before this module is first imported.
settings = Settings()

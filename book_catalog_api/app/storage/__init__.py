"""
Storage backends for books.

Two interchangeable implementations of :class:`BookStorage` are
provided; :func:`build_storage` picks one from the settings so the
service never branches on the backend kind.
"""

from ..core.config import Settings, resolve_path
from .base import BookStorage
from .json_storage import JSONFileBookStorage
from .sqlite_storage import SQLiteBookStorage

__all__ = [
    "BookStorage",
    "JSONFileBookStorage",
    "SQLiteBookStorage",
    "build_storage",
]


def build_storage(settings: Settings) -> BookStorage:
    """Construct the storage backend named by ``settings.storage_backend``.

    The backend is returned uninitialised; call ``initialize`` before
    use.  Raises ``ValueError`` for an unknown backend name.
    """
    backend = settings.storage_backend.lower()
    if backend == "sqlite":
        return SQLiteBookStorage(resolve_path(settings.database_url))
    if backend == "json":
        return JSONFileBookStorage(
            resolve_path(settings.data_file),
            create_missing=settings.create_data_file,
        )
    raise ValueError(f"Unknown storage backend {settings.storage_backend!r}; expected 'sqlite' or 'json'")

"""
Flat-file JSON storage backend.

The whole collection is one JSON document of the form::

    {"books": [{"id": 1, "name": "...", "author": "...", "finished": false}]}

``insert`` re-reads the document, assigns ``1 + max(existing ids)``,
appends the record and rewrites the file.  A process-wide lock
serializes that read-modify-write cycle and the rewrite goes through a
temporary file replaced atomically, so readers never see a half-written
document.  Several *processes* writing the same file can still lose
updates; run a single writer per file.
"""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
import threading
from typing import List, Optional

from pydantic import ValidationError

from ..core.exceptions import StorageError
from ..schemas.book import BookRead
from .base import BookStorage

logger = logging.getLogger(__name__)

EMPTY_DOCUMENT = {"books": []}

# mkstemp creates files as 0600; new documents get the usual umask-based mode.
_UMASK = os.umask(0)
os.umask(_UMASK)


class JSONFileBookStorage(BookStorage):
    """Store books in a single JSON document on disk.

    Parameters
    ----------
    path : str
        Location of the JSON document.
    create_missing : bool
        When true, ``initialize`` writes an empty document if ``path``
        does not exist.  When false a missing file is a startup error.
    """

    def __init__(self, path: str, create_missing: bool = False) -> None:
        self.path = path
        self.create_missing = create_missing
        self._lock = threading.Lock()

    def initialize(self) -> None:
        with self._lock:
            if not os.path.exists(self.path):
                if not self.create_missing:
                    raise StorageError(f"data file {self.path} does not exist")
                self._write_document([])
                logger.info("Created empty book data file %s", self.path)
            # Fail fast on a corrupt document instead of treating it as empty.
            self._read_books()
        logger.info("Using JSON book storage at %s", self.path)

    def list_all(self) -> List[BookRead]:
        books = self._read_books()
        return sorted(books, key=lambda book: book.id)

    def insert(self, name: str, author: str, finished: bool) -> int:
        with self._lock:
            books = self._read_books()
            book_id = max((book.id for book in books), default=0) + 1
            books.append(BookRead(id=book_id, name=name, author=author, finished=finished))
            self._write_document(books)
        return book_id

    def get(self, book_id: int) -> Optional[BookRead]:
        for book in self._read_books():
            if book.id == book_id:
                return book
        return None

    # ------------------------- File helpers ------------------------- #
    def _read_books(self) -> List[BookRead]:
        """Load and validate every record of the document."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except OSError as exc:
            raise StorageError(f"could not read {self.path}: {exc}") from exc
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError both land here.
            raise StorageError(f"{self.path} is not valid JSON: {exc}") from exc

        if not isinstance(document, dict) or not isinstance(document.get("books"), list):
            raise StorageError(f'{self.path} must contain an object with a "books" list')
        try:
            return [BookRead.model_validate(record) for record in document["books"]]
        except ValidationError as exc:
            raise StorageError(f"{self.path} contains an invalid book record: {exc}") from exc

    def _write_document(self, books: List[BookRead]) -> None:
        """Atomically replace the document with ``books``."""
        document = {"books": [book.model_dump() for book in books]}
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".books-", suffix=".tmp")
        except OSError as exc:
            raise StorageError(f"could not write {self.path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.chmod(tmp_path, self._file_mode())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(f"could not write {self.path}: {exc}") from exc

    def _file_mode(self) -> int:
        """Mode for the rewritten document: the current one, else 0666 minus the umask."""
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            return 0o666 & ~_UMASK

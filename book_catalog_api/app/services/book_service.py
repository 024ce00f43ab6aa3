"""
Business logic for books.

``BookService`` sits between the API handlers and a storage backend.
It trims and validates input before any storage call, and otherwise
makes exactly one backend call per operation: no caching, no retries.
Storage errors propagate to the caller unchanged.
"""

from __future__ import annotations

import logging
from typing import List

from ..core.exceptions import BookNotFoundError
from ..schemas.book import BookCreate, BookRead, validate_book
from ..storage.base import BookStorage

logger = logging.getLogger(__name__)


class BookService:
    """Service for listing and creating books.

    The storage backend is passed in at construction time so the same
    service works against SQLite, a JSON file or a test double.
    """

    def __init__(self, storage: BookStorage) -> None:
        self.storage = storage

    def list_books(self) -> List[BookRead]:
        """Return all books in ascending id order."""
        return self.storage.list_all()

    def create_book(self, name: str, author: str, finished: bool = False) -> BookRead:
        """Validate and persist a new book, returning it with its new id.

        ``name`` and ``author`` are stripped of surrounding whitespace
        before validation and storage.  Raises ``BookValidationError``
        without touching storage if either is blank.
        """
        data = BookCreate(name=name, author=author, finished=finished).trimmed()
        validate_book(data)
        book_id = self.storage.insert(data.name, data.author, data.finished)
        logger.info("Created book %s '%s'", book_id, data.name)
        return BookRead(id=book_id, **data.model_dump())

    def get_book(self, book_id: int) -> BookRead:
        """Retrieve a single book, raising ``BookNotFoundError`` if absent."""
        book = self.storage.get(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        return book

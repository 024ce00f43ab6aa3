"""Abstract base class for book storage backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from ..schemas.book import BookRead


class BookStorage(ABC):
    """Durable collection of books.

    Implementations own the persisted records and assign ids.  Every
    method raises ``StorageError`` when the underlying medium cannot be
    read or written; callers never see backend-specific exceptions.
    """

    @abstractmethod
    def initialize(self) -> None:
        """Prepare the storage medium.

        Must be idempotent: calling it against an already initialized
        medium leaves existing records untouched.
        """

    @abstractmethod
    def list_all(self) -> List[BookRead]:
        """Return every stored book in ascending ``id`` order."""

    @abstractmethod
    def insert(self, name: str, author: str, finished: bool) -> int:
        """Persist a new book and return the id assigned to it.

        The id is strictly greater than any id assigned before.
        """

    @abstractmethod
    def get(self, book_id: int) -> Optional[BookRead]:
        """Return the book with ``book_id`` or ``None`` if absent."""

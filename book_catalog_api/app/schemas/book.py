"""
Pydantic models for book data.

``BookBase`` holds the client-supplied fields and ``BookCreate`` is
the decoded body of ``POST /api/books``.  ``BookRead`` is a persisted
record with its storage-assigned ``id`` listed first.  The only
business rule, a non-blank ``name`` and ``author``, lives in
``validate_book`` so the service can run it after trimming.
"""

from pydantic import BaseModel, Field

from ..core.exceptions import BookValidationError


class BookBase(BaseModel):
    name: str = Field("", examples=["The Stranger"])
    author: str = Field("", examples=["Albert Camus"])
    finished: bool = Field(False, examples=[True])


class BookCreate(BookBase):
    """Schema for creating a book.

    Missing ``name`` or ``author`` decode to an empty string and are
    rejected by ``validate_book``.  Unknown keys, including an ``id``
    sent by the client, are ignored.
    """

    def trimmed(self) -> "BookCreate":
        """Return a copy with surrounding whitespace removed from text fields."""
        return self.model_copy(update={"name": self.name.strip(), "author": self.author.strip()})


class BookRead(BaseModel):
    """Schema for a stored book, as persisted and as returned by the API."""

    id: int
    name: str
    author: str
    finished: bool = False

    model_config = {
        "from_attributes": True,
    }


def validate_book(book) -> None:
    """Raise ``BookValidationError`` if ``name`` or ``author`` is blank.

    Whitespace-only values count as blank.  ``finished`` has no invalid
    states and ``id`` is never checked.
    """
    if not book.name.strip() or not book.author.strip():
        raise BookValidationError("name and author are required")

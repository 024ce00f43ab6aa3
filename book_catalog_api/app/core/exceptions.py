"""
Exception types shared by the service and API layers.

Every error raised on purpose by this package derives from
``BookCatalogError`` and carries the HTTP status the API layer should
answer with.  Handlers registered in ``main.create_app`` turn them into
plain-text responses.
"""


class BookCatalogError(Exception):
    """Base exception for the Book Catalog API."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BookValidationError(BookCatalogError):
    """Raised when client input breaks a business rule.

    Covers empty or malformed request bodies as well as a ``name`` or
    ``author`` that is blank after trimming.  The message is returned
    to the client verbatim.
    """

    status_code = 400


class BookNotFoundError(BookCatalogError):
    """Raised when no book exists with the requested id."""

    status_code = 404

    def __init__(self, book_id: int):
        super().__init__(f"book {book_id} not found")
        self.book_id = book_id


class StorageError(BookCatalogError):
    """Raised when a storage backend cannot read or write its medium.

    The original exception is chained as ``__cause__``.  Its text is
    logged but never sent to the client.
    """

    status_code = 500

"""
Book endpoints.

``/api/books`` supports two methods: ``GET`` lists every book and
``POST`` creates one.  Any other method gets a plain-text 405 from
the handler registered in ``main``.  The ``Location`` header returned
on creation points at ``/api/books/{id}``, which serves the single
record.

The request body of ``POST`` is decoded by hand rather than through a
Pydantic body parameter so that an empty body, malformed JSON and a
blank name all produce a plain-text 400 instead of FastAPI's 422.
Storage calls block, so they are handed to the thread pool.
"""

import json
from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from ...core.exceptions import BookValidationError
from ...schemas.book import BookCreate, BookRead
from ...services.book_service import BookService
from ..deps import get_book_service

router = APIRouter()


def decode_book_payload(raw: bytes) -> BookCreate:
    """Decode a ``POST /api/books`` body into ``BookCreate``.

    Raises ``BookValidationError`` for an empty body, malformed JSON
    (the parser's message is included), a non-object document or
    fields of the wrong type.
    """
    if not raw.strip():
        raise BookValidationError("empty body")
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise BookValidationError(f"invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise BookValidationError("request body must be a JSON object")
    try:
        return BookCreate.model_validate(payload)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise BookValidationError(f"invalid book: {problems}") from exc


@router.get("", response_model=List[BookRead])
async def list_books(service: BookService = Depends(get_book_service)) -> List[BookRead]:
    """Return every book ordered by ascending ``id``."""
    return await run_in_threadpool(service.list_books)


@router.post("", response_model=BookRead, status_code=status.HTTP_201_CREATED)
async def create_book(
    request: Request,
    response: Response,
    service: BookService = Depends(get_book_service),
) -> BookRead:
    """Create a book from ``{"name", "author", "finished"?}``.

    Responds with 201, the stored record and a ``Location`` header.
    """
    data = decode_book_payload(await request.body())
    book = await run_in_threadpool(service.create_book, data.name, data.author, data.finished)
    response.headers["Location"] = f"/api/books/{book.id}"
    return book


@router.get("/{book_id}", response_model=BookRead)
async def get_book(book_id: int, service: BookService = Depends(get_book_service)) -> BookRead:
    """Retrieve a single book by its id; 404 if it does not exist."""
    return await run_in_threadpool(service.get_book, book_id)

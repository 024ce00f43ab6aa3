"""FastAPI dependency implementations."""

from fastapi import Request

from ..services.book_service import BookService


def get_book_service(request: Request) -> BookService:
    """Get the book service wired up during application startup."""
    return request.app.state.book_service

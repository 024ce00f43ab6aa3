"""
Top‑level API router.

Aggregates the resource routers under a single prefix.  When a new
resource is introduced, include its router here.
"""

from fastapi import APIRouter

from .endpoints import books

router = APIRouter()

router.include_router(books.router, prefix="/books", tags=["books"])

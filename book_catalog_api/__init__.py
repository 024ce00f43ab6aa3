"""
Top‑level package for the Book Catalog API.

All functionality lives in submodules under ``app``; import the
application with ``book_catalog_api.app.main:app`` or build a new one
with :func:`book_catalog_api.app.main.create_app`.
"""

__all__ = []

"""
Main entrypoint for the Book Catalog API.

This module assembles the FastAPI application, sets up logging,
registers error handlers and includes the API router.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn book_catalog_api.app.main:app --reload

The storage backend is built and initialised in the application
lifespan, so importing this module has no side effects on disk.  If
initialisation fails the server refuses to start.
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Match

from .api.router import router as api_router
from .core.config import Settings, settings as default_settings
from .core.exceptions import BookCatalogError, StorageError
from .core.logging_config import setup_logging
from .services.book_service import BookService
from .storage import BookStorage, build_storage

logger = logging.getLogger(__name__)


async def book_catalog_exception_handler(request: Request, exc: BookCatalogError) -> PlainTextResponse:
    """Turn service and storage errors into plain-text responses.

    Storage failures are logged with their traceback and answered with
    a generic message so backend details never reach the client.
    """
    if isinstance(exc, StorageError):
        logger.error("Storage failure during %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return PlainTextResponse("internal error", status_code=exc.status_code)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    """Answer 405 in plain text with an ``Allow`` header listing every
    method routed for the path.  Other HTTP errors keep FastAPI's
    default handling.
    """
    if exc.status_code != status.HTTP_405_METHOD_NOT_ALLOWED:
        return await http_exception_handler(request, exc)
    allowed: List[str] = []
    for route in request.app.routes:
        match, _ = route.matches(request.scope)
        if match == Match.NONE:
            continue
        for method in sorted(getattr(route, "methods", None) or ()):
            if method not in allowed:
                allowed.append(method)
    return PlainTextResponse(
        "Method not allowed",
        status_code=exc.status_code,
        headers={"Allow": ", ".join(allowed)},
    )


def create_app(settings: Optional[Settings] = None, storage: Optional[BookStorage] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the module-level settings
        read from the environment.
    storage : Optional[BookStorage]
        Pre-built storage backend.  When omitted one is built from
        ``settings`` at startup.  Either way ``initialize`` is called
        before the first request is served.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so that startup can log.
    setup_logging(settings.log_level, settings.log_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        book_storage = storage or build_storage(settings)
        book_storage.initialize()
        app.state.book_service = BookService(book_storage)
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.add_exception_handler(BookCatalogError, book_catalog_exception_handler)
    app.add_exception_handler(StarletteHTTPException, method_not_allowed_handler)
    app.include_router(api_router, prefix="/api")
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()

"""Command-line entry point for the Book Catalog API.

Initialises the configured storage backend, then serves the API with
Uvicorn.  Any failure while preparing storage (an unwritable database,
a missing or corrupt JSON data file) is fatal: it is logged and the
process exits with status 1 instead of serving half-initialised.

Every option falls back to the matching environment variable read by
``book_catalog_api.app.core.config``.

Usage:
    python run.py --backend json --data-file ./books.json --port 8080
"""
import argparse
import asyncio
import dataclasses
import logging
import sys
from typing import List, Optional

from uvicorn import Config, Server

from book_catalog_api.app.core.config import Settings, settings as env_settings
from book_catalog_api.app.core.exceptions import StorageError
from book_catalog_api.app.core.logging_config import setup_logging
from book_catalog_api.app.main import create_app
from book_catalog_api.app.storage import build_storage

logger = logging.getLogger("book_catalog_api.run")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Serve the Book Catalog API.")
    ap.add_argument("--backend", choices=["sqlite", "json"], help="Storage backend to use")
    ap.add_argument("--database", help="Path to the SQLite database file (sqlite backend)")
    ap.add_argument("--data-file", help="Path to the JSON data file (json backend)")
    ap.add_argument("--host", help="Interface to bind")
    ap.add_argument("--port", type=int, help="Port to listen on")
    ap.add_argument("--log-level", help="Logging level, e.g. DEBUG or INFO")
    return ap.parse_args(argv)


def build_settings(args: argparse.Namespace, base: Settings = env_settings) -> Settings:
    """Overlay command-line options on top of ``base``."""
    overrides = {
        "storage_backend": args.backend,
        "database_url": args.database,
        "data_file": args.data_file,
        "host": args.host,
        "port": args.port,
        "log_level": args.log_level,
    }
    return dataclasses.replace(base, **{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[List[str]] = None) -> None:
    settings = build_settings(parse_args(argv))
    setup_logging(settings.log_level, settings.log_file)

    try:
        storage = build_storage(settings)
        storage.initialize()
    except (StorageError, ValueError) as exc:
        logger.critical("Could not initialise %s storage: %s", settings.storage_backend, exc)
        sys.exit(1)

    app = create_app(settings, storage=storage)
    config = Config(app=app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    server = Server(config)
    logger.info("Listening on http://%s:%s", settings.host, settings.port)
    asyncio.run(server.serve())


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass

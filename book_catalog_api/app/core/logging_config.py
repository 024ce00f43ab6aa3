"""
Root logger configuration for the Book Catalog API.

``setup_logging`` may run more than once per process: the module-level
app in ``main`` configures logging at import, and ``run.py`` calls it
again with the command-line level.  Every call applies the requested
level.  The console handler is attached once, and each distinct log
file gets exactly one file handler.  Handlers installed by someone
else (a test runner, an embedding server) are left alone.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_HANDLER_NAME = "book_catalog.console"
FILE_HANDLER_PREFIX = "book_catalog.file:"


def _has_handler(logger: logging.Logger, name: str) -> bool:
    return any(handler.get_name() == name for handler in logger.handlers)


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted, no file
        handler is added.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if not _has_handler(root, CONSOLE_HANDLER_NAME):
        console_handler = logging.StreamHandler()
        console_handler.set_name(CONSOLE_HANDLER_NAME)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        name = f"{FILE_HANDLER_PREFIX}{log_path}"
        if not _has_handler(root, name):
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.set_name(name)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

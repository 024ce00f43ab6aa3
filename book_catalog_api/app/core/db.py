"""
SQLite database integration.

This module provides functions for obtaining a database connection
(``get_connection``), a cursor context manager that commits on success
(``get_cursor``) and the schema bootstrap run at startup (``init_db``).
A fresh connection is opened for every operation so that no handle is
shared between worker threads.
"""

import sqlite3
from contextlib import contextmanager
from typing import Iterator

BOOKS_SCHEMA = """
CREATE TABLE IF NOT EXISTS Books (
    id INTEGER PRIMARY KEY,
    name TEXT,
    author TEXT,
    finished INTEGER
)
"""


def get_connection(db_path: str) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` objects so columns can be
    accessed by name.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(db_path: str) -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit.

    The transaction is committed only when the block exits without an
    exception; otherwise closing the connection discards it.
    """
    conn = get_connection(db_path)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def init_db(db_path: str) -> None:
    """Create the ``Books`` table if it does not exist yet.

    Safe to call on every startup.  Creates the database file itself
    when it is missing.
    """
    with get_cursor(db_path) as cursor:
        cursor.execute(BOOKS_SCHEMA)

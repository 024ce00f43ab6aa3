"""
SQLite storage backend.

Books live in a single ``Books`` table keyed by an integer primary key,
so SQLite assigns ids and serializes concurrent writers itself.  All
queries use parameterized statements.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import List, Optional

from ..core.db import get_connection, get_cursor, init_db
from ..core.exceptions import StorageError
from ..schemas.book import BookRead
from .base import BookStorage

logger = logging.getLogger(__name__)


class SQLiteBookStorage(BookStorage):
    """Store books in a SQLite database file."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    def initialize(self) -> None:
        try:
            init_db(self.db_path)
        except sqlite3.Error as exc:
            raise StorageError(f"could not initialise database {self.db_path}: {exc}") from exc
        logger.info("Using SQLite book storage at %s", self.db_path)

    def list_all(self) -> List[BookRead]:
        try:
            conn = get_connection(self.db_path)
            try:
                rows = conn.execute(
                    "SELECT id, name, author, finished FROM Books ORDER BY id ASC"
                ).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageError(f"could not list books: {exc}") from exc
        return [self._row_to_book(row) for row in rows]

    def insert(self, name: str, author: str, finished: bool) -> int:
        try:
            with get_cursor(self.db_path) as cursor:
                cursor.execute(
                    "INSERT INTO Books (name, author, finished) VALUES (?, ?, ?)",
                    (name, author, int(finished)),
                )
                book_id = cursor.lastrowid
        except sqlite3.Error as exc:
            raise StorageError(f"could not insert book: {exc}") from exc
        return book_id

    def get(self, book_id: int) -> Optional[BookRead]:
        try:
            conn = get_connection(self.db_path)
            try:
                row = conn.execute(
                    "SELECT id, name, author, finished FROM Books WHERE id = ?",
                    (book_id,),
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageError(f"could not read book {book_id}: {exc}") from exc
        if row is None:
            return None
        return self._row_to_book(row)

    @staticmethod
    def _row_to_book(row: sqlite3.Row) -> BookRead:
        """Convert a database row to a BookRead schema instance."""
        return BookRead(
            id=row["id"],
            name=row["name"],
            author=row["author"],
            finished=bool(row["finished"]),
        )

"""One ``sqlite3`` connection with a shared cursor.

The document store talks to SQLite through this object only.  It is opened
with ``check_same_thread=False`` because FastAPI runs sync routes in a
thread pool; :class:`~tendbook.store.sqlite.SqliteDocumentStore` holds its
own lock around every use.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any


class SqliteConnection:
    def __init__(self, path: str = ":memory:") -> None:
        self.path = path
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._cur = self._conn.cursor()

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        return self._cur.execute(sql, params)

    def fetchone(self) -> sqlite3.Row | None:
        return self._cur.fetchone()

    def fetchall(self) -> list[sqlite3.Row]:
        return self._cur.fetchall()

    @property
    def rowcount(self) -> int:
        return self._cur.rowcount

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()

    def close(self) -> None:
        self._conn.close()

    @contextmanager
    def transaction(self) -> Iterator[SqliteConnection]:
        """Everything in the block commits together or is rolled back."""
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        self.commit()

    def __repr__(self) -> str:
        return f"SqliteConnection(path={self.path!r})"


def probe(conn: SqliteConnection) -> Any:
    """Read the schema table; SQLite rejects a non-database file here."""
    return conn.execute("SELECT count(*) FROM sqlite_master").fetchone()

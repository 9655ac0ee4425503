"""
Turn a database URL into an open :class:`SqliteConnection`.

Accepted forms::

    None, "", "memory", ":memory:", "sqlite:///:memory:"   in-memory
    "sqlite:///data/tendbook.db"                            file
    "./data/tendbook.db"                                    file

Relative file paths are taken relative to ``data_dir`` when one is given.
Missing parent directories are created.

A file that exists but fails :func:`probe` is treated as corrupt.  It is
left on disk and :class:`StorageCorruptedError` is raised, unless the caller
passes ``recreate_corrupted=True``, in which case it is deleted and an empty
database takes its place.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path

from tendbook.core.errors import StorageCorruptedError, StorageError
from tendbook.core.logging import get_logger
from tendbook.core.schema import apply_schema
from tendbook.core.sqlite_conn import SqliteConnection, probe

logger = get_logger(__name__)

_MEMORY_ALIASES = frozenset({"", "memory", ":memory:"})
_SQLITE_PREFIXES = ("sqlite:///", "sqlite://")


@dataclass(frozen=True)
class ConnectionInfo:
    """What :func:`create_connection` actually opened.

    ``url`` is the string as given; ``resolved_path`` is the absolute file
    path and stays ``None`` for in-memory databases.
    """

    backend: str
    persistent: bool
    url: str
    resolved_path: str | None = None
    recreated: bool = False

    def __repr__(self) -> str:
        where = f"path={self.resolved_path!r}" if self.resolved_path else f"url={self.url!r}"
        return f"ConnectionInfo(backend={self.backend!r}, persistent={self.persistent}, {where})"


def parse_url(db: str | None) -> tuple[str, str]:
    """``("memory", ":memory:")`` or ``("file", <path>)``."""
    if db is None or db in _MEMORY_ALIASES:
        return "memory", ":memory:"
    target = db
    for prefix in _SQLITE_PREFIXES:
        if db.startswith(prefix):
            target = db.removeprefix(prefix)
            break
    if target in _MEMORY_ALIASES:
        return "memory", ":memory:"
    return "file", target


def _open_file(url: str, path: Path, *, recreate_corrupted: bool) -> tuple[SqliteConnection, ConnectionInfo]:
    if not path.parent.is_dir():
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("database_dir_created", path=str(path.parent))
    resolved = str(path.resolve())
    existed = path.exists()

    conn = SqliteConnection(resolved)
    try:
        probe(conn)
    except sqlite3.DatabaseError as exc:
        conn.close()
        if not existed:
            raise StorageError(f"Failed to create database at {resolved}: {exc}", cause=exc) from exc
        logger.error("database_corrupted", path=resolved, error=str(exc))
        if not recreate_corrupted:
            raise StorageCorruptedError(resolved, cause=exc) from exc
        logger.warning("database_recreating", path=resolved)
        path.unlink()
        return SqliteConnection(resolved), ConnectionInfo(
            "sqlite", True, url, resolved_path=resolved, recreated=True
        )

    logger.info("database_opened", path=resolved, created=not existed)
    return conn, ConnectionInfo("sqlite", True, url, resolved_path=resolved)


def create_connection(
    db: str | None = None,
    *,
    init_schema: bool = False,
    data_dir: str | Path | None = None,
    recreate_corrupted: bool = False,
) -> tuple[SqliteConnection, ConnectionInfo]:
    """Open ``db`` and optionally apply the tendbook schema.

    Raises:
        StorageCorruptedError: the file exists but is not a SQLite database
            and ``recreate_corrupted`` is false.
        StorageError: the database or its tables could not be created.
    """
    scheme, target = parse_url(db)
    if scheme == "memory":
        conn, info = SqliteConnection(":memory:"), ConnectionInfo("sqlite", False, ":memory:")
    else:
        path = Path(target)
        if data_dir is not None and not path.is_absolute():
            path = Path(data_dir) / path
        conn, info = _open_file(target, path, recreate_corrupted=recreate_corrupted)

    if init_schema:
        try:
            apply_schema(conn)
        except sqlite3.DatabaseError as exc:
            conn.close()
            raise StorageError(f"Failed to create tables: {exc}", cause=exc) from exc
    return conn, info

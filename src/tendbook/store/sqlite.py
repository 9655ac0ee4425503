"""SQLite-backed document store.

One row per sync id in ``tendbook_instances``.  The three collections are
JSON text columns, the two cache fields are plain columns, so a replace is a
single ``UPDATE`` inside one transaction.

All statements share one connection and one cursor; ``_io_lock`` serializes
them.  That lock covers single store calls only.  Instance operations hold
the per-key lock from :meth:`locked` across their whole load/modify/replace
round trip.
"""

from __future__ import annotations

import json
import sqlite3
import threading
from pathlib import Path
from typing import Any

from tendbook.core.connection import ConnectionInfo, create_connection
from tendbook.core.errors import DocumentNotFoundError, StorageError
from tendbook.core.logging import get_logger
from tendbook.core.models import InstanceDocument
from tendbook.core.schema import INSTANCES_TABLE, apply_schema
from tendbook.core.sqlite_conn import SqliteConnection
from tendbook.store.base import BaseDocumentStore

logger = get_logger(__name__)

_SELECT = f"""
    SELECT sync_id, tenders, tending_log, last_tended_timestamp, last_tender, chores
    FROM {INSTANCES_TABLE} WHERE sync_id = ?
"""

_INSERT_SEED = f"""
    INSERT OR IGNORE INTO {INSTANCES_TABLE}
        (sync_id, tenders, tending_log, last_tended_timestamp, last_tender, chores)
    VALUES (?, '[]', '[]', NULL, NULL, ?)
"""

_UPDATE = f"""
    UPDATE {INSTANCES_TABLE}
    SET tenders = ?, tending_log = ?, last_tended_timestamp = ?, last_tender = ?, chores = ?
    WHERE sync_id = ?
"""


def _dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class SqliteDocumentStore(BaseDocumentStore):
    """Document store over a :class:`SqliteConnection`."""

    backend = "sqlite"

    def __init__(self, conn: SqliteConnection, info: ConnectionInfo | None = None) -> None:
        super().__init__()
        self._conn = conn
        self.info = info
        self._io_lock = threading.Lock()
        apply_schema(self._conn)

    @classmethod
    def open(
        cls,
        url: str | None,
        *,
        data_dir: str | Path | None = None,
        recreate_corrupted: bool = False,
    ) -> SqliteDocumentStore:
        """Open (creating if needed) the database at ``url``.

        Raises :class:`~tendbook.core.errors.StorageCorruptedError` for an
        unreadable file unless ``recreate_corrupted`` is set.
        """
        conn, info = create_connection(
            url,
            init_schema=True,
            data_dir=data_dir,
            recreate_corrupted=recreate_corrupted,
        )
        return cls(conn, info)

    # -- DocumentStore -----------------------------------------------------

    def get_or_create(self, sync_id: str) -> InstanceDocument:
        self._check_key(sync_id)
        with self._io_lock:
            try:
                row = self._select(sync_id)
                if row is None:
                    seed = InstanceDocument.seed(sync_id)
                    with self._conn.transaction():
                        self._conn.execute(
                            _INSERT_SEED,
                            (sync_id, _dumps([c.to_dict() for c in seed.chores])),
                        )
                        created = self._conn.rowcount == 1
                    row = self._select(sync_id)
                    if created:
                        logger.info("instance_created", sync_id=sync_id, backend=self.backend)
            except (sqlite3.Error, OverflowError) as exc:
                raise StorageError(
                    f"Failed to load instance '{sync_id}': {exc}", cause=exc
                ).with_context(sync_id=sync_id) from exc

        if row is None:
            raise StorageError(f"Instance '{sync_id}' vanished after creation").with_context(
                sync_id=sync_id
            )
        return self._row_to_document(row)

    def replace(self, sync_id: str, document: InstanceDocument) -> None:
        self._check_key(sync_id)
        self._check_document(sync_id, document)
        params = (
            _dumps([t.to_dict() for t in document.tenders]),
            _dumps([e.to_dict() for e in document.tending_log]),
            document.last_tended_timestamp,
            document.last_tender,
            _dumps([c.to_dict() for c in document.chores]),
            sync_id,
        )
        with self._io_lock:
            try:
                with self._conn.transaction():
                    self._conn.execute(_UPDATE, params)
                    updated = self._conn.rowcount
            except (sqlite3.Error, OverflowError) as exc:
                raise StorageError(
                    f"Failed to write instance '{sync_id}': {exc}", cause=exc
                ).with_context(sync_id=sync_id) from exc

        if updated == 0:
            raise DocumentNotFoundError(f"Instance '{sync_id}' does not exist").with_context(
                sync_id=sync_id
            )

    def exists(self, sync_id: str) -> bool:
        with self._io_lock:
            try:
                return self._select(sync_id) is not None
            except sqlite3.Error as exc:
                raise StorageError(f"Failed to query instance '{sync_id}': {exc}", cause=exc) from exc

    def list_sync_ids(self) -> list[str]:
        with self._io_lock:
            try:
                self._conn.execute(f"SELECT sync_id FROM {INSTANCES_TABLE} ORDER BY sync_id")
                return [row[0] for row in self._conn.fetchall()]
            except sqlite3.Error as exc:
                raise StorageError(f"Failed to list instances: {exc}", cause=exc) from exc

    def ping(self) -> None:
        with self._io_lock:
            try:
                self._conn.execute(f"SELECT COUNT(*) FROM {INSTANCES_TABLE}")
                self._conn.fetchone()
            except sqlite3.Error as exc:
                raise StorageError(f"Store unavailable: {exc}", cause=exc) from exc

    def close(self) -> None:
        with self._io_lock:
            self._conn.close()

    # -- Helpers -----------------------------------------------------------

    def _select(self, sync_id: str) -> Any:
        self._conn.execute(_SELECT, (sync_id,))
        return self._conn.fetchone()

    @staticmethod
    def _row_to_document(row: Any) -> InstanceDocument:
        d = dict(row)
        sync_id = d["sync_id"]
        try:
            return InstanceDocument.from_dict(
                {
                    "sync_id": sync_id,
                    "tenders": json.loads(d["tenders"] or "[]"),
                    "chores": json.loads(d["chores"] or "[]"),
                    "tending_log": json.loads(d["tending_log"] or "[]"),
                    "last_tended_timestamp": d["last_tended_timestamp"],
                    "last_tender": d["last_tender"],
                }
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise StorageError(
                f"Stored document for '{sync_id}' is corrupt: {exc}", cause=exc
            ).with_context(sync_id=sync_id) from exc

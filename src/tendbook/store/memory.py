"""In-memory document store, for tests and ``TENDBOOK_DATABASE_URL=memory``."""

from __future__ import annotations

import threading
from typing import Any

from tendbook.core.errors import DocumentNotFoundError, StorageError
from tendbook.core.logging import get_logger
from tendbook.core.models import InstanceDocument
from tendbook.store.base import BaseDocumentStore

logger = get_logger(__name__)


class InMemoryDocumentStore(BaseDocumentStore):
    """Documents held as plain dicts; every read and write copies.

    Callers never share objects with the stored state, so mutating a loaded
    document has no effect until it is passed to :meth:`replace`.
    """

    backend = "memory"

    def __init__(self) -> None:
        super().__init__()
        self._io_lock = threading.Lock()
        self._docs: dict[str, dict[str, Any]] = {}
        self._closed = False

    def get_or_create(self, sync_id: str) -> InstanceDocument:
        self._check_key(sync_id)
        with self._io_lock:
            self._check_open()
            data = self._docs.get(sync_id)
            if data is None:
                data = self._docs[sync_id] = InstanceDocument.seed(sync_id).to_dict()
                logger.info("instance_created", sync_id=sync_id, backend=self.backend)
            return InstanceDocument.from_dict(data)

    def replace(self, sync_id: str, document: InstanceDocument) -> None:
        self._check_key(sync_id)
        self._check_document(sync_id, document)
        data = document.to_dict()
        with self._io_lock:
            self._check_open()
            if sync_id not in self._docs:
                raise DocumentNotFoundError(
                    f"Instance '{sync_id}' does not exist"
                ).with_context(sync_id=sync_id)
            self._docs[sync_id] = data

    def exists(self, sync_id: str) -> bool:
        with self._io_lock:
            return sync_id in self._docs

    def list_sync_ids(self) -> list[str]:
        with self._io_lock:
            return sorted(self._docs)

    def ping(self) -> None:
        self._check_open()

    def close(self) -> None:
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise StorageError("Store is closed")

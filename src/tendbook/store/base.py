"""Shared behaviour of the document store backends."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from tendbook.core.errors import InvalidArgumentError
from tendbook.core.models import InstanceDocument
from tendbook.store.locks import KeyedLockRegistry


class BaseDocumentStore:
    """Per-key locking and argument checks common to every backend.

    Subclasses implement ``get_or_create``, ``replace``, ``exists``,
    ``list_sync_ids``, ``ping`` and ``close``.
    """

    backend: str = "unknown"

    def __init__(self) -> None:
        self._key_locks = KeyedLockRegistry()

    @contextmanager
    def locked(self, sync_id: str) -> Iterator[None]:
        """Critical section for one sync id (see :class:`KeyedLockRegistry`)."""
        with self._key_locks.hold(sync_id):
            yield

    @property
    def key_locks(self) -> KeyedLockRegistry:
        return self._key_locks

    @staticmethod
    def _check_key(sync_id: str) -> None:
        if not isinstance(sync_id, str) or not sync_id.strip():
            raise InvalidArgumentError("sync_id must be a non-empty string")

    @staticmethod
    def _check_document(sync_id: str, document: InstanceDocument) -> None:
        if document.sync_id != sync_id:
            raise InvalidArgumentError(
                f"Document belongs to '{document.sync_id}', not '{sync_id}'"
            )

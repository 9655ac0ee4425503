"""
Structural protocols shared across tendbook.

``Connection`` is the DB-API subset the SQLite store relies on;
``DocumentStore`` is the contract every storage backend satisfies and the
only thing :mod:`tendbook.ops` knows about persistence.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tendbook.core.models import InstanceDocument


@runtime_checkable
class Connection(Protocol):
    """Minimal synchronous database connection."""

    def execute(self, sql: str, params: tuple = ()) -> Any: ...

    def fetchone(self) -> Any: ...

    def fetchall(self) -> list: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def close(self) -> None: ...


@runtime_checkable
class DocumentStore(Protocol):
    """Keyed storage of one :class:`InstanceDocument` per sync id.

    Guarantees:
        - ``get_or_create`` seeds a missing key exactly once, even when two
          callers race on the same unseen key.
        - ``replace`` is a single atomic whole-document write; readers never
          see a half-written document.
        - ``locked(sync_id)`` serializes callers on one key and leaves other
          keys untouched.
    """

    backend: str

    def get_or_create(self, sync_id: str) -> InstanceDocument: ...

    def replace(self, sync_id: str, document: InstanceDocument) -> None: ...

    def exists(self, sync_id: str) -> bool: ...

    def list_sync_ids(self) -> list[str]: ...

    def locked(self, sync_id: str) -> AbstractContextManager[None]: ...

    def ping(self) -> None: ...

    def close(self) -> None: ...

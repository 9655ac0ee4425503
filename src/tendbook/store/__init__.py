"""
Document store: durable keyed storage of one instance document per sync id.

Usage::

    from tendbook.store import open_store

    store = open_store("sqlite:///tendbook.db")
    with store.locked("kitchen"):
        doc = store.get_or_create("kitchen")
        doc.tenders.append(...)
        store.replace("kitchen", doc)
"""

from __future__ import annotations

from pathlib import Path

from tendbook.core.connection import parse_url
from tendbook.core.protocols import DocumentStore
from tendbook.store.locks import KeyedLockRegistry
from tendbook.store.memory import InMemoryDocumentStore
from tendbook.store.sqlite import SqliteDocumentStore


def open_store(
    url: str | None,
    *,
    data_dir: str | Path | None = None,
    recreate_corrupted: bool = False,
) -> DocumentStore:
    """Build the store backend for ``url``.

    ``memory`` (or ``None``) gives an :class:`InMemoryDocumentStore`;
    anything else is treated as a SQLite URL or path.
    """
    scheme, _ = parse_url(url)
    if scheme == "memory":
        return InMemoryDocumentStore()
    return SqliteDocumentStore.open(
        url, data_dir=data_dir, recreate_corrupted=recreate_corrupted
    )


__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "KeyedLockRegistry",
    "SqliteDocumentStore",
    "open_store",
]

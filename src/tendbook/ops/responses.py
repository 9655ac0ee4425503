"""
Typed response payloads beyond the domain models themselves.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LastTended:
    """Payload of :func:`tendbook.ops.history.get_last_tended`."""

    last_tended_timestamp: int | None = None
    last_tender: str | None = None


@dataclass(frozen=True, slots=True)
class ImportSummary:
    """Payload of :func:`tendbook.ops.imports.import_document`.

    Counts are of records *presented* in the import, not records inserted:
    ids already present are skipped silently and still counted here.
    """

    tenders: int = 0
    chores: int = 0
    history_entries: int = 0


@dataclass(frozen=True, slots=True)
class StoreHealth:
    """Payload of :func:`tendbook.ops.database.check_store_health`."""

    connected: bool
    backend: str = "unknown"
    instance_count: int = 0
    latency_ms: float = 0.0
    path: str | None = None
    recreated: bool = False

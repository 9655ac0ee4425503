"""
Domain models for an instance document.

An :class:`InstanceDocument` is the unit of storage: one per sync id, owning
its tenders, chores and tending log outright.  Nothing is shared between
documents.

History entries keep the tender's *name* as a plain string (``person``) and
the chore's id as a soft reference (``chore_id``).  Renaming or deleting a
tender never touches past entries, and ``chore_id`` may dangle.

The two cached fields, ``last_tended_timestamp`` and ``last_tender``, mirror
the newest entry of ``tending_log``; :meth:`InstanceDocument.recompute_last_tended`
restores them after deletions.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from tendbook.core.timestamps import CHORE_PREFIX, generate_id

DEFAULT_CHORE_NAME = "Water the plants"
DEFAULT_CHORE_ICON = "🪴"


@dataclass(slots=True)
class Tender:
    """A person who tends chores."""

    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Tender:
        return cls(id=data["id"], name=data["name"])


@dataclass(slots=True)
class Chore:
    """A recurring household task with a display icon."""

    id: str
    name: str
    icon: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "icon": self.icon}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Chore:
        return cls(id=data["id"], name=data["name"], icon=data["icon"])


@dataclass(slots=True)
class HistoryEntry:
    """One tending action: ``person`` did ``chore_id`` at ``timestamp`` (ms)."""

    id: str
    timestamp: int
    person: str
    chore_id: str | None
    notes: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "person": self.person,
            "chore_id": self.chore_id,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryEntry:
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            person=data["person"],
            chore_id=data.get("chore_id"),
            notes=data.get("notes") or None,
        )


@dataclass
class InstanceDocument:
    """Everything stored under one sync id."""

    sync_id: str
    tenders: list[Tender] = field(default_factory=list)
    chores: list[Chore] = field(default_factory=list)
    tending_log: list[HistoryEntry] = field(default_factory=list)
    last_tended_timestamp: int | None = None
    last_tender: str | None = None

    @classmethod
    def seed(cls, sync_id: str) -> InstanceDocument:
        """The document a sync id gets on first access."""
        default_chore = Chore(
            id=generate_id(CHORE_PREFIX),
            name=DEFAULT_CHORE_NAME,
            icon=DEFAULT_CHORE_ICON,
        )
        return cls(sync_id=sync_id, chores=[default_chore])

    # -- Lookup ------------------------------------------------------------

    def find_tender(self, tender_id: str) -> Tender | None:
        return next((t for t in self.tenders if t.id == tender_id), None)

    def find_chore(self, chore_id: str) -> Chore | None:
        return next((c for c in self.chores if c.id == chore_id), None)

    def find_entry(self, entry_id: str) -> HistoryEntry | None:
        return next((e for e in self.tending_log if e.id == entry_id), None)

    # -- Derived fields ----------------------------------------------------

    def recompute_last_tended(self) -> None:
        """Reset the cached fields from a full scan of ``tending_log``.

        Ties on the maximum timestamp go to the first entry in stored order.
        """
        latest: HistoryEntry | None = None
        for entry in self.tending_log:
            if latest is None or entry.timestamp > latest.timestamp:
                latest = entry
        if latest is None:
            self.last_tended_timestamp = None
            self.last_tender = None
        else:
            self.last_tended_timestamp = latest.timestamp
            self.last_tender = latest.person

    def history_newest_first(self) -> list[HistoryEntry]:
        """Entries by timestamp descending; equal timestamps keep insertion order."""
        return sorted(self.tending_log, key=lambda e: e.timestamp, reverse=True)

    # -- Serialization -----------------------------------------------------

    def copy(self) -> InstanceDocument:
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sync_id": self.sync_id,
            "tenders": [t.to_dict() for t in self.tenders],
            "chores": [c.to_dict() for c in self.chores],
            "tending_log": [e.to_dict() for e in self.tending_log],
            "last_tended_timestamp": self.last_tended_timestamp,
            "last_tender": self.last_tender,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InstanceDocument:
        return cls(
            sync_id=data["sync_id"],
            tenders=[Tender.from_dict(t) for t in data.get("tenders") or []],
            chores=[Chore.from_dict(c) for c in data.get("chores") or []],
            tending_log=[HistoryEntry.from_dict(e) for e in data.get("tending_log") or []],
            last_tended_timestamp=data.get("last_tended_timestamp"),
            last_tender=data.get("last_tender"),
        )


__all__ = [
    "DEFAULT_CHORE_ICON",
    "DEFAULT_CHORE_NAME",
    "Chore",
    "HistoryEntry",
    "InstanceDocument",
    "Tender",
]

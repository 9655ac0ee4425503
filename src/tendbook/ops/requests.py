"""
Typed request objects for operations with more than one optional input.

Requests carry transport-agnostic data only.  Values are validated by the
operation itself, so a request may hold blank strings.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UpdateChoreRequest:
    """Request for :func:`tendbook.ops.chores.update_chore`.

    Attributes:
        chore_id: Chore to update.
        name: New name, or ``None`` to keep the current one.
        icon: New icon, or ``None`` to keep the current one.
    """

    chore_id: str = ""
    name: str | None = None
    icon: str | None = None


@dataclass(frozen=True, slots=True)
class RecordTendingRequest:
    """Request for :func:`tendbook.ops.history.record_tending`.

    Attributes:
        tender_name: Name of whoever tended.  Need not match a known tender.
        chore_id: Chore that was tended.  Need not match a known chore.
        notes: Optional free text; blank is stored as absent.
    """

    tender_name: str = ""
    chore_id: str = ""
    notes: str | None = None

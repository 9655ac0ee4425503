"""
Domain-specific Pydantic schemas for the API layer.

These mirror the dataclasses in ``tendbook.core.models`` and
``tendbook.ops.responses`` as Pydantic models so they get JSON
serialisation and OpenAPI schema generation.  The real types live there.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# ── Tenders and chores ───────────────────────────────────────────────────


class TenderSchema(BaseModel):
    """A person who tends chores."""

    id: str = Field(description="Tender id (``c_<ms>_<rand>``)")
    name: str = Field(description="Display name; not unique")


class ChoreSchema(BaseModel):
    """A chore shown as a tile."""

    id: str = Field(description="Chore id (``chore_<ms>_<rand>``)")
    name: str = Field(description="Display name")
    icon: str = Field(description="Short display glyph, usually one emoji")


# ── Tending log ──────────────────────────────────────────────────────────


class HistoryEntrySchema(BaseModel):
    """One tending action."""

    id: str = Field(description="Entry id (``h_<ms>_<rand>``)")
    timestamp: int = Field(description="Milliseconds since the Unix epoch")
    person: str = Field(description="Tender name at the time of tending")
    chore_id: str | None = Field(default=None, description="Chore tended; may no longer exist")
    notes: str | None = Field(default=None, description="Free text, absent when blank")


class LastTendedSchema(BaseModel):
    """Newest tending across the whole instance."""

    last_tended_timestamp: int | None = None
    last_tender: str | None = None


# ── Import / export ──────────────────────────────────────────────────────


class ImportSummarySchema(BaseModel):
    """Counts of records presented in an import (not records inserted)."""

    tenders: int = 0
    chores: int = 0
    history_entries: int = 0


class ImportResultSchema(BaseModel):
    """Response of ``POST /import``."""

    success: bool = True
    imported: ImportSummarySchema


class ExportSchema(BaseModel):
    """External document shape, accepted back by ``POST /import``."""

    caretakers: list[TenderSchema] = Field(default_factory=list)
    chores: list[ChoreSchema] = Field(default_factory=list)
    tending_log: list[HistoryEntrySchema] = Field(default_factory=list)
    last_tended_timestamp: int | None = None
    last_caretaker: str | None = None

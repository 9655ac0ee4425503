"""
Tending log router.

Endpoints:
    POST   /{sync_id}/tend                  Record a tending
    GET    /{sync_id}/history               Tending log, newest first
    DELETE /{sync_id}/history/{entry_id}    Remove one entry
    GET    /{sync_id}/last-tended           Newest tending of the instance
"""

from __future__ import annotations

from fastapi import APIRouter, Path
from pydantic import AliasChoices, BaseModel, Field

from tendbook.api.deps import OpContext
from tendbook.api.schemas.domains import HistoryEntrySchema, LastTendedSchema
from tendbook.api.utils import as_fields, failure_response
from tendbook.ops import history as ops
from tendbook.ops.requests import RecordTendingRequest

router = APIRouter(prefix="/{sync_id}")


class TendBody(BaseModel):
    """Request body for ``POST /tend``.

    ``chore_id`` is also accepted as ``choreId``.
    """

    tender: str = Field(description="Name of whoever tended; need not be a known tender")
    chore_id: str = Field(
        validation_alias=AliasChoices("chore_id", "choreId"),
        description="Chore tended; need not be a known chore",
    )
    notes: str | None = Field(default=None, description="Optional free text")


@router.post("/tend", response_model=HistoryEntrySchema, status_code=201)
def record_tending(
    ctx: OpContext,
    body: TendBody,
    sync_id: str = Path(..., description="Instance key"),
):
    """Record that ``tender`` tended ``chore_id`` now.

    Raises:
        400 INVALID_ARGUMENT: Blank tender or chore id.

    Example:
        POST /api/kitchen/tend
        {"tender": "Alice", "choreId": "chore_1718036400000_a1b2c", "notes": "half a can"}
    """
    request = RecordTendingRequest(
        tender_name=body.tender,
        chore_id=body.chore_id,
        notes=body.notes,
    )
    result = ops.record_tending(ctx, sync_id, request)
    if not result.success:
        return failure_response(result)
    return HistoryEntrySchema(**as_fields(result.data))


@router.get("/history", response_model=list[HistoryEntrySchema])
def list_history(ctx: OpContext, sync_id: str = Path(..., description="Instance key")):
    """Whole tending log, timestamp descending."""
    result = ops.list_history(ctx, sync_id)
    if not result.success:
        return failure_response(result)
    return [HistoryEntrySchema(**as_fields(e)) for e in result.data]


@router.delete("/history/{entry_id}", status_code=204)
def delete_history_entry(
    ctx: OpContext,
    sync_id: str = Path(..., description="Instance key"),
    entry_id: str = Path(..., description="History entry ID"),
):
    """Remove one entry; the last-tended fields follow.

    Raises:
        404 NOT_FOUND: No entry with this id.
    """
    result = ops.delete_history_entry(ctx, sync_id, entry_id)
    if not result.success:
        return failure_response(result)
    return None


@router.get("/last-tended", response_model=LastTendedSchema)
def get_last_tended(ctx: OpContext, sync_id: str = Path(..., description="Instance key")):
    result = ops.get_last_tended(ctx, sync_id)
    if not result.success:
        return failure_response(result)
    return LastTendedSchema(**as_fields(result.data))

"""
Tenders router: the people of one instance.

Endpoints:
    GET    /{sync_id}/tenders              List tenders
    POST   /{sync_id}/tenders              Add a tender
    PUT    /{sync_id}/tenders/{tender_id}  Rename a tender
    DELETE /{sync_id}/tenders/{tender_id}  Remove a tender (history is kept)
"""

from __future__ import annotations

from fastapi import APIRouter, Path
from pydantic import BaseModel, Field

from tendbook.api.deps import OpContext
from tendbook.api.schemas.domains import TenderSchema
from tendbook.api.utils import as_fields, failure_response
from tendbook.ops import tenders as ops

router = APIRouter(prefix="/{sync_id}/tenders")


class TenderBody(BaseModel):
    """Request body for adding or renaming a tender."""

    name: str = Field(description="Display name; trimmed, must not be blank")


@router.get("", response_model=list[TenderSchema])
def list_tenders(ctx: OpContext, sync_id: str = Path(..., description="Instance key")):
    """List tenders in insertion order."""
    result = ops.list_tenders(ctx, sync_id)
    if not result.success:
        return failure_response(result)
    return [TenderSchema(**as_fields(t)) for t in result.data]


@router.post("", response_model=TenderSchema, status_code=201)
def add_tender(
    ctx: OpContext,
    body: TenderBody,
    sync_id: str = Path(..., description="Instance key"),
):
    """Add a tender.

    Raises:
        400 INVALID_ARGUMENT: Blank name.

    Example:
        POST /api/kitchen/tenders
        {"name": "Alice"}

        Response (201):
        {"id": "c_1718036400000_k3j9x", "name": "Alice"}
    """
    result = ops.add_tender(ctx, sync_id, body.name)
    if not result.success:
        return failure_response(result)
    return TenderSchema(**as_fields(result.data))


@router.put("/{tender_id}", response_model=TenderSchema)
def rename_tender(
    ctx: OpContext,
    body: TenderBody,
    sync_id: str = Path(..., description="Instance key"),
    tender_id: str = Path(..., description="Tender ID"),
):
    """Rename a tender.  Past history entries keep the old name.

    Raises:
        400 INVALID_ARGUMENT: Blank name.
        404 NOT_FOUND: No tender with this id.
    """
    result = ops.rename_tender(ctx, sync_id, tender_id, body.name)
    if not result.success:
        return failure_response(result)
    return TenderSchema(**as_fields(result.data))


@router.delete("/{tender_id}", status_code=204)
def delete_tender(
    ctx: OpContext,
    sync_id: str = Path(..., description="Instance key"),
    tender_id: str = Path(..., description="Tender ID"),
):
    """Remove a tender.

    Raises:
        404 NOT_FOUND: No tender with this id.
    """
    result = ops.delete_tender(ctx, sync_id, tender_id)
    if not result.success:
        return failure_response(result)
    return None

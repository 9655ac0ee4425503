"""
Chores router.

Endpoints:
    GET    /{sync_id}/chores             List chores
    POST   /{sync_id}/chores             Add a chore
    PUT    /{sync_id}/chores/{chore_id}  Rename and/or re-icon a chore
    DELETE /{sync_id}/chores/{chore_id}  Remove a chore and its history
"""

from __future__ import annotations

from fastapi import APIRouter, Path
from pydantic import BaseModel, Field

from tendbook.api.deps import OpContext
from tendbook.api.schemas.domains import ChoreSchema
from tendbook.api.utils import as_fields, failure_response
from tendbook.ops import chores as ops
from tendbook.ops.requests import UpdateChoreRequest

router = APIRouter(prefix="/{sync_id}/chores")


class CreateChoreBody(BaseModel):
    name: str = Field(description="Display name; trimmed, must not be blank")
    icon: str = Field(description="Display glyph; trimmed, must not be blank")


class UpdateChoreBody(BaseModel):
    """Partial update.  Omitted or blank fields keep their current value."""

    name: str | None = None
    icon: str | None = None


@router.get("", response_model=list[ChoreSchema])
def list_chores(ctx: OpContext, sync_id: str = Path(..., description="Instance key")):
    """List chores in insertion order.  A new instance has one seed chore."""
    result = ops.list_chores(ctx, sync_id)
    if not result.success:
        return failure_response(result)
    return [ChoreSchema(**as_fields(c)) for c in result.data]


@router.post("", response_model=ChoreSchema, status_code=201)
def add_chore(
    ctx: OpContext,
    body: CreateChoreBody,
    sync_id: str = Path(..., description="Instance key"),
):
    """Add a chore.

    Raises:
        400 INVALID_ARGUMENT: Blank name or icon.
    """
    result = ops.add_chore(ctx, sync_id, body.name, body.icon)
    if not result.success:
        return failure_response(result)
    return ChoreSchema(**as_fields(result.data))


@router.put("/{chore_id}", response_model=ChoreSchema)
def update_chore(
    ctx: OpContext,
    body: UpdateChoreBody,
    sync_id: str = Path(..., description="Instance key"),
    chore_id: str = Path(..., description="Chore ID"),
):
    """Rename and/or re-icon a chore.

    Raises:
        400 INVALID_ARGUMENT: Neither name nor icon given.
        404 NOT_FOUND: No chore with this id.

    Example:
        PUT /api/kitchen/chores/chore_1718036400000_a1b2c
        {"icon": "💧"}
    """
    request = UpdateChoreRequest(chore_id=chore_id, name=body.name, icon=body.icon)
    result = ops.update_chore(ctx, sync_id, request)
    if not result.success:
        return failure_response(result)
    return ChoreSchema(**as_fields(result.data))


@router.delete("/{chore_id}", status_code=204)
def delete_chore(
    ctx: OpContext,
    sync_id: str = Path(..., description="Instance key"),
    chore_id: str = Path(..., description="Chore ID"),
):
    """Remove a chore together with every history entry recorded for it.

    Raises:
        404 NOT_FOUND: No chore with this id.
    """
    result = ops.delete_chore(ctx, sync_id, chore_id)
    if not result.success:
        return failure_response(result)
    return None

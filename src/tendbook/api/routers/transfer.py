"""
Import/export router: move a whole instance between sync ids or servers.

Endpoints:
    POST   /{sync_id}/import    Merge an export into the instance
    GET    /{sync_id}/export    The instance in the importable shape
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Path

from tendbook.api.deps import OpContext
from tendbook.api.schemas.domains import ExportSchema, ImportResultSchema, ImportSummarySchema
from tendbook.api.utils import as_fields, failure_response
from tendbook.ops import imports as ops

router = APIRouter(prefix="/{sync_id}")


@router.post("/import", response_model=ImportResultSchema)
def import_document(
    ctx: OpContext,
    payload: dict[str, Any] = Body(..., description="Exported document"),
    sync_id: str = Path(..., description="Instance key"),
):
    """Merge an exported document into the instance.

    Records whose id already exists are skipped, so repeating an import
    is harmless.  The counts returned are of records presented, not
    records inserted.

    Raises:
        400 INVALID_ARGUMENT: Missing collection or malformed record.

    Example:
        POST /api/kitchen/import
        {"caretakers": [], "chores": [], "tending_log": []}

        Response:
        {"success": true, "imported": {"tenders": 0, "chores": 0, "history_entries": 0}}
    """
    result = ops.import_document(ctx, sync_id, payload)
    if not result.success:
        return failure_response(result)
    return ImportResultSchema(imported=ImportSummarySchema(**as_fields(result.data)))


@router.get("/export", response_model=ExportSchema)
def export_document(ctx: OpContext, sync_id: str = Path(..., description="Instance key")):
    """The whole instance, in the shape ``POST /import`` accepts."""
    result = ops.export_document(ctx, sync_id)
    if not result.success:
        return failure_response(result)
    return ExportSchema.model_validate(result.data)

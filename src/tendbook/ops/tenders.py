"""
Tender operations.

Tenders are the people who tend chores.  Names are not unique, and neither
renaming nor deleting a tender touches the tending log: history entries hold
a copy of the name, not a reference.
"""

from __future__ import annotations

from functools import partial

from tendbook.core.errors import NotFoundError
from tendbook.core.logging import get_logger
from tendbook.core.models import Tender
from tendbook.core.timestamps import TENDER_PREFIX, generate_id
from tendbook.ops.context import OperationContext
from tendbook.ops.instance import (
    error_result,
    fresh_id,
    instance_transaction,
    read_instance,
    require_text,
)
from tendbook.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def list_tenders(ctx: OperationContext, sync_id: str) -> OperationResult[list[Tender]]:
    """All tenders of the instance, in insertion order."""
    timer = start_timer()
    try:
        doc = read_instance(ctx, sync_id)
        return OperationResult.ok(doc.tenders, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return error_result(exc, timer, operation="list_tenders")


def add_tender(ctx: OperationContext, sync_id: str, name: str) -> OperationResult[Tender]:
    """Append a tender with a freshly generated id."""
    timer = start_timer()
    try:
        clean = require_text(name, "Invalid name for tender")
        with instance_transaction(ctx, sync_id) as doc:
            taken = {t.id for t in doc.tenders}
            tender = Tender(id=fresh_id(partial(generate_id, TENDER_PREFIX), taken), name=clean)
            doc.tenders.append(tender)
        logger.info("tender_added", sync_id=sync_id, tender_id=tender.id)
        return OperationResult.ok(tender, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return error_result(exc, timer, operation="add_tender")


def rename_tender(
    ctx: OperationContext,
    sync_id: str,
    tender_id: str,
    new_name: str,
) -> OperationResult[Tender]:
    """Rename in place; list position and history are unchanged."""
    timer = start_timer()
    try:
        clean = require_text(new_name, "Invalid new name for tender")
        with instance_transaction(ctx, sync_id) as doc:
            tender = doc.find_tender(tender_id)
            if tender is None:
                raise NotFoundError("Tender not found").with_context(
                    sync_id=sync_id, item_id=tender_id
                )
            tender.name = clean
        logger.info("tender_renamed", sync_id=sync_id, tender_id=tender_id)
        return OperationResult.ok(tender, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return error_result(exc, timer, operation="rename_tender")


def delete_tender(ctx: OperationContext, sync_id: str, tender_id: str) -> OperationResult[None]:
    """Remove a tender.  History entries naming them are kept."""
    timer = start_timer()
    try:
        with instance_transaction(ctx, sync_id) as doc:
            remaining = [t for t in doc.tenders if t.id != tender_id]
            if len(remaining) == len(doc.tenders):
                raise NotFoundError("Tender not found").with_context(
                    sync_id=sync_id, item_id=tender_id
                )
            doc.tenders = remaining
        logger.info("tender_deleted", sync_id=sync_id, tender_id=tender_id)
        return OperationResult.ok(None, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return error_result(exc, timer, operation="delete_tender")

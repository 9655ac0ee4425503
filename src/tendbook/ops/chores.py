"""
Chore operations.

Deleting a chore cascades: every tending log entry pointing at it goes too,
and the last-tended fields are recomputed from what is left.
"""

from __future__ import annotations

from functools import partial

from tendbook.core.errors import InvalidArgumentError, NotFoundError
from tendbook.core.logging import get_logger
from tendbook.core.models import Chore
from tendbook.core.timestamps import CHORE_PREFIX, generate_id
from tendbook.ops.context import OperationContext
from tendbook.ops.instance import (
    error_result,
    fresh_id,
    instance_transaction,
    read_instance,
    require_text,
)
from tendbook.ops.requests import UpdateChoreRequest
from tendbook.ops.result import OperationResult, start_timer

logger = get_logger(__name__)

_INVALID_CHORE = "Invalid name or icon for chore"


def list_chores(ctx: OperationContext, sync_id: str) -> OperationResult[list[Chore]]:
    """All chores of the instance, in insertion order."""
    timer = start_timer()
    try:
        doc = read_instance(ctx, sync_id)
        return OperationResult.ok(doc.chores, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return error_result(exc, timer, operation="list_chores")


def add_chore(
    ctx: OperationContext,
    sync_id: str,
    name: str,
    icon: str,
) -> OperationResult[Chore]:
    """Append a chore.  Both ``name`` and ``icon`` are required.

    Icon length is not checked here; that is a display concern.
    """
    timer = start_timer()
    try:
        clean_name = require_text(name, _INVALID_CHORE)
        clean_icon = require_text(icon, _INVALID_CHORE)
        with instance_transaction(ctx, sync_id) as doc:
            taken = {c.id for c in doc.chores}
            chore = Chore(
                id=fresh_id(partial(generate_id, CHORE_PREFIX), taken),
                name=clean_name,
                icon=clean_icon,
            )
            doc.chores.append(chore)
        logger.info("chore_added", sync_id=sync_id, chore_id=chore.id)
        return OperationResult.ok(chore, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return error_result(exc, timer, operation="add_chore")


def update_chore(
    ctx: OperationContext,
    sync_id: str,
    request: UpdateChoreRequest,
) -> OperationResult[Chore]:
    """Rename and/or re-icon a chore.

    At least one of ``name`` / ``icon`` must be a non-blank string.  A blank
    or missing field is left unchanged.
    """
    timer = start_timer()
    try:
        name = _optional_text(request.name)
        icon = _optional_text(request.icon)
        if name is None and icon is None:
            raise InvalidArgumentError(_INVALID_CHORE)

        with instance_transaction(ctx, sync_id) as doc:
            chore = doc.find_chore(request.chore_id)
            if chore is None:
                raise NotFoundError("Chore not found").with_context(
                    sync_id=sync_id, item_id=request.chore_id
                )
            if name is not None:
                chore.name = name
            if icon is not None:
                chore.icon = icon
        logger.info("chore_updated", sync_id=sync_id, chore_id=chore.id)
        return OperationResult.ok(chore, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return error_result(exc, timer, operation="update_chore")


def delete_chore(ctx: OperationContext, sync_id: str, chore_id: str) -> OperationResult[None]:
    """Remove a chore and every tending log entry for it."""
    timer = start_timer()
    try:
        with instance_transaction(ctx, sync_id) as doc:
            remaining = [c for c in doc.chores if c.id != chore_id]
            if len(remaining) == len(doc.chores):
                raise NotFoundError("Chore not found").with_context(
                    sync_id=sync_id, item_id=chore_id
                )
            doc.chores = remaining
            before = len(doc.tending_log)
            doc.tending_log = [e for e in doc.tending_log if e.chore_id != chore_id]
            removed = before - len(doc.tending_log)
            doc.recompute_last_tended()
        logger.info(
            "chore_deleted", sync_id=sync_id, chore_id=chore_id, history_removed=removed
        )
        return OperationResult.ok(None, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return error_result(exc, timer, operation="delete_chore")


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentError(_INVALID_CHORE)
    return value.strip() or None

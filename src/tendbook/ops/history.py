"""
Tending log operations.

The log is append-only apart from explicit deletion.  Two cached fields
follow it:

- ``last_tended_timestamp``: max timestamp in the log, ``None`` when empty
- ``last_tender``: ``person`` of that entry

``record_tending`` sets both from the entry it creates (it is the newest by
construction).  Deleting an entry recomputes them, with a shortcut when the
deleted entry is strictly older than the cached maximum.
"""

from __future__ import annotations

from functools import partial

from tendbook.core.errors import InvalidArgumentError, NotFoundError
from tendbook.core.logging import get_logger
from tendbook.core.models import HistoryEntry
from tendbook.core.timestamps import HISTORY_PREFIX, generate_id, now_ms
from tendbook.ops.context import OperationContext
from tendbook.ops.instance import (
    error_result,
    fresh_id,
    instance_transaction,
    read_instance,
    require_text,
)
from tendbook.ops.requests import RecordTendingRequest
from tendbook.ops.responses import LastTended
from tendbook.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def record_tending(
    ctx: OperationContext,
    sync_id: str,
    request: RecordTendingRequest,
) -> OperationResult[HistoryEntry]:
    """Append a tending entry stamped with the current time.

    ``tender_name`` and ``chore_id`` are not checked against the instance's
    tenders and chores: one-off tenders are allowed, and adding them to the
    tender list is up to the caller.
    """
    timer = start_timer()
    try:
        person = require_text(request.tender_name, "Invalid tender or chore identifier")
        chore_id = require_text(request.chore_id, "Invalid tender or chore identifier")
        notes = request.notes
        if notes is not None:
            if not isinstance(notes, str):
                raise InvalidArgumentError("Invalid notes for tending")
            notes = notes.strip() or None

        with instance_transaction(ctx, sync_id) as doc:
            timestamp = now_ms()
            taken = {e.id for e in doc.tending_log}
            entry = HistoryEntry(
                id=fresh_id(partial(generate_id, HISTORY_PREFIX, timestamp), taken),
                timestamp=timestamp,
                person=person,
                chore_id=chore_id,
                notes=notes,
            )
            doc.tending_log.append(entry)
            doc.last_tended_timestamp = entry.timestamp
            doc.last_tender = entry.person
        logger.info("tending_recorded", sync_id=sync_id, entry_id=entry.id, chore_id=chore_id)
        return OperationResult.ok(entry, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return error_result(exc, timer, operation="record_tending")


def list_history(ctx: OperationContext, sync_id: str) -> OperationResult[list[HistoryEntry]]:
    """All entries, newest first; equal timestamps keep insertion order."""
    timer = start_timer()
    try:
        doc = read_instance(ctx, sync_id)
        return OperationResult.ok(doc.history_newest_first(), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return error_result(exc, timer, operation="list_history")


def delete_history_entry(
    ctx: OperationContext,
    sync_id: str,
    entry_id: str,
) -> OperationResult[None]:
    """Remove one entry and bring the last-tended fields up to date."""
    timer = start_timer()
    try:
        with instance_transaction(ctx, sync_id) as doc:
            entry = doc.find_entry(entry_id)
            if entry is None:
                raise NotFoundError("History entry not found").with_context(
                    sync_id=sync_id, item_id=entry_id
                )
            doc.tending_log = [e for e in doc.tending_log if e.id != entry_id]

            cached = doc.last_tended_timestamp
            if cached is not None and entry.timestamp < cached and doc.tending_log:
                rescanned = False
            else:
                doc.recompute_last_tended()
                rescanned = True
        logger.info("history_entry_deleted", sync_id=sync_id, entry_id=entry_id, rescanned=rescanned)
        return OperationResult.ok(None, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return error_result(exc, timer, operation="delete_history_entry")


def get_last_tended(ctx: OperationContext, sync_id: str) -> OperationResult[LastTended]:
    """The two cached last-tended fields."""
    timer = start_timer()
    try:
        doc = read_instance(ctx, sync_id)
        return OperationResult.ok(
            LastTended(
                last_tended_timestamp=doc.last_tended_timestamp,
                last_tender=doc.last_tender,
            ),
            elapsed_ms=timer.elapsed_ms,
        )
    except Exception as exc:
        return error_result(exc, timer, operation="get_last_tended")

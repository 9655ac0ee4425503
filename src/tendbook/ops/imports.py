"""
Merge-import and export of whole instances.

External documents use their own field names::

    {
      "caretakers":  [{"id", "name"}],
      "chores":      [{"id", "name", "icon"}],
      "tending_log": [{"id", "timestamp", "person", "chore_id", "notes"?}],
      "last_tended_timestamp": 1718036400000,     # optional
      "last_caretaker": "Alice"                   # optional
    }

Import is a union by id.  Records whose id is already in the instance are
skipped; new ones are appended with their ids and content as given.  Running
the same import twice therefore changes nothing the second time.  Records
that share an id but differ in content are not reconciled: whichever arrived
first stays.

The whole payload is validated before anything is written.  Timestamps must
fit a signed 64-bit column: 0 <= ts < 2**63.  A declared
``last_tended_timestamp`` of 0 is treated as absent.

The summary counts records *presented*, not inserted.  Inserted counts are
logged and attached to the result ``metadata`` only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tendbook.core.errors import InvalidArgumentError
from tendbook.core.logging import get_logger
from tendbook.core.models import Chore, HistoryEntry, Tender
from tendbook.ops.context import OperationContext
from tendbook.ops.instance import error_result, instance_transaction, read_instance
from tendbook.ops.responses import ImportSummary
from tendbook.ops.result import OperationResult, start_timer

logger = get_logger(__name__)

TENDERS_KEY = "caretakers"
CHORES_KEY = "chores"
HISTORY_KEY = "tending_log"
LAST_TIMESTAMP_KEY = "last_tended_timestamp"
LAST_TENDER_KEY = "last_caretaker"


@dataclass(frozen=True, slots=True)
class ExternalDocument:
    """A validated import payload, already in domain types."""

    tenders: list[Tender]
    chores: list[Chore]
    history: list[HistoryEntry]
    last_tended_timestamp: int | None = None
    last_tender: str | None = None


# ------------------------------------------------------------------ #
# Validation
# ------------------------------------------------------------------ #


def _invalid(message: str) -> InvalidArgumentError:
    return InvalidArgumentError(f"Invalid import data: {message}")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# SQLite INTEGER is a signed 64-bit value
TIMESTAMP_LIMIT = 2**63


def _timestamp(value: Any, label: str) -> int:
    if not _is_int(value):
        raise _invalid(f"{label} must be an integer")
    if not 0 <= value < TIMESTAMP_LIMIT:
        raise _invalid(f"{label} is out of range")
    return value


def _text(item: dict[str, Any], key: str, where: str) -> str:
    value = item.get(key)
    if not isinstance(value, str) or not value:
        raise _invalid(f"{where} is missing '{key}'")
    return value


def _optional_text(item: dict[str, Any], key: str, where: str) -> str | None:
    value = item.get(key)
    if value is not None and not isinstance(value, str):
        raise _invalid(f"{where} has a non-string '{key}'")
    return value


def _records(payload: dict[str, Any], key: str) -> list[dict[str, Any]]:
    records = payload.get(key)
    if not isinstance(records, list):
        raise _invalid(f"'{key}' must be an array")
    for i, item in enumerate(records):
        if not isinstance(item, dict):
            raise _invalid(f"{key}[{i}] must be an object")
    return records


def parse_external_document(payload: Any) -> ExternalDocument:
    """Validate an import payload and convert it to domain types.

    Raises:
        InvalidArgumentError: describing the first problem found.
    """
    if not isinstance(payload, dict):
        raise _invalid("expected a JSON object")

    raw_tenders = _records(payload, TENDERS_KEY)
    raw_history = _records(payload, HISTORY_KEY)
    raw_chores = _records(payload, CHORES_KEY)

    tenders = []
    for i, item in enumerate(raw_tenders):
        where = f"{TENDERS_KEY}[{i}]"
        tenders.append(Tender(id=_text(item, "id", where), name=_text(item, "name", where)))

    chores = []
    for i, item in enumerate(raw_chores):
        where = f"{CHORES_KEY}[{i}]"
        chores.append(
            Chore(
                id=_text(item, "id", where),
                name=_text(item, "name", where),
                icon=_text(item, "icon", where),
            )
        )

    history = []
    for i, item in enumerate(raw_history):
        where = f"{HISTORY_KEY}[{i}]"
        entry_id = _text(item, "id", where)
        timestamp = _timestamp(item.get("timestamp"), f"{where}.timestamp")
        history.append(
            HistoryEntry(
                id=entry_id,
                timestamp=timestamp,
                person=_text(item, "person", where),
                chore_id=_optional_text(item, "chore_id", where),
                notes=_optional_text(item, "notes", where) or None,
            )
        )

    last_ts = payload.get(LAST_TIMESTAMP_KEY)
    if last_ts is not None:
        last_ts = _timestamp(last_ts, f"'{LAST_TIMESTAMP_KEY}'")
    last_tender = (
        _optional_text(payload, LAST_TENDER_KEY, "document")
        or _optional_text(payload, "last_tender", "document")
        or None
    )

    return ExternalDocument(
        tenders=tenders,
        chores=chores,
        history=history,
        last_tended_timestamp=last_ts,
        last_tender=last_tender,
    )


# ------------------------------------------------------------------ #
# Operations
# ------------------------------------------------------------------ #


def import_document(
    ctx: OperationContext,
    sync_id: str,
    payload: Any,
) -> OperationResult[ImportSummary]:
    """Merge an external export into the instance (idempotent)."""
    timer = start_timer()
    try:
        external = parse_external_document(payload)

        with instance_transaction(ctx, sync_id) as doc:
            inserted_tenders = _merge(doc.tenders, external.tenders)
            inserted_chores = _merge(doc.chores, external.chores)
            inserted_history = _merge(doc.tending_log, external.history)

            declared = external.last_tended_timestamp
            current = doc.last_tended_timestamp
            # 0 counts as "never tended"
            if declared and (current is None or declared > current):
                doc.last_tended_timestamp = declared
                doc.last_tender = external.last_tender

        summary = ImportSummary(
            tenders=len(external.tenders),
            chores=len(external.chores),
            history_entries=len(external.history),
        )
        inserted = {
            "inserted_tenders": inserted_tenders,
            "inserted_chores": inserted_chores,
            "inserted_history_entries": inserted_history,
        }
        logger.info("instance_imported", sync_id=sync_id, dry_run=ctx.dry_run, **inserted)
        return OperationResult.ok(summary, elapsed_ms=timer.elapsed_ms, metadata=inserted)
    except Exception as exc:
        return error_result(exc, timer, operation="import_document")


def export_document(ctx: OperationContext, sync_id: str) -> OperationResult[dict[str, Any]]:
    """The instance in the external shape accepted by :func:`import_document`."""
    timer = start_timer()
    try:
        doc = read_instance(ctx, sync_id)
        exported = {
            TENDERS_KEY: [t.to_dict() for t in doc.tenders],
            CHORES_KEY: [c.to_dict() for c in doc.chores],
            HISTORY_KEY: [e.to_dict() for e in doc.tending_log],
            LAST_TIMESTAMP_KEY: doc.last_tended_timestamp,
            LAST_TENDER_KEY: doc.last_tender,
        }
        return OperationResult.ok(exported, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return error_result(exc, timer, operation="export_document")


def _merge(existing: list[Any], incoming: list[Any]) -> int:
    """Append records whose id is not yet present; first occurrence wins."""
    seen = {record.id for record in existing}
    added = 0
    for record in incoming:
        if record.id in seen:
            continue
        existing.append(record)
        seen.add(record.id)
        added += 1
    return added

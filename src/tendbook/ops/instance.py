"""
Instance load/modify/replace plumbing shared by all operations.

:func:`instance_transaction` is the single critical section every mutating
operation runs in::

    with instance_transaction(ctx, sync_id) as doc:
        doc.tenders.append(tender)
    # replaced here, unless the block raised or ctx.dry_run is set

The per-key lock is held from load to replace, so concurrent operations on
one sync id cannot overwrite each other's changes.  Other sync ids are not
blocked.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from tendbook.core.errors import InvalidArgumentError, StorageError, TendbookError
from tendbook.core.logging import get_logger, log_context
from tendbook.core.models import InstanceDocument
from tendbook.ops.context import OperationContext
from tendbook.ops.result import OperationError, OperationResult, Stopwatch, start_timer

logger = get_logger(__name__)


@contextmanager
def instance_transaction(ctx: OperationContext, sync_id: str) -> Iterator[InstanceDocument]:
    """Lock ``sync_id``, load its document, yield it, then write it back.

    The yielded document is a private copy (stores never hand out shared
    state), so a block that raises leaves the stored document untouched.
    """
    with log_context(request_id=ctx.request_id, sync_id=sync_id), ctx.store.locked(sync_id):
        document = ctx.store.get_or_create(sync_id)
        yield document
        if ctx.dry_run:
            logger.debug("dry_run_write_skipped", caller=ctx.caller)
            return
        ctx.store.replace(sync_id, document)


def read_instance(ctx: OperationContext, sync_id: str) -> InstanceDocument:
    """Load (creating on first access) without entering the critical section."""
    return ctx.store.get_or_create(sync_id)


def require_text(value: Any, message: str) -> str:
    """Return ``value`` stripped, or raise if it is not a non-blank string."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(message)
    return value.strip()


def fresh_id(generate: Any, taken: set[str]) -> str:
    """Call ``generate()`` until it returns an id not in ``taken``."""
    new_id = generate()
    while new_id in taken:
        new_id = generate()
    return new_id


def error_result(exc: Exception, timer: Stopwatch, *, operation: str) -> OperationResult[Any]:
    """Convert an exception raised inside an operation into a failed result.

    Domain errors keep their code.  Anything else is a storage failure: it is
    logged with its traceback and reported without partial effect.
    """
    if isinstance(exc, TendbookError):
        if isinstance(exc, StorageError):
            logger.error("op_failed", operation=operation, **exc.to_dict())
        else:
            logger.info("op_rejected", operation=operation, code=exc.code, reason=exc.message)
        return OperationResult(
            success=False,
            error=OperationError.from_exception(exc),
            elapsed_ms=timer.elapsed_ms,
        )

    logger.exception("op_failed", operation=operation, error=str(exc))
    return OperationResult.fail(
        StorageError.code,
        f"{operation} failed: {exc}",
        elapsed_ms=timer.elapsed_ms,
    )


def get_instance(ctx: OperationContext, sync_id: str) -> OperationResult[InstanceDocument]:
    """The whole document for ``sync_id``, seeding it on first access."""
    timer = start_timer()
    try:
        return OperationResult.ok(read_instance(ctx, sync_id), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return error_result(exc, timer, operation="get_instance")

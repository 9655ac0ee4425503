"""
Store-level operations: health and instance listing.

Used by ``tendbook db``; the HTTP health endpoints ping the store directly.
"""

from __future__ import annotations

import time

from tendbook.core.logging import get_logger
from tendbook.ops.context import OperationContext
from tendbook.ops.instance import error_result
from tendbook.ops.responses import StoreHealth
from tendbook.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def check_store_health(ctx: OperationContext) -> OperationResult[StoreHealth]:
    """Ping the store and count its instances.

    An unusable store is reported as ``connected=False`` with a warning,
    not as a failed result.
    """
    timer = start_timer()
    info = getattr(ctx.store, "info", None)
    try:
        start = time.perf_counter()
        ctx.store.ping()
        latency = (time.perf_counter() - start) * 1000
        count = len(ctx.store.list_sync_ids())

        return OperationResult.ok(
            StoreHealth(
                connected=True,
                backend=ctx.store.backend,
                instance_count=count,
                latency_ms=round(latency, 2),
                path=getattr(info, "resolved_path", None),
                recreated=getattr(info, "recreated", False),
            ),
            elapsed_ms=timer.elapsed_ms,
        )
    except Exception as exc:
        logger.warning("store_unhealthy", error=str(exc))
        return OperationResult.ok(
            StoreHealth(connected=False, backend=getattr(ctx.store, "backend", "unknown")),
            warnings=[f"Health check error: {exc}"],
            elapsed_ms=timer.elapsed_ms,
        )


def list_instances(ctx: OperationContext) -> OperationResult[list[str]]:
    """Every sync id the store holds, sorted."""
    timer = start_timer()
    try:
        return OperationResult.ok(ctx.store.list_sync_ids(), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return error_result(exc, timer, operation="list_instances")

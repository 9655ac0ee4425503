"""
Operations layer: every read and write an instance supports.

The ops package provides typed functions over a :class:`DocumentStore` with
consistent patterns:

- All functions accept ``OperationContext`` as first argument
- All functions return ``OperationResult[T]`` (never raise)
- All functions are transport-agnostic (no HTTP, no CLI knowledge)
- Mutations run as one critical section per sync id

Usage::

    from tendbook.ops import OperationContext
    from tendbook.ops.tenders import add_tender
    from tendbook.store import open_store

    ctx = OperationContext(store=open_store("memory"))
    result = add_tender(ctx, "kitchen", "Alice")
    assert result.success
"""

from tendbook.ops.context import OperationContext
from tendbook.ops.requests import RecordTendingRequest, UpdateChoreRequest
from tendbook.ops.responses import ImportSummary, LastTended
from tendbook.ops.result import OperationError, OperationResult

__all__ = [
    "ImportSummary",
    "LastTended",
    "OperationContext",
    "OperationError",
    "OperationResult",
    "RecordTendingRequest",
    "UpdateChoreRequest",
]

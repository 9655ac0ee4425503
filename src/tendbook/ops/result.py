"""
What every operation returns.

Operations never raise for expected failures.  They return an
:class:`OperationResult` that is either successful, with ``data``, or
failed, with an :class:`OperationError` whose ``code`` is one of:

    INVALID_ARGUMENT   missing, blank or malformed input
    NOT_FOUND          tender, chore or history entry id not in the instance
    STORAGE_FAILURE    the document store failed; nothing was written

The API turns the code into an HTTP status and the CLI into exit code 1.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from tendbook.core.errors import ErrorCategory, TendbookError


@dataclass(frozen=True, slots=True)
class OperationError:
    """Why an operation failed.

    ``details`` carries the error context (``sync_id``, ``item_id``).
    """

    code: str
    message: str
    category: ErrorCategory | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: TendbookError) -> OperationError:
        return cls(
            code=exc.code,
            message=exc.message,
            category=exc.category,
            details=exc.context.to_dict(),
        )


@dataclass
class OperationResult[T]:
    """Outcome of one operation.  Build with :meth:`ok` or :meth:`fail`."""

    success: bool
    data: T | None = None
    error: OperationError | None = None
    warnings: list[str] = field(default_factory=list)
    elapsed_ms: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(
        cls,
        data: T,
        *,
        warnings: list[str] | None = None,
        elapsed_ms: float = 0.0,
        metadata: dict[str, Any] | None = None,
    ) -> OperationResult[T]:
        return cls(
            success=True,
            data=data,
            warnings=list(warnings or ()),
            elapsed_ms=elapsed_ms,
            metadata=dict(metadata or {}),
        )

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        *,
        category: ErrorCategory | None = None,
        details: dict[str, Any] | None = None,
        elapsed_ms: float = 0.0,
    ) -> OperationResult[T]:
        error = OperationError(code, message, category, dict(details or {}))
        return cls(success=False, error=error, elapsed_ms=elapsed_ms)

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form for JSON output; empty fields are left out."""
        error = None
        if self.error is not None:
            error = {"code": self.error.code, "message": self.error.message}
            if self.error.details:
                error["details"] = self.error.details
        candidates = {
            "data": self.data,
            "error": error,
            "warnings": self.warnings or None,
            "elapsed_ms": round(self.elapsed_ms, 2) or None,
            "metadata": self.metadata or None,
        }
        return {"success": self.success} | {k: v for k, v in candidates.items() if v is not None}


class Stopwatch:
    """Milliseconds since construction, for ``elapsed_ms``."""

    __slots__ = ("_started",)

    def __init__(self) -> None:
        self._started = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._started) * 1000


def start_timer() -> Stopwatch:
    return Stopwatch()

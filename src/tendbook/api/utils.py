"""Glue between operation results and router return values."""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any

from fastapi.responses import JSONResponse

from tendbook.api.middleware.errors import problem_response, status_for_error_code
from tendbook.ops.result import OperationResult


def as_fields(obj: Any) -> dict[str, Any]:
    """Keyword arguments for a response schema built from an op's data."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    raise TypeError(f"cannot build a response from {type(obj).__name__}")


def failure_response(result: OperationResult[Any]) -> JSONResponse:
    """Problem response for a failed result; the error message is the title."""
    error = result.error
    if error is None:
        return problem_response(status=500, title="Operation failed", code="INTERNAL")
    return problem_response(
        status=status_for_error_code(error.code),
        title=error.message,
        code=error.code,
    )

"""
Exception handlers and the problem response they share.

Operation failures never reach these handlers: routers turn a failed
``OperationResult`` into :func:`problem_response` themselves.  What lands
here is request validation, a ``TendbookError`` raised by a dependency (the
store not being open), or a bug.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tendbook.api.schemas.common import FieldError, ProblemDetail
from tendbook.core.errors import InvalidArgumentError, NotFoundError, StorageError, TendbookError
from tendbook.core.logging import get_logger

logger = get_logger(__name__)

HTTP_STATUS_BY_CODE: dict[str, int] = {
    InvalidArgumentError.code: 400,
    NotFoundError.code: 404,
    StorageError.code: 500,
}


def status_for_error_code(code: str) -> int:
    """400, 404, or 500 for anything else."""
    return HTTP_STATUS_BY_CODE.get(code, 500)


def problem_response(
    *,
    status: int,
    title: str,
    code: str = "INTERNAL",
    detail: str = "",
    instance: str = "",
    errors: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    body = ProblemDetail(
        title=title,
        status=status,
        code=code,
        detail=detail,
        instance=instance,
        errors=[FieldError(**err) for err in errors or ()],
    )
    return JSONResponse(status_code=status, content=body.model_dump())


def _field_path(loc: tuple[Any, ...]) -> str | None:
    # ("body", "name") -> "name"; ("path", "sync_id") stays qualified
    return ".".join(str(part) for part in loc if part != "body") or None


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """A body or parameter FastAPI rejected is INVALID_ARGUMENT."""
    errors = [
        {
            "code": InvalidArgumentError.code,
            "message": err.get("msg", "Invalid value"),
            "field": _field_path(tuple(err.get("loc", ()))),
        }
        for err in exc.errors()
    ]
    return problem_response(
        status=400,
        title="Invalid request",
        code=InvalidArgumentError.code,
        detail="; ".join(err["message"] for err in errors),
        instance=str(request.url),
        errors=errors,
    )


async def tendbook_exception_handler(request: Request, exc: TendbookError) -> JSONResponse:
    status = status_for_error_code(exc.code)
    if status >= 500:
        logger.error("request_failed", path=request.url.path, **exc.to_dict())
    return problem_response(status=status, title=exc.message, code=exc.code, instance=str(request.url))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else is reported as STORAGE_FAILURE; the text only in debug."""
    logger.exception("request_crashed", path=request.url.path, error=str(exc))
    debug = request.app.state.settings.debug
    return problem_response(
        status=500,
        title="Internal Server Error",
        code=StorageError.code,
        detail=str(exc) if debug else "An unexpected error occurred.",
        instance=str(request.url),
    )

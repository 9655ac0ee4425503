"""``X-Process-Time-Ms`` header plus one debug line per request."""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from tendbook.core.logging import get_logger
from tendbook.ops.result import start_timer

logger = get_logger(__name__)


class TimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        timer = start_timer()
        response = await call_next(request)
        took = round(timer.elapsed_ms, 2)
        response.headers["X-Process-Time-Ms"] = f"{took}"
        logger.debug(
            "request_served",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            took_ms=took,
            request_id=getattr(request.state, "request_id", None),
        )
        return response

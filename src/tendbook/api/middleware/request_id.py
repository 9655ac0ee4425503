"""Propagate or mint ``X-Request-ID``.

The value lands on ``request.state.request_id``, becomes the operation
context's ``request_id`` and so shows up on every log line of the request.
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from tendbook.ops.context import new_request_id

HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        incoming = request.headers.get(HEADER, "").strip()
        request.state.request_id = incoming or new_request_id()
        response = await call_next(request)
        response.headers[HEADER] = request.state.request_id
        return response

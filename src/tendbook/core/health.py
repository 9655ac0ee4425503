"""Health endpoints for the tendbook service.

Three probes, all outside the ``/api`` prefix so container orchestrators can
reach them without knowing any sync id:

    GET /health         every check; 503 only if a required check fails
    GET /health/ready   every check; 503 if any check fails
    GET /health/live    no checks; 200 while the process answers

The only dependency the service has is its document store, so in practice
there is one check, ``store``, built from :func:`check_store`::

    router = create_health_router(
        "tendbook",
        version=__version__,
        checks=[HealthCheck("store", partial(check_store, store))],
    )
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from tendbook.core.protocols import DocumentStore

Status = Literal["healthy", "degraded", "unhealthy"]

_STARTED = time.monotonic()


class CheckResult(BaseModel):
    status: Status
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Body of ``/health`` and ``/health/ready``."""

    status: Status
    service: str
    version: str
    uptime_s: float = Field(default_factory=lambda: round(time.monotonic() - _STARTED, 1))
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    checks: dict[str, CheckResult] = Field(default_factory=dict)


class LivenessResponse(BaseModel):
    status: str = "alive"


@dataclass
class HealthCheck:
    """One named dependency check.

    ``check_fn`` passes by returning and fails by raising.  A failing check
    with ``required=False`` only degrades ``/health``.
    """

    name: str
    check_fn: Callable[[], Awaitable[Any]]
    required: bool = True
    timeout_s: float = 5.0

    async def run(self) -> CheckResult:
        started = time.monotonic()
        try:
            await asyncio.wait_for(self.check_fn(), timeout=self.timeout_s)
        except TimeoutError:
            return CheckResult(status="unhealthy", error=f"timed out after {self.timeout_s}s")
        except Exception as exc:  # noqa: BLE001
            return CheckResult(
                status="unhealthy",
                latency_ms=_ms_since(started),
                error=str(exc)[:200],
            )
        return CheckResult(status="healthy", latency_ms=_ms_since(started))


async def check_store(store: DocumentStore) -> bool:
    """Ping the store off the event loop; raises when it is unusable."""
    await asyncio.to_thread(store.ping)
    return True


def _ms_since(started: float) -> float:
    return round((time.monotonic() - started) * 1000, 2)


def _overall(checks: list[HealthCheck], results: dict[str, CheckResult]) -> Status:
    failed = [hc for hc in checks if results[hc.name].status != "healthy"]
    if any(hc.required for hc in failed):
        return "unhealthy"
    return "degraded" if failed else "healthy"


def create_health_router(
    service_name: str,
    version: str,
    checks: list[HealthCheck] | None = None,
    prefix: str = "/health",
) -> APIRouter:
    """Router serving ``{prefix}``, ``{prefix}/ready`` and ``{prefix}/live``."""
    router = APIRouter(tags=["health"])
    registered = list(checks or [])

    async def report(*, strict: bool) -> JSONResponse:
        outcomes = await asyncio.gather(*(hc.run() for hc in registered))
        results = {hc.name: outcome for hc, outcome in zip(registered, outcomes, strict=True)}
        status = _overall(registered, results)
        body = HealthResponse(status=status, service=service_name, version=version, checks=results)
        failing = status != "healthy" if strict else status == "unhealthy"
        return JSONResponse(content=body.model_dump(), status_code=503 if failing else 200)

    @router.get(prefix, response_model=HealthResponse)
    async def health() -> JSONResponse:
        return await report(strict=False)

    @router.get(f"{prefix}/ready", response_model=HealthResponse)
    async def readiness() -> JSONResponse:
        return await report(strict=True)

    @router.get(f"{prefix}/live", response_model=LivenessResponse)
    async def liveness() -> LivenessResponse:
        return LivenessResponse()

    return router

"""
The tendbook FastAPI application.

:func:`create_app` is a factory so uvicorn can build the app in the worker
(``tendbook.api:create_app`` with ``factory=True``) and tests can build one
per case with their own settings and store.

Routes::

    /health, /health/ready, /health/live
    {api_prefix}/{sync_id}/tenders[/{tender_id}]
    {api_prefix}/{sync_id}/chores[/{chore_id}]
    {api_prefix}/{sync_id}/tend
    {api_prefix}/{sync_id}/history[/{entry_id}]
    {api_prefix}/{sync_id}/last-tended
    {api_prefix}/{sync_id}/import, {api_prefix}/{sync_id}/export
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from tendbook.api.deps import get_settings
from tendbook.api.middleware.errors import (
    tendbook_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from tendbook.api.middleware.request_id import RequestIDMiddleware
from tendbook.api.middleware.timing import TimingMiddleware
from tendbook.api.routers import chores, history, tenders, transfer
from tendbook.api.settings import TendbookAPISettings
from tendbook.core.errors import TendbookError
from tendbook.core.health import HealthCheck, check_store, create_health_router
from tendbook.core.logging import configure_logging, get_logger
from tendbook.core.protocols import DocumentStore
from tendbook.store import open_store

log = get_logger("tendbook.api")

_INSTANCE_ROUTERS = (
    (tenders.router, "tenders"),
    (chores.router, "chores"),
    (history.router, "history"),
    (transfer.router, "transfer"),
)


def _open_configured_store(settings: TendbookAPISettings) -> DocumentStore:
    try:
        return open_store(
            settings.database_url,
            data_dir=settings.data_dir,
            recreate_corrupted=settings.recreate_corrupted_db,
        )
    except TendbookError as exc:
        log.critical("store_open_failed", **exc.to_dict())
        raise


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open ``database_url`` unless a store was handed to :func:`create_app`.

    Only a store opened here is closed here.
    """
    owned = app.state.store is None
    if owned:
        app.state.store = _open_configured_store(app.state.settings)
    log.info("api_started", version=app.version, backend=app.state.store.backend)
    try:
        yield
    finally:
        log.info("api_stopping")
        if owned:
            app.state.store.close()
            app.state.store = None


def create_app(
    *,
    settings: TendbookAPISettings | None = None,
    store: DocumentStore | None = None,
    configure_logs: bool = True,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Defaults to the process-wide :func:`get_settings`.
        store: An already open store.  The caller keeps ownership.
        configure_logs: Set up structlog from ``settings``; tests turn it off.
    """
    settings = settings or get_settings()
    if configure_logs:
        configure_logging(level=settings.log_level, json_format=settings.json_logs)

    prefix = settings.api_prefix
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url=f"{prefix}/docs",
        redoc_url=f"{prefix}/redoc",
        openapi_url=f"{prefix}/openapi.json",
    )
    app.state.settings = settings
    app.state.store = store
    app.dependency_overrides[get_settings] = lambda: settings

    # added last runs first: CORS, then request id, then timing
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(TendbookError, tendbook_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    async def store_reachable() -> bool:
        return await check_store(app.state.store)

    app.include_router(
        create_health_router(
            "tendbook",
            version=settings.api_version,
            checks=[HealthCheck("store", store_reachable)],
        )
    )
    for router, tag in _INSTANCE_ROUTERS:
        app.include_router(router, prefix=prefix, tags=[tag])

    return app

"""
Dependencies shared by the instance routers.

Routers only ever ask for ``OpContext``; everything else hangs off it::

    @router.get("/{sync_id}/tenders")
    def list_tenders(ctx: OpContext, sync_id: str): ...
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from tendbook.api.settings import TendbookAPISettings
from tendbook.core.errors import StorageError
from tendbook.core.protocols import DocumentStore
from tendbook.ops.context import OperationContext, new_request_id


@lru_cache(maxsize=1)
def get_settings() -> TendbookAPISettings:
    return TendbookAPISettings()


def get_store(request: Request) -> DocumentStore:
    """``app.state.store``, set by the lifespan; 500 outside of it."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StorageError("Document store is not open")
    return store


def get_operation_context(
    request: Request,
    store: Annotated[DocumentStore, Depends(get_store)],
) -> OperationContext:
    request_id = getattr(request.state, "request_id", None) or new_request_id()
    return OperationContext(store=store, request_id=request_id, caller="api")


Settings = Annotated[TendbookAPISettings, Depends(get_settings)]
OpContext = Annotated[OperationContext, Depends(get_operation_context)]

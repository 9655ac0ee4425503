"""The first argument of every operation."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from tendbook.core.protocols import DocumentStore


def new_request_id() -> str:
    return uuid.uuid4().hex[:16]


@dataclass
class OperationContext:
    """Who is calling, against which store.

    The store is opened once by the entry point (API lifespan, CLI command
    or test fixture) and shared by every context built from it.  With
    ``dry_run`` set, operations run their full logic but
    :func:`~tendbook.ops.instance.instance_transaction` skips the write.
    """

    store: DocumentStore
    request_id: str = field(default_factory=new_request_id)
    caller: str = "sdk"
    dry_run: bool = False

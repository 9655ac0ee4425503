"""
Core primitives: errors, logging, settings, models, SQLite connections.

Nothing in ``tendbook.core`` imports from the store, ops, api or cli layers.
"""

from tendbook.core.errors import (
    DocumentNotFoundError,
    ErrorCategory,
    InvalidArgumentError,
    NotFoundError,
    StorageCorruptedError,
    StorageError,
    TendbookError,
)
from tendbook.core.models import Chore, HistoryEntry, InstanceDocument, Tender

__all__ = [
    "Chore",
    "DocumentNotFoundError",
    "ErrorCategory",
    "HistoryEntry",
    "InstanceDocument",
    "InvalidArgumentError",
    "NotFoundError",
    "StorageCorruptedError",
    "StorageError",
    "Tender",
    "TendbookError",
]

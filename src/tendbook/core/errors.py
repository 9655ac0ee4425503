"""
Exceptions raised by the store and the operations layer.

Three codes reach callers:

    INVALID_ARGUMENT   InvalidArgumentError
    NOT_FOUND          NotFoundError, DocumentNotFoundError
    STORAGE_FAILURE    StorageError, StorageCorruptedError

The first two leave the instance untouched and are the caller's to fix.
A StorageError fails the request.  StorageCorruptedError only happens while
opening the database and stops the process until someone looks at the file.
The store is local, so none of these are retried.

    >>> err = NotFoundError("Tender not found").with_context(sync_id="x", item_id="c_1")
    >>> err.to_dict()["context"]
    {'sync_id': 'x', 'item_id': 'c_1'}
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    STORAGE = "STORAGE"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """Where an error happened.  Unknown keys go to ``metadata``."""

    sync_id: str | None = None
    item_id: str | None = None
    operation: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def set(self, key: str, value: Any) -> None:
        if key in _CONTEXT_FIELDS:
            setattr(self, key, value)
        else:
            self.metadata[key] = value

    def to_dict(self) -> dict[str, Any]:
        """Set fields only, with ``metadata`` merged in flat."""
        out = {name: getattr(self, name) for name in _CONTEXT_FIELDS if getattr(self, name) is not None}
        return {**out, **self.metadata}


_CONTEXT_FIELDS = tuple(f.name for f in fields(ErrorContext) if f.name != "metadata")


class TendbookError(Exception):
    """Base class.  Subclasses pin ``code`` and ``default_category``."""

    code: str = "INTERNAL"
    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category if category is not None else self.default_category
        self.context = context if context is not None else ErrorContext()
        self.cause = cause
        self.__cause__ = cause

    def with_context(self, **values: Any) -> TendbookError:
        """Record ``sync_id``, ``item_id`` and friends; returns ``self`` for ``raise``."""
        for key, value in values.items():
            self.context.set(key, value)
        return self

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "error_type": type(self).__name__,
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
        }
        if where := self.context.to_dict():
            out["context"] = where
        if self.cause is not None:
            out["cause"] = str(self.cause)
        return out

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code}, message={self.message!r})"


class InvalidArgumentError(TendbookError):
    """Missing, blank or wrongly typed input."""

    code = "INVALID_ARGUMENT"
    default_category = ErrorCategory.VALIDATION


class NotFoundError(TendbookError):
    code = "NOT_FOUND"
    default_category = ErrorCategory.NOT_FOUND


class DocumentNotFoundError(NotFoundError):
    """``replace`` was called for a sync id that has no document."""


class StorageError(TendbookError):
    code = "STORAGE_FAILURE"
    default_category = ErrorCategory.STORAGE


class StorageCorruptedError(StorageError):
    """
    The database file is there but SQLite refuses to read it.

    The file is never touched unless ``TENDBOOK_RECREATE_CORRUPTED_DB`` is
    set, in which case it is deleted and started afresh.
    """

    def __init__(self, path: str, *, cause: Exception | None = None):
        super().__init__(
            f"Corrupted database detected at {path}. Back up the file, then remove "
            "or rename it and restart, or set TENDBOOK_RECREATE_CORRUPTED_DB=true "
            "to recreate it (this deletes its data).",
            cause=cause,
        )
        self.path = path

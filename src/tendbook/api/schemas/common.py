"""
Error body shared by every route.

Successful responses are the resources themselves.  Anything 4xx or 5xx is
an RFC 7807 problem with an extra ``code`` naming the failure::

    {"type": "about:blank", "title": "Chore not found", "status": 404,
     "code": "NOT_FOUND", "detail": "", "instance": ".../chores/chore_1",
     "errors": []}
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class FieldError(BaseModel):
    """One rejected request field."""

    code: str
    message: str
    field: str | None = Field(default=None, description="Dotted path, e.g. 'name' or 'path.sync_id'")


class ProblemDetail(BaseModel):
    type: str = "about:blank"
    title: str
    status: int
    code: str = Field(
        default="INTERNAL",
        description="INVALID_ARGUMENT (400), NOT_FOUND (404) or STORAGE_FAILURE (500)",
    )
    detail: str = ""
    instance: str = Field(default="", description="URL of the failing request")
    errors: list[FieldError] = Field(default_factory=list)

"""Settings of the HTTP service (``TENDBOOK_DATABASE_URL`` and friends)."""

from __future__ import annotations

from pydantic import Field

from tendbook import __version__
from tendbook.core.settings import TendbookBaseSettings


class TendbookAPISettings(TendbookBaseSettings):
    """Also read by the CLI, which opens the same database."""

    api_prefix: str = Field(default="/api", description="Mount point of the /{sync_id} routes")
    api_title: str = "tendbook API"
    api_version: str = __version__

    database_url: str = Field(
        default="sqlite:///tendbook.db",
        description="sqlite:/// URL, bare file path, or 'memory'",
    )
    recreate_corrupted_db: bool = Field(
        default=False,
        description="Delete an unreadable database file at startup instead of refusing to start",
    )

    cors_origins: list[str] = ["*"]

"""Settings every tendbook entry point reads.

Environment variables carry the ``TENDBOOK_`` prefix (``TENDBOOK_PORT``,
``TENDBOOK_LOG_LEVEL``...); a ``.env`` file in the working directory is read
as well.

    >>> TendbookBaseSettings(log_level="debug").log_level
    'DEBUG'
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TendbookBaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TENDBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 3000

    debug: bool = Field(default=False, description="Put exception text in 500 responses")
    log_level: str = "INFO"
    json_logs: bool | None = Field(default=None, description="None picks JSON when stdout is not a tty")

    data_dir: Path = Field(
        default_factory=Path.cwd,
        description="Base directory for relative database paths",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

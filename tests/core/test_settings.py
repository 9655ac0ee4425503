"""Tests for pydantic-settings configuration."""

from __future__ import annotations

from tendbook.api.settings import TendbookAPISettings
from tendbook.core.settings import TendbookBaseSettings


class TestBaseSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TENDBOOK_PORT", raising=False)
        s = TendbookBaseSettings(_env_file=None)
        assert s.port == 3000
        assert s.log_level == "INFO"
        assert s.json_logs is None

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("TENDBOOK_PORT", "8123")
        monkeypatch.setenv("TENDBOOK_DEBUG", "true")
        s = TendbookBaseSettings(_env_file=None)
        assert s.port == 8123
        assert s.debug is True


class TestAPISettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TENDBOOK_DATABASE_URL", raising=False)
        monkeypatch.delenv("TENDBOOK_RECREATE_CORRUPTED_DB", raising=False)
        s = TendbookAPISettings(_env_file=None)
        assert s.database_url == "sqlite:///tendbook.db"
        assert s.recreate_corrupted_db is False
        assert s.api_prefix == "/api"
        assert s.cors_origins == ["*"]

    def test_recreate_flag_from_env(self, monkeypatch):
        monkeypatch.setenv("TENDBOOK_RECREATE_CORRUPTED_DB", "1")
        monkeypatch.setenv("TENDBOOK_DATABASE_URL", "memory")
        s = TendbookAPISettings(_env_file=None)
        assert s.recreate_corrupted_db is True
        assert s.database_url == "memory"

    def test_log_level_is_uppercased(self, monkeypatch):
        monkeypatch.setenv("TENDBOOK_LOG_LEVEL", "debug")
        assert TendbookBaseSettings(_env_file=None).log_level == "DEBUG"

"""
Tests for CLI app structure and sub-commands.

Commands run against a SQLite file under ``tmp_path`` passed with ``-d``.
"""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from tendbook import __version__
from tendbook.cli.app import app
from tendbook.cli.utils import format_ms
from tendbook.ops.context import OperationContext
from tendbook.ops.history import record_tending
from tendbook.ops.requests import RecordTendingRequest
from tendbook.ops.tenders import add_tender
from tendbook.store import open_store

runner = CliRunner()


@pytest.fixture
def db(tmp_path) -> str:
    return str(tmp_path / "cli.db")


@pytest.fixture
def seeded_db(db) -> str:
    store = open_store(db)
    try:
        ctx = OperationContext(store=store, caller="test")
        add_tender(ctx, "kitchen", "Alice")
        with patch("tendbook.ops.history.now_ms", return_value=1_718_036_400_000):
            record_tending(ctx, "kitchen", RecordTendingRequest("Alice", "chore_x", "fed"))
    finally:
        store.close()
    return db


class TestRootApp:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "tendbook" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"tendbook {__version__}" in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code in (0, 2)


class TestSubcommandRegistration:
    @pytest.mark.parametrize(
        "group, command",
        [("db", "check"), ("db", "instances"), ("instance", "show"), ("instance", "export")],
    )
    def test_group_help(self, group, command):
        result = runner.invoke(app, [group, "--help"])
        assert result.exit_code == 0
        assert command in result.output

    def test_serve_help(self):
        result = runner.invoke(app, ["serve", "--help"])
        assert result.exit_code == 0


class TestServe:
    def test_start_runs_uvicorn(self):
        with patch("uvicorn.run") as run:
            result = runner.invoke(app, ["serve", "start", "--port", "8123"])
        assert result.exit_code == 0
        args, kwargs = run.call_args
        assert args[0] == "tendbook.api:create_app"
        assert kwargs["factory"] is True
        assert kwargs["port"] == 8123
        assert kwargs["workers"] == 1

    def test_start_defaults_come_from_settings(self, monkeypatch):
        monkeypatch.setenv("TENDBOOK_HOST", "127.0.0.1")
        monkeypatch.setenv("TENDBOOK_PORT", "4100")
        with patch("uvicorn.run") as run:
            result = runner.invoke(app, ["serve", "start"])
        assert result.exit_code == 0
        _, kwargs = run.call_args
        assert (kwargs["host"], kwargs["port"]) == ("127.0.0.1", 4100)


class TestDbCommands:
    def test_check(self, db):
        result = runner.invoke(app, ["db", "check", "-d", db])
        assert result.exit_code == 0
        assert "connected" in result.output

    def test_check_json(self, seeded_db):
        result = runner.invoke(app, ["db", "check", "-d", seeded_db, "--json"])
        assert result.exit_code == 0
        body = json.loads(result.output)
        assert body["connected"] is True
        assert body["backend"] == "sqlite"
        assert body["instance_count"] == 1

    def test_check_corrupted_file(self, tmp_path):
        bad = tmp_path / "bad.db"
        bad.write_bytes(b"\x00garbage" * 512)
        result = runner.invoke(app, ["db", "check", "-d", str(bad)])
        assert result.exit_code == 1
        assert "STORAGE" in result.output

    def test_check_recreates_corrupted_file(self, tmp_path):
        bad = tmp_path / "bad.db"
        bad.write_bytes(b"\x00garbage" * 512)
        result = runner.invoke(app, ["db", "check", "-d", str(bad), "--recreate", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["recreated"] is True

    def test_instances_empty(self, db):
        result = runner.invoke(app, ["db", "instances", "-d", db])
        assert result.exit_code == 0
        assert "No instances." in result.output

    def test_instances_json(self, seeded_db):
        result = runner.invoke(app, ["db", "instances", "-d", seeded_db, "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == ["kitchen"]


class TestInstanceCommands:
    def test_show(self, seeded_db):
        result = runner.invoke(app, ["instance", "show", "kitchen", "-d", seeded_db])
        assert result.exit_code == 0
        assert "Alice" in result.output
        assert "Water the plants" in result.output
        assert f"Last tended: {format_ms(1_718_036_400_000)} by Alice" in result.output

    def test_show_json(self, seeded_db):
        result = runner.invoke(app, ["instance", "show", "kitchen", "-d", seeded_db, "--json"])
        body = json.loads(result.output)
        assert body["sync_id"] == "kitchen"
        assert body["last_tender"] == "Alice"

    def test_history(self, seeded_db):
        result = runner.invoke(app, ["instance", "history", "kitchen", "-d", seeded_db])
        assert result.exit_code == 0
        assert "fed" in result.output

    def test_history_empty(self, db):
        result = runner.invoke(app, ["instance", "history", "new", "-d", db])
        assert "No history." in result.output

    def test_export_stdout(self, seeded_db):
        result = runner.invoke(app, ["instance", "export", "kitchen", "-d", seeded_db])
        assert result.exit_code == 0
        body = json.loads(result.output)
        assert [c["name"] for c in body["caretakers"]] == ["Alice"]
        assert body["last_caretaker"] == "Alice"

    def test_export_then_import(self, seeded_db, tmp_path):
        out = tmp_path / "kitchen.json"
        result = runner.invoke(app, ["instance", "export", "kitchen", "-d", seeded_db, "-o", str(out)])
        assert result.exit_code == 0

        result = runner.invoke(app, ["instance", "import", "garden", str(out), "-d", seeded_db])
        assert result.exit_code == 0
        assert "1 tenders" in result.output

        shown = runner.invoke(app, ["instance", "show", "garden", "-d", seeded_db, "--json"])
        assert json.loads(shown.output)["tenders"][0]["name"] == "Alice"

    def test_import_dry_run(self, seeded_db, tmp_path):
        out = tmp_path / "kitchen.json"
        runner.invoke(app, ["instance", "export", "kitchen", "-d", seeded_db, "-o", str(out)])
        result = runner.invoke(
            app, ["instance", "import", "garden", str(out), "-d", seeded_db, "--dry-run", "--json"]
        )
        assert result.exit_code == 0
        # the instance itself is created with its default chore
        listed = runner.invoke(app, ["db", "instances", "-d", seeded_db, "--json"])
        assert json.loads(listed.output) == ["garden", "kitchen"]
        shown = runner.invoke(app, ["instance", "show", "garden", "-d", seeded_db, "--json"])
        assert json.loads(shown.output)["tenders"] == []
        assert len(json.loads(shown.output)["chores"]) == 1

    def test_import_invalid_document(self, db, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"caretakers": []}), encoding="utf-8")
        result = runner.invoke(app, ["instance", "import", "kitchen", str(bad), "-d", db])
        assert result.exit_code == 1
        assert "INVALID_ARGUMENT" in result.output

    def test_import_unreadable_json(self, db, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{nope", encoding="utf-8")
        result = runner.invoke(app, ["instance", "import", "kitchen", str(bad), "-d", db])
        assert result.exit_code == 1


class TestFormatMs:
    def test_never(self):
        assert format_ms(None) == "never"

    def test_utc(self):
        assert format_ms(0) == "1970-01-01 00:00"

    def test_beyond_datetime_range_prints_raw_value(self):
        assert format_ms(2**63 - 1) == str(2**63 - 1)

    def test_history_with_far_future_entry(self, db, tmp_path):
        doc = tmp_path / "far.json"
        doc.write_text(
            json.dumps(
                {
                    "caretakers": [],
                    "chores": [],
                    "tending_log": [{"id": "h_1", "timestamp": 10**15, "person": "Alice"}],
                    "last_tended_timestamp": 10**15,
                }
            ),
            encoding="utf-8",
        )
        assert runner.invoke(app, ["instance", "import", "kitchen", str(doc), "-d", db]).exit_code == 0
        result = runner.invoke(app, ["instance", "history", "kitchen", "-d", db])
        assert result.exit_code == 0
        assert "Alice" in result.output
        shown = runner.invoke(app, ["instance", "show", "kitchen", "-d", db])
        assert shown.exit_code == 0
        assert f"Last tended: {10**15}" in shown.output

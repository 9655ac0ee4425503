"""Tests for tendbook.ops.tenders."""

from __future__ import annotations

import pytest

from tendbook.ops.history import list_history, record_tending
from tendbook.ops.requests import RecordTendingRequest
from tendbook.ops.tenders import add_tender, delete_tender, list_tenders, rename_tender


class TestAddTender:
    def test_adds_with_generated_id(self, ctx):
        result = add_tender(ctx, "kitchen", "Alice")
        assert result.success
        assert result.data.name == "Alice"
        assert result.data.id.startswith("c_")
        assert list_tenders(ctx, "kitchen").data == [result.data]

    def test_name_is_trimmed(self, ctx):
        assert add_tender(ctx, "kitchen", "  Bob  ").data.name == "Bob"

    @pytest.mark.parametrize("name", ["", "   ", None, 42])
    def test_invalid_name(self, ctx, name):
        result = add_tender(ctx, "kitchen", name)
        assert not result.success
        assert result.error.code == "INVALID_ARGUMENT"
        assert result.error.message == "Invalid name for tender"
        assert list_tenders(ctx, "kitchen").data == []

    def test_duplicate_names_allowed(self, ctx):
        a = add_tender(ctx, "kitchen", "Alice").data
        b = add_tender(ctx, "kitchen", "Alice").data
        assert a.id != b.id
        assert len(list_tenders(ctx, "kitchen").data) == 2

    def test_insertion_order(self, ctx):
        for name in ("C", "A", "B"):
            add_tender(ctx, "kitchen", name)
        assert [t.name for t in list_tenders(ctx, "kitchen").data] == ["C", "A", "B"]

    def test_dry_run_writes_nothing(self, ctx, dry_ctx):
        result = add_tender(dry_ctx, "kitchen", "Alice")
        assert result.success
        assert list_tenders(ctx, "kitchen").data == []


class TestRenameTender:
    def test_renames_in_place(self, ctx):
        first = add_tender(ctx, "kitchen", "Alice").data
        add_tender(ctx, "kitchen", "Bob")
        result = rename_tender(ctx, "kitchen", first.id, " Alicia ")
        assert result.success
        assert result.data.name == "Alicia"
        assert [t.name for t in list_tenders(ctx, "kitchen").data] == ["Alicia", "Bob"]

    def test_unknown_id(self, ctx):
        result = rename_tender(ctx, "kitchen", "c_missing", "X")
        assert result.error.code == "NOT_FOUND"
        assert result.error.message == "Tender not found"
        assert result.error.details["item_id"] == "c_missing"

    def test_blank_name_checked_before_lookup(self, ctx):
        result = rename_tender(ctx, "kitchen", "c_missing", " ")
        assert result.error.code == "INVALID_ARGUMENT"
        assert result.error.message == "Invalid new name for tender"

    def test_history_keeps_old_name(self, ctx, clock):
        tender = add_tender(ctx, "kitchen", "Alice").data
        record_tending(ctx, "kitchen", RecordTendingRequest("Alice", "chore_x"))
        rename_tender(ctx, "kitchen", tender.id, "Alicia")
        assert list_history(ctx, "kitchen").data[0].person == "Alice"


class TestDeleteTender:
    def test_deletes(self, ctx):
        tender = add_tender(ctx, "kitchen", "Alice").data
        assert delete_tender(ctx, "kitchen", tender.id).success
        assert list_tenders(ctx, "kitchen").data == []

    def test_unknown_id(self, ctx):
        result = delete_tender(ctx, "kitchen", "c_missing")
        assert result.error.code == "NOT_FOUND"

    def test_history_is_kept(self, ctx, clock):
        tender = add_tender(ctx, "kitchen", "Alice").data
        record_tending(ctx, "kitchen", RecordTendingRequest("Alice", "chore_x"))
        delete_tender(ctx, "kitchen", tender.id)
        history = list_history(ctx, "kitchen").data
        assert [e.person for e in history] == ["Alice"]

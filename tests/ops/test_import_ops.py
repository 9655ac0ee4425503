"""Tests for tendbook.ops.imports: validation, union-by-id merge, export."""

from __future__ import annotations

import copy

import pytest

from tendbook.core.errors import InvalidArgumentError
from tendbook.ops.chores import list_chores
from tendbook.ops.history import delete_history_entry, get_last_tended, list_history, record_tending
from tendbook.ops.imports import export_document, import_document, parse_external_document
from tendbook.ops.instance import get_instance
from tendbook.ops.requests import RecordTendingRequest
from tendbook.ops.tenders import add_tender, list_tenders


@pytest.fixture
def payload() -> dict:
    return {
        "caretakers": [{"id": "c_1", "name": "Alice"}, {"id": "c_2", "name": "Bob"}],
        "chores": [{"id": "chore_1", "name": "Dishes", "icon": "🍽"}],
        "tending_log": [
            {"id": "h_1", "timestamp": 100, "person": "Alice", "chore_id": "chore_1", "notes": ""},
            {"id": "h_2", "timestamp": 200, "person": "Bob", "chore_id": "chore_1", "notes": "rinsed"},
        ],
        "last_tended_timestamp": 200,
        "last_caretaker": "Bob",
    }


class TestImportMerge:
    def test_inserts_records_verbatim(self, ctx, payload):
        result = import_document(ctx, "kitchen", payload)
        assert result.success

        assert [(t.id, t.name) for t in list_tenders(ctx, "kitchen").data] == [
            ("c_1", "Alice"),
            ("c_2", "Bob"),
        ]
        chore_ids = [c.id for c in list_chores(ctx, "kitchen").data]
        assert chore_ids[-1] == "chore_1"
        assert len(chore_ids) == 2  # seed chore + imported
        history = list_history(ctx, "kitchen").data
        assert [e.id for e in history] == ["h_2", "h_1"]
        assert history[1].notes is None
        assert history[0].notes == "rinsed"

    def test_summary_counts_presented_records(self, ctx, payload):
        summary = import_document(ctx, "kitchen", payload).data
        assert (summary.tenders, summary.chores, summary.history_entries) == (2, 1, 2)

    def test_idempotent(self, ctx, payload):
        import_document(ctx, "kitchen", payload)
        once = get_instance(ctx, "kitchen").data
        again = import_document(ctx, "kitchen", payload)
        twice = get_instance(ctx, "kitchen").data
        assert twice == once
        # summary is unchanged even though nothing was inserted
        assert again.data.tenders == 2
        assert again.metadata == {
            "inserted_tenders": 0,
            "inserted_chores": 0,
            "inserted_history_entries": 0,
        }

    def test_existing_id_wins(self, ctx, payload):
        import_document(ctx, "kitchen", payload)
        changed = copy.deepcopy(payload)
        changed["caretakers"][0]["name"] = "Mallory"
        import_document(ctx, "kitchen", changed)
        assert list_tenders(ctx, "kitchen").data[0].name == "Alice"

    def test_duplicate_ids_within_payload_first_wins(self, ctx, payload):
        payload["caretakers"].append({"id": "c_1", "name": "Shadow"})
        result = import_document(ctx, "kitchen", payload)
        assert result.data.tenders == 3
        assert result.metadata["inserted_tenders"] == 2
        names = [t.name for t in list_tenders(ctx, "kitchen").data]
        assert names == ["Alice", "Bob"]

    def test_inserted_counts_in_metadata(self, ctx, payload):
        result = import_document(ctx, "kitchen", payload)
        assert result.metadata == {
            "inserted_tenders": 2,
            "inserted_chores": 1,
            "inserted_history_entries": 2,
        }

    def test_dry_run_writes_nothing(self, ctx, dry_ctx, payload):
        result = import_document(dry_ctx, "kitchen", payload)
        assert result.success
        assert result.metadata["inserted_tenders"] == 2
        assert list_tenders(ctx, "kitchen").data == []


class TestImportLastTended:
    def test_newer_declared_timestamp_wins(self, ctx, payload):
        import_document(ctx, "kitchen", payload)
        last = get_last_tended(ctx, "kitchen").data
        assert (last.last_tended_timestamp, last.last_tender) == (200, "Bob")

    def test_older_declared_timestamp_ignored(self, ctx, clock, payload):
        clock.set(10_000)
        record_tending(ctx, "kitchen", RecordTendingRequest("Cara", "chore_x"))
        import_document(ctx, "kitchen", payload)
        last = get_last_tended(ctx, "kitchen").data
        assert (last.last_tended_timestamp, last.last_tender) == (10_000, "Cara")

    def test_equal_declared_timestamp_ignored(self, ctx, clock, payload):
        clock.set(200)
        record_tending(ctx, "kitchen", RecordTendingRequest("Cara", "chore_x"))
        import_document(ctx, "kitchen", payload)
        assert get_last_tended(ctx, "kitchen").data.last_tender == "Cara"

    def test_zero_declared_timestamp_is_ignored(self, ctx, payload):
        payload["last_tended_timestamp"] = 0
        import_document(ctx, "kitchen", payload)
        last = get_last_tended(ctx, "kitchen").data
        assert (last.last_tended_timestamp, last.last_tender) == (None, None)

    def test_missing_declared_timestamp_leaves_fields(self, ctx, payload):
        del payload["last_tended_timestamp"]
        import_document(ctx, "kitchen", payload)
        last = get_last_tended(ctx, "kitchen").data
        assert last.last_tended_timestamp is None
        assert last.last_tender is None

    def test_last_tender_fallback(self, ctx, payload):
        del payload["last_caretaker"]
        payload["last_tender"] = "Bobby"
        import_document(ctx, "kitchen", payload)
        assert get_last_tended(ctx, "kitchen").data.last_tender == "Bobby"

    def test_no_tender_name_given(self, ctx, payload):
        del payload["last_caretaker"]
        import_document(ctx, "kitchen", payload)
        last = get_last_tended(ctx, "kitchen").data
        assert last.last_tended_timestamp == 200
        assert last.last_tender is None


class TestImportValidation:
    @pytest.mark.parametrize("key", ["caretakers", "chores", "tending_log"])
    def test_missing_collection(self, ctx, payload, key):
        del payload[key]
        result = import_document(ctx, "kitchen", payload)
        assert result.error.code == "INVALID_ARGUMENT"
        assert f"'{key}' must be an array" in result.error.message

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda p: p["caretakers"][0].pop("name"),
            lambda p: p["caretakers"][0].update(id=""),
            lambda p: p["chores"][0].pop("icon"),
            lambda p: p["tending_log"][0].pop("person"),
            lambda p: p["tending_log"][0].update(timestamp="100"),
            lambda p: p["tending_log"][0].update(timestamp=True),
            lambda p: p["tending_log"][0].update(notes=7),
            lambda p: p.update(last_tended_timestamp="soon"),
            lambda p: p["chores"].append("not an object"),
        ],
    )
    def test_malformed_record(self, ctx, payload, mutate):
        mutate(payload)
        result = import_document(ctx, "kitchen", payload)
        assert result.error.code == "INVALID_ARGUMENT"
        assert result.error.message.startswith("Invalid import data")

    def test_nothing_written_on_late_failure(self, ctx, payload):
        payload["tending_log"][-1].pop("id")
        assert not import_document(ctx, "kitchen", payload).success
        assert list_tenders(ctx, "kitchen").data == []
        assert list_history(ctx, "kitchen").data == []

    def test_not_an_object(self):
        with pytest.raises(InvalidArgumentError):
            parse_external_document(["caretakers"])

    def test_null_chore_id_allowed(self, ctx, payload):
        payload["tending_log"][0]["chore_id"] = None
        assert import_document(ctx, "kitchen", payload).success

    @pytest.mark.parametrize("value", [2**63, 10**30, -1])
    def test_declared_timestamp_out_of_range(self, ctx, payload, value):
        payload["last_tended_timestamp"] = value
        result = import_document(ctx, "kitchen", payload)
        assert result.error.code == "INVALID_ARGUMENT"
        assert "out of range" in result.error.message
        assert get_last_tended(ctx, "kitchen").data.last_tended_timestamp is None

    @pytest.mark.parametrize("value", [2**63, -5])
    def test_entry_timestamp_out_of_range(self, ctx, payload, value):
        payload["tending_log"][1]["timestamp"] = value
        result = import_document(ctx, "kitchen", payload)
        assert result.error.code == "INVALID_ARGUMENT"
        assert "tending_log[1].timestamp" in result.error.message
        assert list_history(ctx, "kitchen").data == []

    def test_largest_storable_timestamp_accepted(self, ctx, payload):
        payload["tending_log"][1]["timestamp"] = 2**63 - 1
        payload["last_tended_timestamp"] = 100
        assert import_document(ctx, "kitchen", payload).success
        # deleting the cached entry rescans and stores the largest timestamp
        assert delete_history_entry(ctx, "kitchen", "h_1").success
        assert get_last_tended(ctx, "kitchen").data.last_tended_timestamp == 2**63 - 1


class TestExport:
    def test_shape(self, ctx, clock):
        add_tender(ctx, "kitchen", "Alice")
        clock.set(500)
        record_tending(ctx, "kitchen", RecordTendingRequest("Alice", "chore_1", "ok"))
        data = export_document(ctx, "kitchen").data
        assert set(data) == {
            "caretakers",
            "chores",
            "tending_log",
            "last_tended_timestamp",
            "last_caretaker",
        }
        assert data["caretakers"][0]["name"] == "Alice"
        assert data["tending_log"][0]["notes"] == "ok"
        assert data["last_tended_timestamp"] == 500
        assert data["last_caretaker"] == "Alice"

    def test_export_imports_cleanly_elsewhere(self, ctx, clock):
        add_tender(ctx, "kitchen", "Alice")
        clock.set(500)
        record_tending(ctx, "kitchen", RecordTendingRequest("Alice", "chore_1"))
        exported = export_document(ctx, "kitchen").data

        assert import_document(ctx, "garden", exported).success
        garden = get_instance(ctx, "garden").data
        kitchen = get_instance(ctx, "kitchen").data
        assert garden.tenders == kitchen.tenders
        assert garden.tending_log == kitchen.tending_log
        assert garden.last_tended_timestamp == 500
        # garden keeps its own seed chore next to the imported one
        assert len(garden.chores) == 2

    def test_export_into_itself_is_noop(self, ctx, clock):
        clock.set(500)
        record_tending(ctx, "kitchen", RecordTendingRequest("Alice", "chore_1"))
        before = get_instance(ctx, "kitchen").data
        import_document(ctx, "kitchen", export_document(ctx, "kitchen").data)
        assert get_instance(ctx, "kitchen").data == before

"""
Ticket Bot - Storage Tests
==========================

Tests for the persisted ticket counter and the in-memory registry.
"""

import json
from datetime import datetime, timezone

import pytest

from src.services.tickets import CounterStore, TicketRecord, TicketRegistry, format_ticket_id


def make_record(ticket_id=1, owner_id=10, channel_id=100):
    return TicketRecord(
        id=ticket_id,
        owner_id=owner_id,
        owner_display_name=f"user{owner_id}",
        channel_id=channel_id,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


# =============================================================================
# Counter Store
# =============================================================================

class TestCounterLoad:
    """Tests for reading the counter file."""

    def test_missing_file_starts_at_one(self, tmp_path):
        assert CounterStore(tmp_path / "counter.json").value == 1

    def test_reads_stored_counter(self, tmp_path):
        path = tmp_path / "counter.json"
        path.write_text(json.dumps({"counter": 42}))
        assert CounterStore(path).value == 42

    def test_save_then_load_round_trip(self, tmp_path):
        path = tmp_path / "counter.json"
        CounterStore(path).save(5)
        assert CounterStore(path).load() == 5

    @pytest.mark.parametrize("content", [
        "not json",
        "[]",
        '{"counter": "7"}',
        '{"counter": 0}',
        '{"counter": true}',
        '{"other": 3}',
    ])
    def test_malformed_file_starts_at_one(self, tmp_path, content):
        path = tmp_path / "counter.json"
        path.write_text(content)
        assert CounterStore(path).value == 1


class TestCounterAllocate:
    """Tests for handing out ticket numbers."""

    def test_allocate_returns_current_and_persists_next(self, tmp_path):
        path = tmp_path / "counter.json"
        store = CounterStore(path)

        assert store.allocate() == 1
        assert json.loads(path.read_text()) == {"counter": 2}
        assert store.value == 2

    def test_allocations_are_sequential(self, tmp_path):
        store = CounterStore(tmp_path / "counter.json")
        assert [store.allocate() for _ in range(3)] == [1, 2, 3]

    def test_survives_restart(self, tmp_path):
        path = tmp_path / "counter.json"
        CounterStore(path).allocate()
        CounterStore(path).allocate()

        assert CounterStore(path).value == 3

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "data" / "counter.json"
        CounterStore(path).allocate()
        assert path.exists()

    def test_leaves_no_temp_file(self, tmp_path):
        CounterStore(tmp_path / "counter.json").allocate()
        assert [p.name for p in tmp_path.iterdir()] == ["counter.json"]

    def test_write_failure_hands_out_nothing(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        store = CounterStore(blocker / "counter.json")

        with pytest.raises(OSError):
            store.allocate()
        assert store.value == 1


# =============================================================================
# Ticket Registry
# =============================================================================

class TestTicketRegistry:
    """Tests for the open-ticket registry."""

    def test_find_by_channel_and_owner(self):
        registry = TicketRegistry()
        record = make_record()
        registry.insert(record)

        assert registry.find_by_channel(100) is record
        assert registry.find_by_owner(10) is record
        assert 100 in registry
        assert len(registry) == 1

    def test_unknown_lookups_return_none(self):
        registry = TicketRegistry()
        assert registry.find_by_channel(1) is None
        assert registry.find_by_owner(1) is None

    def test_remove_returns_record_once(self):
        registry = TicketRegistry()
        record = make_record()
        registry.insert(record)

        assert registry.remove(100) is record
        assert registry.remove(100) is None
        assert registry.find_by_owner(10) is None

    def test_iterates_open_tickets(self):
        registry = TicketRegistry()
        registry.insert(make_record(1, 10, 100))
        registry.insert(make_record(2, 20, 200))

        assert sorted(r.id for r in registry) == [1, 2]


class TestTicketRecord:
    """Tests for record formatting."""

    def test_padded_id_and_channel_name(self):
        record = make_record(ticket_id=7)
        assert record.padded_id == "0007"
        assert record.channel_name == "ticket-0007"

    def test_ids_wider_than_padding(self):
        assert format_ticket_id(12345) == "12345"

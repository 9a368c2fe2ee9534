"""
Ticket Bot - Transcript Tests
=============================

Tests for transcript rendering, history collection and file output.
"""

from datetime import datetime

import pytest

from src.services.tickets.transcript import (
    TranscriptEntry,
    TranscriptWriter,
    collect_transcript_entries,
    format_timestamp,
    render,
)

from conftest import make_channel, make_guild


def entry(author, content, second):
    return TranscriptEntry(datetime(2024, 1, 2, 15, 4, second), author, content)


class TestRender:
    """Tests for transcript text rendering."""

    def test_newest_first_input_renders_oldest_first(self):
        entries = [entry("carol", "C", 7), entry("bob", "B", 6), entry("alice", "A", 5)]

        assert render(entries) == "\n".join([
            "[1/2/2024, 3:04:05 PM] alice: A",
            "[1/2/2024, 3:04:06 PM] bob: B",
            "[1/2/2024, 3:04:07 PM] carol: C",
        ])

    def test_empty_history_renders_empty_text(self):
        assert render([]) == ""

    def test_multiline_content_is_verbatim(self):
        assert render([entry("alice", "line one\nline two", 5)]) == (
            "[1/2/2024, 3:04:05 PM] alice: line one\nline two"
        )

    def test_naive_timestamp_is_not_shifted(self):
        assert format_timestamp(datetime(2024, 12, 31, 0, 0, 9)) == "12/31/2024, 12:00:09 AM"

    def test_month_day_and_hour_are_not_padded(self):
        assert format_timestamp(datetime(2024, 3, 5, 9, 7, 1)) == "3/5/2024, 9:07:01 AM"
        assert format_timestamp(datetime(2024, 3, 5, 12, 30, 0)) == "3/5/2024, 12:30:00 PM"


class TestCollect:
    """Tests for fetching channel history."""

    @pytest.mark.asyncio
    async def test_collects_in_fetch_order(self, sample_history):
        channel = make_channel(make_guild(), 1, history=sample_history)

        entries = await collect_transcript_entries(channel)

        assert [e.author for e in entries] == ["carol", "bob", "alice"]
        assert entries[0].content == "third"

    @pytest.mark.asyncio
    async def test_limit_is_capped_at_one_hundred(self):
        channel = make_channel(make_guild(), 1)

        await collect_transcript_entries(channel, limit=500)

        channel.history.assert_called_once_with(limit=100)


class TestTranscriptWriter:
    """Tests for transcript file output."""

    def test_writes_named_file(self, tmp_path):
        writer = TranscriptWriter(tmp_path / "transcripts")

        path = writer.write(7, [entry("alice", "hello", 5)])

        assert path == tmp_path / "transcripts" / "ticket-7.txt"
        assert path.read_text(encoding="utf-8") == "[1/2/2024, 3:04:05 PM] alice: hello"

    def test_empty_history_writes_empty_file(self, tmp_path):
        path = TranscriptWriter(tmp_path).write(1, [])
        assert path.read_text(encoding="utf-8") == ""

    def test_lone_surrogate_is_replaced(self, tmp_path):
        path = TranscriptWriter(tmp_path).write(1, [entry("alice", "bad \ud83d half-emoji", 5)])
        assert path.read_text(encoding="utf-8") == "[1/2/2024, 3:04:05 PM] alice: bad ? half-emoji"

    def test_unwritable_directory_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        with pytest.raises(OSError):
            TranscriptWriter(blocker).write(1, [])

"""Tests for window-based reducers."""

from __future__ import annotations

import pytest

from context_reduction.reducers import (
    HeadTailWindowReducer,
    NoOpReducer,
    SlidingWindowReducer,
    last_entries,
    split_older_and_recent,
)
from context_reduction.transcript import Entry, Transcript


def _texts(transcript):
    return [entry.text for entry in transcript]


class TestHelpers:
    """Tests for shared reducer helpers."""

    def test_last_entries(self):
        """Test trailing selection including the zero case."""
        entries = [Entry.prompt(str(i)) for i in range(5)]

        assert [e.text for e in last_entries(entries, 2)] == ["3", "4"]
        assert last_entries(entries, 0) == []
        assert last_entries(entries, 10) == entries

    def test_split_older_and_recent(self):
        """Test the boundary between older and recent entries."""
        entries = [Entry.prompt(str(i)) for i in range(5)]

        older, recent = split_older_and_recent(entries, 2)

        assert [e.text for e in older] == ["0", "1", "2"]
        assert [e.text for e in recent] == ["3", "4"]
        assert split_older_and_recent(entries, 9) == ([], entries)


class TestSlidingWindowReducer:
    """Tests for SlidingWindowReducer."""

    @pytest.mark.asyncio
    async def test_keeps_last_turns(self, sample_transcript):
        """Test instructions plus the last k conversation entries remain."""
        reduced = await SlidingWindowReducer(turns=3).reduce(sample_transcript)

        assert _texts(reduced) == ["sys", "r2", "t3", "r3"]

    @pytest.mark.asyncio
    async def test_window_larger_than_conversation(self, sample_transcript):
        """Test everything is kept when the window covers it all."""
        reduced = await SlidingWindowReducer(turns=10).reduce(sample_transcript)

        assert reduced == sample_transcript

    @pytest.mark.asyncio
    async def test_zero_turns(self, sample_transcript):
        """Test a zero window keeps only instructions."""
        reduced = await SlidingWindowReducer(turns=0).reduce(sample_transcript)

        assert _texts(reduced) == ["sys"]

    @pytest.mark.asyncio
    async def test_drop_instructions(self, sample_transcript):
        """Test instructions can be dropped."""
        reducer = SlidingWindowReducer(turns=2, keep_instructions=False)

        reduced = await reducer.reduce(sample_transcript)

        assert _texts(reduced) == ["t3", "r3"]

    @pytest.mark.asyncio
    async def test_instructions_kept_in_order(self):
        """Test interleaved instructions move to the front in order."""
        transcript = Transcript([
            Entry.instructions("a"),
            Entry.prompt("t1"),
            Entry.instructions("b"),
            Entry.response("r1"),
        ])

        reduced = await SlidingWindowReducer(turns=1).reduce(transcript)

        assert _texts(reduced) == ["a", "b", "r1"]

    @pytest.mark.asyncio
    async def test_edge_transcripts(self):
        """Test empty and instructions-only transcripts pass through."""
        only_instructions = Transcript([Entry.instructions("sys")])

        assert await SlidingWindowReducer(turns=2).reduce(Transcript()) == Transcript()
        assert await SlidingWindowReducer(turns=2).reduce(only_instructions) == only_instructions

    def test_name_and_validation(self):
        """Test the display name and negative window rejection."""
        assert SlidingWindowReducer(turns=4).name == "SlidingWindow(4)"
        with pytest.raises(ValueError):
            SlidingWindowReducer(turns=-1)


class TestHeadTailWindowReducer:
    """Tests for HeadTailWindowReducer."""

    @pytest.mark.asyncio
    async def test_keeps_head_and_tail(self, sample_transcript):
        """Test instructions plus the last two entries remain."""
        reduced = await HeadTailWindowReducer(tail_turns=2).reduce(sample_transcript)

        assert reduced == Transcript([
            Entry.instructions("sys"),
            Entry.prompt("t3"),
            Entry.response("r3"),
        ])

    @pytest.mark.asyncio
    async def test_short_conversation(self):
        """Test min(k, n) conversation entries are kept."""
        transcript = Transcript([Entry.instructions("sys"), Entry.prompt("only")])

        reduced = await HeadTailWindowReducer(tail_turns=4).reduce(transcript)

        assert reduced == transcript

    def test_name(self):
        """Test the display name."""
        assert HeadTailWindowReducer().name == "HeadTailWindow"


class TestNoOpReducer:
    """Tests for NoOpReducer."""

    @pytest.mark.asyncio
    async def test_returns_input(self, sample_transcript):
        """Test the transcript is returned unchanged."""
        reducer = NoOpReducer()

        assert await reducer.reduce(sample_transcript) is sample_transcript
        assert reducer.name == "NoOp"

"""Tests for summarizer interfaces, non-LLM summarizers and configuration."""

from __future__ import annotations

import pytest

from context_reduction.summarization import (
    CallableSummarizer,
    EmptyInputError,
    ExtractiveSummarizer,
    HierarchicalSummaryConfiguration,
    MissingLocaleInstructionsError,
    RollingSummaryConfiguration,
    SummarizerProtocol,
    SummaryGranularity,
)
from context_reduction.transcript import Entry


# ============================================================================
# ExtractiveSummarizer Tests
# ============================================================================


class TestExtractiveSummarizer:
    """Tests for ExtractiveSummarizer."""

    @pytest.mark.asyncio
    async def test_role_tagged_lines(self):
        """Test entries become role-tagged lines."""
        summarizer = ExtractiveSummarizer()

        summary = await summarizer.summarize([Entry.prompt("Hello there"), Entry.response("Hi")])

        assert summary == "[USER]: Hello there\n[ASSISTANT]: Hi"

    @pytest.mark.asyncio
    async def test_without_roles(self):
        """Test role tags can be omitted."""
        summarizer = ExtractiveSummarizer(include_roles=False)

        summary = await summarizer.summarize([Entry.prompt("Hello"), Entry.response("Hi")])

        assert summary == "Hello\nHi"

    @pytest.mark.asyncio
    async def test_long_entries_are_truncated(self):
        """Test each entry is cut to max_chars_per_entry."""
        summarizer = ExtractiveSummarizer(max_chars_per_entry=20, include_roles=False)

        summary = await summarizer.summarize([Entry.prompt("a" * 50)])

        assert summary == "a" * 17 + "..."

    @pytest.mark.asyncio
    async def test_total_size_is_bounded(self):
        """Test the digest stops at the token budget."""
        summarizer = ExtractiveSummarizer(max_chars_per_entry=100, max_tokens=50)
        entries = [Entry.prompt("word " * 15) for _ in range(10)]

        summary = await summarizer.summarize(entries)

        assert len(summary) <= 50 * 4 + 10

    @pytest.mark.asyncio
    async def test_no_text_content(self):
        """Test tool-only input yields the placeholder."""
        summary = await ExtractiveSummarizer().summarize([Entry.tool_call("search")])

        assert summary == "[No content to summarize]"

    @pytest.mark.asyncio
    async def test_validation(self):
        """Test the shared preconditions apply."""
        summarizer = ExtractiveSummarizer()

        with pytest.raises(EmptyInputError):
            await summarizer.summarize([])
        with pytest.raises(MissingLocaleInstructionsError):
            await summarizer.summarize([Entry.prompt("Hallo")], locale="de_DE")


# ============================================================================
# CallableSummarizer Tests
# ============================================================================


class TestCallableSummarizer:
    """Tests for CallableSummarizer."""

    @pytest.mark.asyncio
    async def test_delegates_arguments(self):
        """Test the function receives entries, instructions and locale."""
        received = []

        async def summarize(entries, instructions, locale):
            received.append((entries, instructions, locale))
            return f"{len(entries)} entries"

        summarizer = CallableSummarizer(summarize)

        summary = await summarizer.summarize([Entry.prompt("a"), Entry.prompt("b")], "Short.")

        assert summary == "2 entries"
        assert received[0][1:] == ("Short.", "en_US")
        assert isinstance(summarizer, SummarizerProtocol)


# ============================================================================
# Configuration Tests
# ============================================================================


class TestConfiguration:
    """Tests for summary configuration objects."""

    def test_rolling_defaults(self):
        """Test rolling summary defaults."""
        config = RollingSummaryConfiguration()

        assert config.recent_turns_to_keep == 2
        assert config.summarizer is None
        assert config.locale == "en_US"
        assert config.keep_instructions is True

    def test_hierarchical_defaults(self):
        """Test hierarchical summary defaults to one global level."""
        config = HierarchicalSummaryConfiguration()

        assert config.granularity_levels == [SummaryGranularity.GLOBAL]
        assert config.topic_detector is None

    def test_negative_recent_turns(self):
        """Test negative recent_turns_to_keep is rejected."""
        with pytest.raises(ValueError):
            RollingSummaryConfiguration(recent_turns_to_keep=-1)
        with pytest.raises(ValueError):
            HierarchicalSummaryConfiguration(recent_turns_to_keep=-1)

    def test_granularity_labels(self):
        """Test the labels used in summary entries."""
        assert SummaryGranularity.PER_TURN.label == "Per-Turn"
        assert SummaryGranularity.PER_TOPIC.label == "Per-Topic"
        assert SummaryGranularity.GLOBAL.label == "Global"

"""Tests for LLM-backed state extraction."""

from __future__ import annotations

import pytest

from context_reduction.llm.base import LLMProviderError
from context_reduction.state import (
    EXCERPT_KEY,
    CallableStateExtractor,
    ExtractedFact,
    LLMStateExtractor,
    StateExtractorProtocol,
    StructuredState,
    parse_state_response,
)
from context_reduction.transcript import Entry

from tests.conftest import MockLLMProvider


# ============================================================================
# Parsing Tests
# ============================================================================


class TestParseStateResponse:
    """Tests for parse_state_response."""

    def test_information_object(self):
        """Test the documented JSON shape."""
        state = parse_state_response(
            '{"information": [{"key": "name", "value": "Ada"}, {"key": "party_size", "value": 4}]}'
        )

        assert [(f.key, f.value) for f in state.information] == [
            ("name", "Ada"),
            ("party_size", "4"),
        ]

    def test_fenced_flat_object(self):
        """Test a fenced flat key/value object."""
        state = parse_state_response('```json\n{"date": "Friday", "time": "7pm"}\n```')

        assert {f.key: f.value for f in state.information} == {"date": "Friday", "time": "7pm"}

    def test_bare_list(self):
        """Test a bare list of facts."""
        state = parse_state_response('[{"key": "decision_api_version", "value": "v2"}]')

        assert state.information == [ExtractedFact(key="decision_api_version", value="v2")]

    def test_repeated_json_keys_are_folded(self):
        """Test one JSON reply repeating a key yields a single fact."""
        state = parse_state_response(
            '{"information": [{"key": "name", "value": "Ann"}, '
            '{"key": "name", "value": "Bob"}, {"key": "city", "value": "Oslo"}]}'
        )

        assert state.information == [
            ExtractedFact(key="name", value="Ann; Bob"),
            ExtractedFact(key="city", value="Oslo"),
        ]

    def test_key_value_lines(self):
        """Test plain ``key: value`` lines are the fallback."""
        state = parse_state_response(
            "- name: Ada\n- constraint quiet table: yes\nnot a fact\n* date: Friday"
        )

        assert {f.key: f.value for f in state.information} == {
            "name": "Ada",
            "constraint_quiet_table": "yes",
            "date": "Friday",
        }

    def test_nothing_usable(self):
        """Test prose without facts gives an empty state."""
        assert parse_state_response("Nothing important was said.").is_empty()


# ============================================================================
# LLMStateExtractor Tests
# ============================================================================


class TestLLMStateExtractor:
    """Tests for LLMStateExtractor."""

    @pytest.mark.asyncio
    async def test_empty_input(self, mock_llm_provider):
        """Test empty input gives an empty state without a call."""
        state = await LLMStateExtractor(mock_llm_provider).extract_state([])

        assert state.is_empty()
        assert mock_llm_provider.call_count == 0

    @pytest.mark.asyncio
    async def test_single_call(self, sample_llm_config):
        """Test input that fits is extracted with one call."""
        provider = MockLLMProvider(
            sample_llm_config,
            responses=['{"information": [{"key": "name", "value": "Ada"}]}'],
        )

        state = await LLMStateExtractor(provider).extract_state(
            [Entry.prompt("I'm Ada"), Entry.response("Nice to meet you, Ada")]
        )

        assert state.information == [ExtractedFact(key="name", value="Ada")]
        assert "[Entry 0]: I'm Ada" in provider.prompts[0]

    @pytest.mark.asyncio
    async def test_additional_guidance(self, mock_llm_provider):
        """Test extra instructions are appended to the prompt."""
        extractor = LLMStateExtractor(mock_llm_provider, instructions="Track allergies.")

        await extractor.extract_state([Entry.prompt("I can't eat nuts")])

        assert "Additional guidance:\nTrack allergies." in mock_llm_provider.prompts[0]

    @pytest.mark.asyncio
    async def test_splits_and_merges_on_overflow(self, sample_llm_config):
        """Test overflowing input is halved and the states merged."""
        entries = [Entry.prompt(f"message {i}") for i in range(4)]
        provider = MockLLMProvider(
            sample_llm_config,
            responses=[
                '{"information": [{"key": "name", "value": "Ada"}]}',
                '{"information": [{"key": "name", "value": "Grace"},'
                ' {"key": "date", "value": "Friday"}]}',
            ],
            overflow_when=lambda prompt: prompt.count("[Entry ") > 2,
        )

        state = await LLMStateExtractor(provider).extract_state(entries)

        assert {f.key: f.value for f in state.information} == {
            "name": "Ada; Grace",
            "date": "Friday",
        }
        assert provider.call_count == 3

    @pytest.mark.asyncio
    async def test_large_entry_is_split_by_characters(self, sample_llm_config):
        """Test a single oversized entry is extracted in halves."""
        provider = MockLLMProvider(
            sample_llm_config,
            responses=['{"time": "7pm"}', '{"table": "quiet"}'],
            overflow_when=lambda prompt: prompt.count("~") > 250,
        )

        state = await LLMStateExtractor(provider).extract_state([Entry.prompt("~" * 400)])

        assert {f.key: f.value for f in state.information} == {"time": "7pm", "table": "quiet"}
        assert provider.call_count == 3

    @pytest.mark.asyncio
    async def test_excerpt_floor(self, sample_llm_config):
        """Test a short entry that still overflows is kept as an excerpt."""
        provider = MockLLMProvider(sample_llm_config, overflow_when=lambda prompt: True)

        state = await LLMStateExtractor(provider).extract_state([Entry.prompt("~" * 150)])

        assert state.information == [ExtractedFact(key=EXCERPT_KEY, value="~" * 150 + "...")]

    @pytest.mark.asyncio
    async def test_tool_entry_overflow(self, sample_llm_config):
        """Test an overflowing entry without text yields nothing."""
        provider = MockLLMProvider(sample_llm_config, overflow_when=lambda prompt: True)

        state = await LLMStateExtractor(provider).extract_state([Entry.tool_call("search")])

        assert state.is_empty()

    @pytest.mark.asyncio
    async def test_other_errors_abort(self, sample_llm_config):
        """Test provider errors other than overflow propagate."""
        provider = MockLLMProvider(
            sample_llm_config, responses=[LLMProviderError("bad gateway", provider="mock")]
        )

        with pytest.raises(LLMProviderError):
            await LLMStateExtractor(provider).extract_state([Entry.prompt("hi")])


class TestCallableStateExtractor:
    """Tests for CallableStateExtractor."""

    @pytest.mark.asyncio
    async def test_delegates(self):
        """Test the function result is returned."""

        async def extract(entries):
            return StructuredState(
                information=[ExtractedFact(key="count", value=str(len(entries)))]
            )

        extractor = CallableStateExtractor(extract)

        state = await extractor.extract_state([Entry.prompt("a")])

        assert state.information[0].value == "1"
        assert isinstance(extractor, StateExtractorProtocol)

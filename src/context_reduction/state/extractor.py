"""LLM-backed state extraction with recursive split/merge."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Optional

from pydantic import ValidationError

from ..constants import MIN_SPLIT_MIDPOINT_CHARS, TRUNCATION_FLOOR_CHARS
from ..llm.base import ContextWindowExceededError, LLMProvider, Message, MessageRole
from ..topics.detector import render_indexed_entries
from ..transcript import Entry, extract_text
from .models import ExtractedFact, StructuredState

logger = logging.getLogger(__name__)

EXCERPT_KEY = "context_excerpt"

STATE_EXTRACTION_INSTRUCTIONS = """Analyze the following conversation and extract all important information as key-value pairs.

Use descriptive keys that indicate the type of information:
- For facts: use simple keys like "name", "date", "time", "preference", "quantity"
- For constraints: prefix with "constraint_" (e.g., "constraint_quiet_table", "constraint_gluten_free")
- For decisions: prefix with "decision_" (e.g., "decision_reservation_time", "decision_api_version")
- For other important info: use descriptive keys

Be concise but complete. Only include information that would be useful for future conversation turns.

Respond with JSON of the form {"information": [{"key": "...", "value": "..."}]}."""

_CODE_FENCE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)
_FACT_LINE = re.compile(r"^\s*(?:[-*]\s*)?([A-Za-z0-9_ ]+?)\s*:\s*(.+?)\s*$")


def _state_from_data(data: Any) -> StructuredState:
    if isinstance(data, list):
        data = {"information": data}
    elif isinstance(data, dict) and "information" not in data:
        data = {"information": [{"key": k, "value": v} for k, v in data.items()]}
    return StructuredState.combine([StructuredState.model_validate(data)])


def parse_state_response(content: str) -> StructuredState:
    """Parse model output into a structured state.

    JSON output (an ``information`` object, a bare list of facts or a flat
    key/value object, optionally fenced) is preferred. Otherwise every
    ``key: value`` line becomes a fact.
    """
    text = content.strip()
    fenced = _CODE_FENCE.search(text)
    if fenced:
        text = fenced.group(1)

    try:
        return _state_from_data(json.loads(text))
    except (json.JSONDecodeError, ValidationError):
        pass

    facts = []
    for line in text.splitlines():
        match = _FACT_LINE.match(line)
        if match:
            key = match.group(1).strip().replace(" ", "_")
            facts.append(ExtractedFact(key=key, value=match.group(2)))
    return StructuredState.combine([StructuredState(information=facts)])


class LLMStateExtractor:
    """State extractor using an LLM provider.

    Tries one extraction call over all entries. On a context window
    overflow the entries are halved, each half is extracted recursively
    and the partial states are merged. A single entry that overflows on
    its own is split by characters; once the split midpoint is at most
    100 characters its first 500 characters are kept under the
    ``context_excerpt`` key.
    """

    def __init__(
        self,
        llm_provider: LLMProvider,
        instructions: Optional[str] = None,
    ):
        """Initialize the extractor.

        Args:
            llm_provider: LLM provider used for extraction calls.
            instructions: Extra domain guidance appended to the prompt.
        """
        self._llm = llm_provider
        self._instructions = instructions

    async def extract_state(self, entries: List[Entry]) -> StructuredState:
        """Extract a structured state from entries.

        Raises:
            LLMProviderError: For provider failures other than overflow.
        """
        if not entries:
            return StructuredState()
        return await self._extract_with_retry(list(entries))

    def _build_prompt(self, entries: List[Entry]) -> str:
        prompt = STATE_EXTRACTION_INSTRUCTIONS
        if self._instructions:
            prompt += f"\n\nAdditional guidance:\n{self._instructions}"
        return f"{prompt}\n\nConversation:\n{render_indexed_entries(entries)}"

    async def _extract_with_retry(self, entries: List[Entry]) -> StructuredState:
        try:
            response = await self._llm.generate(
                [Message(role=MessageRole.USER, content=self._build_prompt(entries))]
            )
            return parse_state_response(response.content)
        except ContextWindowExceededError:
            logger.debug("State extraction over %d entries overflowed, splitting", len(entries))

        if len(entries) == 1:
            return await self._extract_from_single_entry(entries[0])

        midpoint = len(entries) // 2
        first = await self._extract_with_retry(entries[:midpoint])
        second = await self._extract_with_retry(entries[midpoint:])
        return first.merge(second)

    async def _extract_from_single_entry(self, entry: Entry) -> StructuredState:
        text = extract_text(entry)
        if text is None:
            return StructuredState()

        midpoint = len(text) // 2
        if midpoint <= MIN_SPLIT_MIDPOINT_CHARS:
            logger.debug("Entry of %d characters still overflows, keeping an excerpt", len(text))
            return StructuredState(
                information=[
                    ExtractedFact(key=EXCERPT_KEY, value=text[:TRUNCATION_FLOOR_CHARS] + "...")
                ]
            )

        first = await self._extract_with_retry([Entry.prompt(text[:midpoint])])
        second = await self._extract_with_retry([Entry.prompt(text[midpoint:])])
        return first.merge(second)

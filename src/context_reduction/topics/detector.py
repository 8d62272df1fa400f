"""LLM-backed topic detection."""

from __future__ import annotations

import json
import logging
import re
from typing import List, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..llm.base import ContextWindowExceededError, LLMProvider, Message, MessageRole
from ..transcript import Entry, extract_text
from .base import group_entries_by_indices

logger = logging.getLogger(__name__)

TOPIC_DETECTION_INSTRUCTIONS = """Analyze the following conversation and identify distinct topics.
Group the entries by topic. For each topic, list the entry indices that belong to it.

Format your response as JSON with this structure:
{
  "topics": [
    {
      "topic": "Topic name",
      "entryIndices": [0, 1, 2]
    },
    {
      "topic": "Another topic",
      "entryIndices": [3, 4, 5]
    }
  ]
}"""

_CODE_FENCE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)


class TopicDetectionResult(BaseModel):
    """One topic proposed by the model."""

    model_config = ConfigDict(populate_by_name=True)

    topic: str = Field(default="", description="The topic of the entries")
    entry_indices: List[int] = Field(
        default_factory=list,
        alias="entryIndices",
        description="The indices of the entries that are related to the topic",
    )


class TopicDetectionResponse(BaseModel):
    """The model's full topic detection answer."""

    topics: List[TopicDetectionResult] = Field(default_factory=list)


def render_indexed_entries(entries: Sequence[Entry]) -> str:
    """Render entries one per paragraph, each tagged with its index."""
    lines = []
    for index, entry in enumerate(entries):
        text = extract_text(entry)
        lines.append(f"[Entry {index}]: {text if text is not None else '(non-text entry)'}")
    return "\n\n".join(lines)


def parse_topic_response(content: str) -> List[TopicDetectionResult]:
    """Parse model output into topic results.

    Accepts a ``{"topics": [...]}`` object or a bare list of topics,
    optionally wrapped in a markdown code fence.

    Returns:
        The parsed topics; empty when the output is not usable.
    """
    text = content.strip()
    fenced = _CODE_FENCE.search(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            return []
        try:
            data = json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            return []

    if isinstance(data, list):
        data = {"topics": data}

    try:
        return TopicDetectionResponse.model_validate(data).topics
    except ValidationError:
        return []


class LLMTopicDetector:
    """Topic detector using one LLM call per detection.

    Example:
        detector = LLMTopicDetector(provider)
        groups = await detector.detect_topics(entries)
    """

    def __init__(self, llm_provider: LLMProvider):
        self._llm = llm_provider

    async def detect_topics(self, entries: List[Entry]) -> List[List[Entry]]:
        """Group entries by the topics the model identifies.

        The result always partitions ``entries``. Unusable model output
        and context window overflows both yield a single group holding
        every entry.

        Args:
            entries: Entries to group.

        Returns:
            The entry groups; empty for empty input.

        Raises:
            LLMProviderError: For provider failures other than overflow.
        """
        if not entries:
            return []

        prompt = (
            f"{TOPIC_DETECTION_INSTRUCTIONS}\n\n"
            f"Conversation:\n{render_indexed_entries(entries)}"
        )
        try:
            response = await self._llm.generate(
                [Message(role=MessageRole.USER, content=prompt)]
            )
        except ContextWindowExceededError:
            logger.warning(
                "Topic detection over %d entries overflowed, using a single group",
                len(entries),
            )
            return [list(entries)]

        results = parse_topic_response(response.content)
        if not results:
            logger.debug("No usable topics in model output")
        return group_entries_by_indices(
            (result.entry_indices for result in results), entries
        )

"""Local fixtures for reducer tests."""

from __future__ import annotations

from typing import List, Optional, Tuple

import pytest

from context_reduction.state import ExtractedFact, StructuredState
from context_reduction.transcript import Entry


class RecordingSummarizer:
    """Summarizer that records its inputs and names what it saw."""

    def __init__(self) -> None:
        self.calls: List[Tuple[List[Entry], Optional[str], str]] = []

    async def summarize(
        self,
        entries: List[Entry],
        instructions: Optional[str] = None,
        locale: str = "en_US",
    ) -> str:
        self.calls.append((list(entries), instructions, locale))
        return "+".join(entry.text or "?" for entry in entries)


class FixedStateExtractor:
    """State extractor returning preset facts."""

    def __init__(self, **facts: str) -> None:
        self.facts = facts
        self.calls: List[List[Entry]] = []

    async def extract_state(self, entries: List[Entry]) -> StructuredState:
        self.calls.append(list(entries))
        return StructuredState(
            information=[ExtractedFact(key=k, value=v) for k, v in self.facts.items()]
        )


class SplitInHalfDetector:
    """Topic detector splitting entries into two halves."""

    async def detect_topics(self, entries: List[Entry]) -> List[List[Entry]]:
        midpoint = max(1, len(entries) // 2)
        groups = [entries[:midpoint], entries[midpoint:]]
        return [group for group in groups if group]


@pytest.fixture
def recording_summarizer() -> RecordingSummarizer:
    return RecordingSummarizer()

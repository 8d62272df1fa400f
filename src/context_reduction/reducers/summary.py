"""Reducers that replace older conversation with summaries."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..llm.base import LLMProvider
from ..summarization.config import (
    HierarchicalSummaryConfiguration,
    RollingSummaryConfiguration,
    SummaryGranularity,
)
from ..summarization.llm_summarizer import LLMSummarizer
from ..topics.detector import LLMTopicDetector
from ..transcript import Entry, EntryKind, Transcript
from .base import ContextReducer, resolve_component, split_older_and_recent

logger = logging.getLogger(__name__)

ROLLING_SUMMARY_PREFIX = "Summary of previous conversation: "


def group_entries_into_turns(entries: List[Entry]) -> List[List[Entry]]:
    """Group conversation entries into turns.

    A prompt opens a new turn, a response closes the open turn, and any
    other entry joins the turn currently open.
    """
    turns: List[List[Entry]] = []
    current: List[Entry] = []

    for entry in entries:
        if entry.kind == EntryKind.PROMPT:
            if current:
                turns.append(current)
            current = [entry]
        elif entry.kind == EntryKind.RESPONSE:
            current.append(entry)
            turns.append(current)
            current = []
        else:
            current.append(entry)

    if current:
        turns.append(current)
    return turns


class RollingSummaryReducer(ContextReducer):
    """Replace older entries with one running summary.

    The last ``recent_turns_to_keep`` conversation entries stay verbatim.
    """

    def __init__(
        self,
        configuration: Optional[RollingSummaryConfiguration] = None,
        llm_provider: Optional[LLMProvider] = None,
    ):
        """Initialize the reducer.

        Args:
            configuration: Strategy configuration; defaults apply when None.
            llm_provider: Provider for the default summarizer.

        Raises:
            ReductionConfigurationError: If no summarizer is configured and
                no provider is given.
        """
        self.configuration = configuration or RollingSummaryConfiguration()
        self.summarizer = resolve_component(
            self.configuration.summarizer, LLMSummarizer, llm_provider, "summarizer"
        )

    @property
    def name(self) -> str:
        return "RollingSummary"

    async def reduce(self, transcript: Transcript) -> Transcript:
        config = self.configuration
        instructions, conversation = transcript.split()
        new_entries = list(instructions) if config.keep_instructions else []

        older, recent = split_older_and_recent(conversation, config.recent_turns_to_keep)
        if older:
            logger.debug("Summarizing %d older entries", len(older))
            summary = await self.summarizer.summarize(
                older,
                instructions=config.summarization_instructions,
                locale=config.locale,
            )
            new_entries.append(Entry.prompt(f"{ROLLING_SUMMARY_PREFIX}{summary}"))

        return Transcript(new_entries + recent)


class HierarchicalSummaryReducer(ContextReducer):
    """Replace older entries with one summary per granularity level.

    Levels are applied in configuration order, each producing one entry
    labeled ``"<Level> Summary: ..."``.
    """

    def __init__(
        self,
        configuration: Optional[HierarchicalSummaryConfiguration] = None,
        llm_provider: Optional[LLMProvider] = None,
    ):
        self.configuration = configuration or HierarchicalSummaryConfiguration()
        self.summarizer = resolve_component(
            self.configuration.summarizer, LLMSummarizer, llm_provider, "summarizer"
        )
        self.topic_detector = None
        if SummaryGranularity.PER_TOPIC in self.configuration.granularity_levels:
            self.topic_detector = resolve_component(
                self.configuration.topic_detector,
                LLMTopicDetector,
                llm_provider,
                "topic detector",
            )

    @property
    def name(self) -> str:
        return "HierarchicalSummary"

    async def reduce(self, transcript: Transcript) -> Transcript:
        config = self.configuration
        instructions, conversation = transcript.split()
        new_entries = list(instructions) if config.keep_instructions else []

        older, recent = split_older_and_recent(conversation, config.recent_turns_to_keep)
        if older:
            for granularity in config.granularity_levels:
                summary = await self._create_summary(older, granularity)
                new_entries.append(Entry.prompt(f"{granularity.label} Summary: {summary}"))

        return Transcript(new_entries + recent)

    async def _summarize(self, entries: List[Entry]) -> str:
        return await self.summarizer.summarize(
            entries,
            instructions=self.configuration.summarization_instructions,
            locale=self.configuration.locale,
        )

    async def _create_summary(
        self, entries: List[Entry], granularity: SummaryGranularity
    ) -> str:
        if granularity == SummaryGranularity.GLOBAL:
            return await self._summarize(entries)

        if granularity == SummaryGranularity.PER_TURN:
            turns = group_entries_into_turns(entries)
            logger.debug("Summarizing %d turns", len(turns))
            return "\n\n".join([await self._summarize(turn) for turn in turns])

        groups = await self.topic_detector.detect_topics(entries)
        logger.debug("Summarizing %d topic groups", len(groups))
        summaries = []
        for number, group in enumerate(groups, start=1):
            summaries.append(f"Topic {number}: {await self._summarize(group)}")
        return "\n\n".join(summaries)

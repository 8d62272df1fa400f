"""LLM-backed summarizer that survives oversized input.

The summarizer first tries one generation call over the whole input. When
the backend reports a context window overflow the input is split in half,
each half is summarized recursively and the partial summaries are merged
with a second call. Single entries that overflow on their own are split
by characters, down to a truncation floor that guarantees termination.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..constants import DEFAULT_LOCALE, MIN_SPLIT_MIDPOINT_CHARS, TRUNCATION_FLOOR_CHARS
from ..llm.base import ContextWindowExceededError, LLMProvider, Message, MessageRole
from ..transcript import Entry, extract_text
from .base import BaseSummarizer, validate_summary_request

logger = logging.getLogger(__name__)

DEFAULT_SUMMARIZATION_INSTRUCTIONS = (
    "Summarize the following conversation briefly, preserving only essential "
    "facts and decisions. Remove examples, repetition, and implementation "
    "details. Provide only the summary content directly without any "
    "introductory phrases, explanations, or meta-commentary. Start "
    "immediately with the summary."
)

COMBINE_INSTRUCTIONS = (
    "Combine and synthesize the following summaries into a single coherent "
    "summary. Preserve all important information and maintain chronological "
    "flow. Provide only the combined summary content directly without any "
    "introductory phrases."
)


def build_conversation_prompt(entries: List[Entry], instructions: str) -> str:
    """Build the single-call summarization prompt for entries."""
    conversation = "\n\n".join(
        text for text in (extract_text(entry) for entry in entries) if text is not None
    )
    return (
        f"{instructions}\n\n"
        f"Conversation to summarize:\n{conversation}\n\n"
        "Provide the summary now (no introductory phrases):"
    )


def build_text_prompt(text: str, instructions: str) -> str:
    """Build the summarization prompt for a raw piece of text."""
    return (
        f"{instructions}\n\n"
        f"Text to summarize:\n{text}\n\n"
        "Provide the summary now (no introductory phrases):"
    )


def build_combine_prompt(summaries: List[str]) -> str:
    """Build the prompt that merges partial summaries into one."""
    parts = "\n\n".join(
        f"Part {index}:\n{summary}" for index, summary in enumerate(summaries, start=1)
    )
    return (
        f"{COMBINE_INSTRUCTIONS}\n\n"
        f"Summaries to combine:\n{parts}\n\n"
        "Combined summary (no introductory phrases):"
    )


def truncate_to_floor(text: str) -> str:
    """Keep the first characters of a text that cannot be split further."""
    return text[:TRUNCATION_FLOOR_CHARS] + "..."


def split_text(text: str) -> Tuple[str, str]:
    """Split a text at its character midpoint."""
    midpoint = len(text) // 2
    return text[:midpoint], text[midpoint:]


class LLMSummarizer(BaseSummarizer):
    """Summarizer using an LLM provider with recursive split/merge.

    Only ContextWindowExceededError triggers splitting. Any other error
    from the provider aborts the whole call.

    Example:
        summarizer = LLMSummarizer(provider)
        summary = await summarizer.summarize(entries)
    """

    def __init__(
        self,
        llm_provider: LLMProvider,
        default_instructions: str = DEFAULT_SUMMARIZATION_INSTRUCTIONS,
    ):
        """Initialize the summarizer.

        Args:
            llm_provider: LLM provider used for every summarization call.
            default_instructions: Instructions used when the caller gives
                none.
        """
        self._llm = llm_provider
        self._default_instructions = default_instructions

    async def summarize(
        self,
        entries: List[Entry],
        instructions: Optional[str] = None,
        locale: str = DEFAULT_LOCALE,
    ) -> str:
        """Summarize entries, splitting the work when it overflows.

        Args:
            entries: Conversation entries to summarize.
            instructions: Custom instructions; required for non-default
                locales.
            locale: Locale identifier of the summary.

        Returns:
            The summary text.

        Raises:
            EmptyInputError: If entries is empty.
            MissingLocaleInstructionsError: For a non-default locale
                without instructions.
            LLMProviderError: For provider failures other than overflow.
        """
        validate_summary_request(entries, instructions, locale)
        return await self._summarize_entries(
            list(entries), instructions or self._default_instructions
        )

    async def _generate(self, prompt: str) -> str:
        response = await self._llm.generate(
            [Message(role=MessageRole.USER, content=prompt)]
        )
        return response.content

    async def _summarize_entries(self, entries: List[Entry], instructions: str) -> str:
        try:
            return await self._generate(build_conversation_prompt(entries, instructions))
        except ContextWindowExceededError:
            logger.debug("Summary of %d entries overflowed, splitting", len(entries))

        midpoint = len(entries) // 2
        if midpoint == 0:
            return await self._summarize_large_entry(entries[0], instructions)

        first = await self._summarize_entries(entries[:midpoint], instructions)
        second = await self._summarize_entries(entries[midpoint:], instructions)
        return await self._combine([first, second])

    async def _summarize_large_entry(self, entry: Entry, instructions: str) -> str:
        """Summarize one entry whose text alone overflows."""
        text = extract_text(entry)
        if text is None:
            return ""

        logger.debug("Splitting a single entry of %d characters", len(text))
        first_half, second_half = split_text(text)
        first = await self._summarize_text(first_half, instructions)
        second = await self._summarize_text(second_half, instructions)
        return await self._combine([first, second])

    async def _summarize_text(self, text: str, instructions: str) -> str:
        try:
            return await self._generate(build_text_prompt(text, instructions))
        except ContextWindowExceededError:
            pass

        if len(text) // 2 <= MIN_SPLIT_MIDPOINT_CHARS:
            logger.debug("Text of %d characters still overflows, truncating", len(text))
            return truncate_to_floor(text)

        first_half, second_half = split_text(text)
        first = await self._summarize_text(first_half, instructions)
        second = await self._summarize_text(second_half, instructions)
        return await self._combine([first, second])

    async def _combine(self, summaries: List[str]) -> str:
        """Merge partial summaries, halving the list on overflow.

        A single summary is returned unchanged. When halving a pair leaves
        both summaries as they were, they are joined with blank lines.
        """
        if len(summaries) == 1:
            return summaries[0]

        try:
            return await self._generate(build_combine_prompt(summaries))
        except ContextWindowExceededError:
            logger.debug("Combining %d summaries overflowed, splitting", len(summaries))

        midpoint = len(summaries) // 2
        merged = [
            await self._combine(summaries[:midpoint]),
            await self._combine(summaries[midpoint:]),
        ]
        if merged == summaries:
            return "\n\n".join(summaries)
        return await self._combine(merged)

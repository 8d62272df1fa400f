"""Reducer that replaces older conversation with extracted facts."""

from __future__ import annotations

import logging
from typing import Optional

from ..llm.base import LLMProvider
from ..state.config import StructuredStateConfiguration
from ..state.extractor import LLMStateExtractor
from ..state.models import StructuredState
from ..transcript import Entry, Transcript
from .base import ContextReducer, resolve_component, split_older_and_recent

logger = logging.getLogger(__name__)

STATE_HEADER = "Structured state extracted from previous conversation:"
EMPTY_STATE_TEXT = "(no information extracted)"


def format_structured_state(state: StructuredState) -> str:
    """Render a state as sorted ``"  - key: value"`` lines."""
    if state.is_empty():
        return EMPTY_STATE_TEXT
    return "\n".join(state.format_lines())


class StructuredStateReducer(ContextReducer):
    """Replace older entries with one entry listing extracted facts."""

    def __init__(
        self,
        configuration: Optional[StructuredStateConfiguration] = None,
        llm_provider: Optional[LLMProvider] = None,
    ):
        """Initialize the reducer.

        Args:
            configuration: Strategy configuration; defaults apply when None.
            llm_provider: Provider for the default extractor, which also
                receives ``configuration.extraction_instructions``.

        Raises:
            ReductionConfigurationError: If no extractor is configured and
                no provider is given.
        """
        self.configuration = configuration or StructuredStateConfiguration()
        self.state_extractor = resolve_component(
            self.configuration.state_extractor,
            lambda provider: LLMStateExtractor(
                provider, instructions=self.configuration.extraction_instructions
            ),
            llm_provider,
            "state extractor",
        )

    @property
    def name(self) -> str:
        return "StructuredState"

    async def reduce(self, transcript: Transcript) -> Transcript:
        config = self.configuration
        instructions, conversation = transcript.split()
        new_entries = list(instructions) if config.keep_instructions else []

        older, recent = split_older_and_recent(conversation, config.recent_turns_to_keep)
        if older:
            state = await self.state_extractor.extract_state(older)
            logger.debug("Extracted %d facts from %d entries", len(state.information), len(older))
            new_entries.append(
                Entry.prompt(f"{STATE_HEADER}\n\n{format_structured_state(state)}")
            )

        return Transcript(new_entries + recent)

"""Configuration for the structured state strategy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..constants import DEFAULT_LOCALE
from .base import StateExtractorProtocol


@dataclass
class StructuredStateConfiguration:
    """Configuration for structured state reduction.

    Attributes:
        recent_turns_to_keep: Most recent conversation entries kept verbatim.
        state_extractor: Extractor to use. When None, the reducer builds an
            LLMStateExtractor from the engine's provider.
        extraction_instructions: Extra guidance for the default extractor.
        locale: Locale of the extracted state.
        keep_instructions: Whether instructions entries are preserved.
    """

    recent_turns_to_keep: int = 2
    state_extractor: Optional[StateExtractorProtocol] = None
    extraction_instructions: Optional[str] = None
    locale: str = DEFAULT_LOCALE
    keep_instructions: bool = True

    def __post_init__(self):
        if self.recent_turns_to_keep < 0:
            raise ValueError("recent_turns_to_keep cannot be negative")

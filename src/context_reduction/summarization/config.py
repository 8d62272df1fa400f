"""Configuration objects for summary-based reduction."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from ..constants import DEFAULT_LOCALE

if TYPE_CHECKING:
    from ..topics.base import TopicDetectorProtocol
    from .base import SummarizerProtocol


class SummaryGranularity(str, Enum):
    """Scope at which a hierarchical summary level operates."""

    PER_TURN = "per_turn"  # each conversation turn on its own
    PER_TOPIC = "per_topic"  # entries grouped by detected topic
    GLOBAL = "global"  # all older entries at once

    @property
    def label(self) -> str:
        """Human-readable name used in summary entries."""
        return _GRANULARITY_LABELS[self]


_GRANULARITY_LABELS = {
    SummaryGranularity.PER_TURN: "Per-Turn",
    SummaryGranularity.PER_TOPIC: "Per-Topic",
    SummaryGranularity.GLOBAL: "Global",
}


@dataclass
class RollingSummaryConfiguration:
    """Configuration for the rolling summary strategy.

    Attributes:
        recent_turns_to_keep: Most recent conversation entries kept verbatim.
        summarizer: Summarizer to use. When None, the reducer builds an
            LLMSummarizer from the engine's provider.
        summarization_instructions: Custom summarization instructions.
        locale: Locale of the summary.
        keep_instructions: Whether instructions entries are preserved.
    """

    recent_turns_to_keep: int = 2
    summarizer: Optional[SummarizerProtocol] = None
    summarization_instructions: Optional[str] = None
    locale: str = DEFAULT_LOCALE
    keep_instructions: bool = True

    def __post_init__(self):
        if self.recent_turns_to_keep < 0:
            raise ValueError("recent_turns_to_keep cannot be negative")


@dataclass
class HierarchicalSummaryConfiguration:
    """Configuration for the hierarchical summary strategy.

    Same fields as :class:`RollingSummaryConfiguration`, plus the ordered
    granularity levels and the topic detector used by the per-topic level.
    """

    recent_turns_to_keep: int = 2
    summarizer: Optional[SummarizerProtocol] = None
    summarization_instructions: Optional[str] = None
    locale: str = DEFAULT_LOCALE
    keep_instructions: bool = True
    granularity_levels: List[SummaryGranularity] = field(
        default_factory=lambda: [SummaryGranularity.GLOBAL]
    )
    topic_detector: Optional[TopicDetectorProtocol] = None

    def __post_init__(self):
        if self.recent_turns_to_keep < 0:
            raise ValueError("recent_turns_to_keep cannot be negative")

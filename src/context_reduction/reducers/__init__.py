"""Context reducers.

This module provides the reduction strategies:
- SlidingWindowReducer / HeadTailWindowReducer: keep recent entries
- RollingSummaryReducer / HierarchicalSummaryReducer: summarize older entries
- StructuredStateReducer: replace older entries with extracted facts
- NoOpReducer: leave the transcript unchanged
"""

from .base import (
    ContextReducer,
    ReductionConfigurationError,
    last_entries,
    split_older_and_recent,
)
from .state import StructuredStateReducer, format_structured_state
from .summary import (
    HierarchicalSummaryReducer,
    RollingSummaryReducer,
    group_entries_into_turns,
)
from .window import HeadTailWindowReducer, NoOpReducer, SlidingWindowReducer

__all__ = [
    "ContextReducer",
    "HeadTailWindowReducer",
    "HierarchicalSummaryReducer",
    "NoOpReducer",
    "ReductionConfigurationError",
    "RollingSummaryReducer",
    "SlidingWindowReducer",
    "StructuredStateReducer",
    "format_structured_state",
    "group_entries_into_turns",
    "last_entries",
    "split_older_and_recent",
]

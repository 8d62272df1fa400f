"""Summarization of conversation entries.

This module provides:
- LLMSummarizer: recursive split/merge summarization over an LLM provider
- ExtractiveSummarizer: role-tagged digest without any model call
- CallableSummarizer: adapter for caller-supplied summarization functions
- Rolling and hierarchical summary configurations
"""

from .base import (
    BaseSummarizer,
    CallableSummarizer,
    EmptyInputError,
    ExtractiveSummarizer,
    MissingLocaleInstructionsError,
    SummarizerError,
    SummarizerProtocol,
    validate_summary_request,
)
from .config import (
    HierarchicalSummaryConfiguration,
    RollingSummaryConfiguration,
    SummaryGranularity,
)
from .llm_summarizer import DEFAULT_SUMMARIZATION_INSTRUCTIONS, LLMSummarizer

__all__ = [
    "BaseSummarizer",
    "CallableSummarizer",
    "DEFAULT_SUMMARIZATION_INSTRUCTIONS",
    "EmptyInputError",
    "ExtractiveSummarizer",
    "HierarchicalSummaryConfiguration",
    "LLMSummarizer",
    "MissingLocaleInstructionsError",
    "RollingSummaryConfiguration",
    "SummarizerError",
    "SummarizerProtocol",
    "SummaryGranularity",
    "validate_summary_request",
]

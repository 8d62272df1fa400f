"""Reducer interface and shared helpers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from ..llm.base import LLMProvider
from ..transcript import Entry, Transcript

T = TypeVar("T")


class ReductionConfigurationError(Exception):
    """Raised when a reducer cannot be built from its configuration."""
    pass


class ContextReducer(ABC):
    """Abstract base class for context reducers.

    A reducer turns a transcript into a smaller one. It never reorders
    entries: instructions stay first and conversation entries keep their
    relative order, with any synthesized entry placed where the replaced
    range began.
    """

    @property
    def name(self) -> str:
        """Name of the reducer, used in logs."""
        return type(self).__name__

    @abstractmethod
    async def reduce(self, transcript: Transcript) -> Transcript:
        """Reduce the transcript.

        Args:
            transcript: The transcript to reduce.

        Returns:
            A new, reduced transcript.
        """
        ...


def last_entries(entries: Sequence[Entry], count: int) -> List[Entry]:
    """Return the last ``count`` entries; none when count is 0."""
    return list(entries[max(0, len(entries) - count):])


def split_older_and_recent(
    conversation: Sequence[Entry], recent_count: int
) -> Tuple[List[Entry], List[Entry]]:
    """Split conversation entries into the older part and the recent tail.

    Args:
        conversation: Conversation entries, oldest first.
        recent_count: How many trailing entries are recent.

    Returns:
        ``(older, recent)``; ``older`` is empty when ``recent_count``
        covers the whole conversation.
    """
    boundary = max(0, len(conversation) - recent_count)
    return list(conversation[:boundary]), list(conversation[boundary:])


def resolve_component(
    component: Optional[T],
    factory: Callable[[LLMProvider], T],
    llm_provider: Optional[LLMProvider],
    description: str,
) -> T:
    """Pick a configured component or build the LLM-backed default.

    Raises:
        ReductionConfigurationError: If neither a component nor an LLM
            provider is available.
    """
    if component is not None:
        return component
    if llm_provider is None:
        raise ReductionConfigurationError(
            f"No {description} configured and no LLM provider to build one from"
        )
    return factory(llm_provider)

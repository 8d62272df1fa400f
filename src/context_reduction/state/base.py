"""State extractor interfaces."""

from __future__ import annotations

from typing import Awaitable, Callable, List, Protocol, runtime_checkable

from ..transcript import Entry
from .models import StructuredState

ExtractStateFunction = Callable[[List[Entry]], Awaitable[StructuredState]]


@runtime_checkable
class StateExtractorProtocol(Protocol):
    """Protocol for state extractors."""

    async def extract_state(self, entries: List[Entry]) -> StructuredState:
        """Extract facts, constraints and decisions from entries.

        Returns an empty state for empty input.
        """
        ...


class CallableStateExtractor:
    """State extractor that delegates to a caller-supplied coroutine function."""

    def __init__(self, extract_function: ExtractStateFunction):
        self._extract_function = extract_function

    async def extract_state(self, entries: List[Entry]) -> StructuredState:
        return await self._extract_function(list(entries))

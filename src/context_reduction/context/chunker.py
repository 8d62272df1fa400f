"""Token-bounded chunking of conversation entries.

Splits a list of entries into chunks that stay within a token budget,
seeding each new chunk with a suffix of the previous one so that
neighbouring chunks overlap.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..constants import (
    CONTEXT_WINDOW_LIMIT,
    DEFAULT_MAX_TOKENS_PER_CHUNK,
    DEFAULT_OVERLAP_TOKENS,
)
from ..transcript import Entry
from .tokens import estimate_entry_tokens, estimate_total_tokens


class ConversationChunker:
    """Chunk entries with token limits and overlap.

    Example:
        chunker = ConversationChunker(max_tokens_per_chunk=500, overlap_tokens=100)
        for chunk in chunker.chunk(entries):
            ...
    """

    def __init__(
        self,
        max_tokens_per_chunk: int = DEFAULT_MAX_TOKENS_PER_CHUNK,
        overlap_tokens: int = DEFAULT_OVERLAP_TOKENS,
        context_window_limit: int = CONTEXT_WINDOW_LIMIT,
    ):
        """Initialize the chunker.

        Args:
            max_tokens_per_chunk: Maximum estimated tokens per chunk.
            overlap_tokens: Token budget for entries repeated at the start
                of the next chunk.
            context_window_limit: Limit used by the fit predicates.

        Raises:
            ValueError: If a limit is not positive or overlap is negative.
        """
        if max_tokens_per_chunk <= 0:
            raise ValueError("max_tokens_per_chunk must be positive")
        if overlap_tokens < 0:
            raise ValueError("overlap_tokens cannot be negative")
        if context_window_limit <= 0:
            raise ValueError("context_window_limit must be positive")
        self.max_tokens_per_chunk = max_tokens_per_chunk
        self.overlap_tokens = overlap_tokens
        self.context_window_limit = context_window_limit

    def chunk(self, entries: Sequence[Entry]) -> List[List[Entry]]:
        """Greedily group entries into overlapping, token-bounded chunks.

        A chunk is closed when the next entry would push it over
        ``max_tokens_per_chunk``. The next chunk starts with the longest
        suffix of whole entries from the closed chunk that fits in
        ``overlap_tokens``. An entry larger than the budget still forms
        its own chunk.

        Args:
            entries: The entries to chunk.

        Returns:
            The chunks; empty when ``entries`` is empty.
        """
        if not entries:
            return []

        chunks: List[List[Entry]] = []
        current: List[Entry] = []
        current_tokens = 0

        for entry in entries:
            entry_tokens = estimate_entry_tokens(entry)

            if current and current_tokens + entry_tokens > self.max_tokens_per_chunk:
                chunks.append(current)
                current, current_tokens = self._overlap_from(current, entry_tokens)

            current.append(entry)
            current_tokens += entry_tokens

        if current:
            chunks.append(current)

        return chunks or [list(entries)]

    def _overlap_from(
        self, chunk: List[Entry], next_tokens: int
    ) -> Tuple[List[Entry], int]:
        """Collect the trailing entries of a chunk that fit the overlap budget.

        The walk stops at the first entry that would break the budget.
        Leading overlap entries are then dropped while the overlap plus
        the entry that opens the new chunk would exceed the chunk limit.
        """
        overlap: List[Entry] = []
        overlap_tokens = 0
        for entry in reversed(chunk):
            entry_tokens = estimate_entry_tokens(entry)
            if overlap_tokens + entry_tokens > self.overlap_tokens:
                break
            overlap.insert(0, entry)
            overlap_tokens += entry_tokens

        while overlap and overlap_tokens + next_tokens > self.max_tokens_per_chunk:
            overlap_tokens -= estimate_entry_tokens(overlap.pop(0))
        return overlap, overlap_tokens

    def fits_in_context_window(
        self,
        entries: Sequence[Entry],
        new_entry: Optional[Entry] = None,
    ) -> bool:
        """Check whether entries (plus an optional candidate) fit the window.

        Args:
            entries: The existing transcript entries.
            new_entry: An entry about to be added.

        Returns:
            True if the estimated total is within ``context_window_limit``.
        """
        total = estimate_total_tokens(entries)
        if new_entry is not None:
            total += estimate_entry_tokens(new_entry)
        return total <= self.context_window_limit


def chunk_entries(
    entries: Sequence[Entry],
    max_tokens_per_chunk: int = DEFAULT_MAX_TOKENS_PER_CHUNK,
    overlap_tokens: int = DEFAULT_OVERLAP_TOKENS,
) -> List[List[Entry]]:
    """Chunk entries with the default chunker settings.

    See :meth:`ConversationChunker.chunk`.
    """
    chunker = ConversationChunker(
        max_tokens_per_chunk=max_tokens_per_chunk,
        overlap_tokens=overlap_tokens,
    )
    return chunker.chunk(entries)


def fits_in_context_window(
    entries: Sequence[Entry],
    new_entry: Optional[Entry] = None,
    limit: int = CONTEXT_WINDOW_LIMIT,
) -> bool:
    """Check entries against the context window limit.

    See :meth:`ConversationChunker.fits_in_context_window`.
    """
    return ConversationChunker(context_window_limit=limit).fits_in_context_window(
        entries, new_entry
    )

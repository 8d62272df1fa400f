"""Token estimation and chunking helpers.

Example:
    from context_reduction.context import ConversationChunker, estimate_tokens

    chunker = ConversationChunker()
    if not chunker.fits_in_context_window(transcript.entries, Entry.prompt(text)):
        ...
"""

from .chunker import ConversationChunker, chunk_entries, fits_in_context_window
from .tokens import (
    estimate_entry_tokens,
    estimate_tokens,
    estimate_total_tokens,
)

__all__ = [
    "ConversationChunker",
    "chunk_entries",
    "estimate_entry_tokens",
    "estimate_tokens",
    "estimate_total_tokens",
    "fits_in_context_window",
]

"""Character-based token estimation.

This module deliberately avoids a real tokenizer: every budget decision
in the package uses the same cheap heuristic of about four characters
per token. The estimate is biased towards English and other
Latin-script text and under-counts token-dense scripts.
"""

from __future__ import annotations

from typing import Iterable

from ..constants import CHARS_PER_TOKEN
from ..transcript import Entry, extract_text


def estimate_tokens(text: str) -> int:
    """Estimate the token count of a string.

    Args:
        text: The text to estimate.

    Returns:
        ``max(1, len(text) // 4)``.
    """
    return max(1, len(text) // CHARS_PER_TOKEN)


def estimate_entry_tokens(entry: Entry) -> int:
    """Estimate the token count of one entry.

    Tool entries and other entries without addressable text count as 0.
    """
    text = extract_text(entry)
    if text is None:
        return 0
    return estimate_tokens(text)


def estimate_total_tokens(entries: Iterable[Entry]) -> int:
    """Sum the estimated tokens of a collection of entries."""
    return sum(estimate_entry_tokens(entry) for entry in entries)

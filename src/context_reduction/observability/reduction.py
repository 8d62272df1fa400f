"""Reduction event logging."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from ..transcript import Transcript
from .logging import StructuredLogger, get_logger


class ReductionLogLevel(str, Enum):
    """How much is logged when a reduction occurs."""

    OFF = "off"
    MINIMAL = "minimal"  # one summary line per reduction
    VERBOSE = "verbose"  # same line; detailed diffing is left to callers


def reduction_stats(original: Transcript, reduced: Transcript) -> Dict[str, int]:
    """Entry, character and estimated-token counts before and after."""
    original_chars = original.character_count()
    reduced_chars = reduced.character_count()
    original_tokens = original.estimated_token_count()
    reduced_tokens = reduced.estimated_token_count()
    return {
        "original_entries": len(original),
        "reduced_entries": len(reduced),
        "entries_removed": len(original) - len(reduced),
        "original_characters": original_chars,
        "reduced_characters": reduced_chars,
        "characters_saved": original_chars - reduced_chars,
        "original_tokens": original_tokens,
        "reduced_tokens": reduced_tokens,
        "tokens_saved": original_tokens - reduced_tokens,
    }


def format_reduction_message(reducer: str, stats: Dict[str, Any]) -> str:
    """Build the one-line reduction summary."""
    return (
        f"Context reduction ({reducer}): "
        f"entries {stats['original_entries']} -> {stats['reduced_entries']} "
        f"({stats['entries_removed']} removed), "
        f"characters {stats['original_characters']} -> {stats['reduced_characters']} "
        f"(~{stats['characters_saved']} saved), "
        f"estimated tokens ~{stats['original_tokens']} -> ~{stats['reduced_tokens']} "
        f"(~{stats['tokens_saved']} saved)"
    )


def log_reduction(
    original: Transcript,
    reduced: Transcript,
    reducer: str,
    log_level: ReductionLogLevel,
    logger: Optional[StructuredLogger] = None,
) -> Optional[str]:
    """Log one reduction at the given level.

    Args:
        original: Transcript before the reduction.
        reduced: Transcript after the reduction.
        reducer: Name of the reducer that ran.
        log_level: ``OFF`` emits nothing; ``MINIMAL`` and ``VERBOSE``
            emit the same line.
        logger: Logger to use. Defaults to the package logger.

    Returns:
        The emitted message, or None when nothing was logged.
    """
    if log_level == ReductionLogLevel.OFF:
        return None

    stats = reduction_stats(original, reduced)
    message = format_reduction_message(reducer, stats)
    (logger or get_logger("context_reduction")).info(message, reducer=reducer, **stats)
    return message

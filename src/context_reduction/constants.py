"""Shared limits and defaults for context reduction."""

from __future__ import annotations

# Maximum number of tokens the on-device model accepts in one call.
CONTEXT_WINDOW_LIMIT: int = 4096

# CONTEXT_WINDOW_LIMIT minus a 500 token margin for prompt overhead and response.
SAFE_CONTENT_TOKEN_LIMIT: int = 3600

# Average characters per token used by the estimator.
CHARS_PER_TOKEN: int = 4

# Locale summaries are produced in unless the caller supplies instructions.
DEFAULT_LOCALE: str = "en_US"

# Overflow/reduce cycles before the session forces a single-entry transcript.
MAX_REDUCTION_ATTEMPTS: int = 5

# Chunker defaults (overlap is 20% of the chunk size).
DEFAULT_MAX_TOKENS_PER_CHUNK: int = 1000
DEFAULT_OVERLAP_TOKENS: int = 200

# Text splitting stops once the split midpoint is at or below this many characters.
MIN_SPLIT_MIDPOINT_CHARS: int = 100

# Characters kept (plus an ellipsis) when text cannot be split any further.
TRUNCATION_FLOOR_CHARS: int = 500

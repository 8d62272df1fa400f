"""Summarizer interfaces, errors and non-LLM implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence, runtime_checkable

from ..constants import DEFAULT_LOCALE
from ..transcript import Entry, EntryKind, extract_text

SummarizeFunction = Callable[[List[Entry], Optional[str], str], Awaitable[str]]


class SummarizerError(Exception):
    """Base exception for summarization failures."""
    pass


class EmptyInputError(SummarizerError):
    """Raised when asked to summarize zero entries."""

    def __init__(self, message: str = "Cannot summarize an empty list of entries"):
        super().__init__(message)


class MissingLocaleInstructionsError(SummarizerError):
    """Raised for a non-default locale without explicit instructions."""

    def __init__(self, locale: str):
        super().__init__(
            f"Summarization instructions must be provided for locale {locale!r}"
        )
        self.locale = locale


def validate_summary_request(
    entries: Sequence[Entry],
    instructions: Optional[str],
    locale: str,
) -> None:
    """Check the preconditions shared by built-in summarizers.

    Raises:
        EmptyInputError: If ``entries`` is empty.
        MissingLocaleInstructionsError: If ``locale`` is not the default
            locale and no instructions were given.
    """
    if not entries:
        raise EmptyInputError()
    if locale != DEFAULT_LOCALE and instructions is None:
        raise MissingLocaleInstructionsError(locale)


@runtime_checkable
class SummarizerProtocol(Protocol):
    """Protocol for summarizer implementations."""

    async def summarize(
        self,
        entries: List[Entry],
        instructions: Optional[str] = None,
        locale: str = DEFAULT_LOCALE,
    ) -> str:
        """Summarize entries."""
        ...


class BaseSummarizer(ABC):
    """Abstract base class for summarizers."""

    @abstractmethod
    async def summarize(
        self,
        entries: List[Entry],
        instructions: Optional[str] = None,
        locale: str = DEFAULT_LOCALE,
    ) -> str:
        """Summarize the given entries.

        Args:
            entries: Conversation entries to summarize.
            instructions: Guidance for the summary. Required when
                ``locale`` is not the default locale.
            locale: Locale identifier of the summary, e.g. ``"fr_FR"``.

        Returns:
            Generated summary string.

        Raises:
            EmptyInputError: If entries is empty.
            MissingLocaleInstructionsError: For a non-default locale
                without instructions.
        """
        ...


class CallableSummarizer(BaseSummarizer):
    """Summarizer that delegates to a caller-supplied coroutine function.

    The function receives ``(entries, instructions, locale)`` and its
    result is returned as-is; no validation is applied.

    Example:
        async def my_summary(entries, instructions, locale):
            return await my_client.summarize([e.text for e in entries])

        summarizer = CallableSummarizer(my_summary)
    """

    def __init__(self, summarize_function: SummarizeFunction):
        self._summarize_function = summarize_function

    async def summarize(
        self,
        entries: List[Entry],
        instructions: Optional[str] = None,
        locale: str = DEFAULT_LOCALE,
    ) -> str:
        return await self._summarize_function(list(entries), instructions, locale)


class ExtractiveSummarizer(BaseSummarizer):
    """Summarizer that creates extractive summaries.

    Does not require an LLM - creates summaries by extracting
    key content from entries.
    """

    _ROLE_TAGS = {
        EntryKind.INSTRUCTIONS: "SYSTEM",
        EntryKind.PROMPT: "USER",
        EntryKind.RESPONSE: "ASSISTANT",
    }

    def __init__(
        self,
        max_chars_per_entry: int = 100,
        max_tokens: int = 500,
        include_roles: bool = True,
    ):
        """Initialize extractive summarizer.

        Args:
            max_chars_per_entry: Maximum characters kept per entry.
            max_tokens: Size of the summary (approximated by chars/4).
            include_roles: Whether to include role prefixes.
        """
        self._max_chars = max_chars_per_entry
        self._max_tokens = max_tokens
        self._include_roles = include_roles

    async def summarize(
        self,
        entries: List[Entry],
        instructions: Optional[str] = None,
        locale: str = DEFAULT_LOCALE,
    ) -> str:
        """Create extractive summary of entries.

        ``instructions`` only matter for the locale check; the digest
        itself is not steerable.
        """
        validate_summary_request(entries, instructions, locale)

        max_chars = self._max_tokens * 4
        parts: List[str] = []
        current_chars = 0

        for entry in entries:
            content = extract_text(entry)

            # Skip tool entries and empty text
            if content is None or not content.strip():
                continue

            if len(content) > self._max_chars:
                content = content[: self._max_chars - 3] + "..."

            if self._include_roles:
                part = f"[{self._ROLE_TAGS[entry.kind]}]: {content}"
            else:
                part = content

            if current_chars + len(part) > max_chars:
                remaining = max_chars - current_chars
                if remaining > 20:
                    parts.append(part[:remaining - 3] + "...")
                break

            parts.append(part)
            current_chars += len(part) + 1  # +1 for newline

        if not parts:
            return "[No content to summarize]"

        return "\n".join(parts)

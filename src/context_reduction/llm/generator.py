"""Transcript-bound generators.

A generator owns a transcript and answers prompts against it. The
contextual session never mutates a generator's transcript directly: when
it reduces context it asks for a new generator bound to the reduced
transcript via :meth:`Generator.with_transcript`.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Protocol, runtime_checkable

from ..context.chunker import fits_in_context_window
from ..context.tokens import estimate_entry_tokens, estimate_total_tokens
from ..transcript import Entry, EntryKind, TextSegment, Transcript, extract_text
from .base import (
    ContextWindowExceededError,
    LLMProvider,
    LLMResponse,
    Message,
    MessageRole,
    ToolCall,
)

logger = logging.getLogger(__name__)

_ROLES = {
    EntryKind.INSTRUCTIONS: MessageRole.SYSTEM,
    EntryKind.PROMPT: MessageRole.USER,
    EntryKind.RESPONSE: MessageRole.ASSISTANT,
}


@runtime_checkable
class Generator(Protocol):
    """Something that answers prompts against a transcript."""

    @property
    def transcript(self) -> Transcript:
        """The transcript the generator is currently bound to."""
        ...

    async def respond(self, prompt: str) -> LLMResponse:
        """Answer a prompt and extend the transcript on success.

        Raises:
            ContextWindowExceededError: If transcript plus prompt do not fit.
        """
        ...

    def with_transcript(self, transcript: Transcript) -> "Generator":
        """Return a new generator bound to another transcript."""
        ...


def entry_to_message(entry: Entry) -> Message:
    """Render one transcript entry as a provider message."""
    if entry.kind == EntryKind.TOOL_CALL:
        return Message(
            role=MessageRole.ASSISTANT,
            content="",
            tool_calls=[
                ToolCall(
                    id=entry.call_id or "",
                    name=entry.tool_name or "",
                    arguments=dict(entry.arguments),
                )
            ],
        )
    if entry.kind == EntryKind.TOOL_OUTPUT:
        content = "".join(
            segment.content for segment in entry.segments
            if isinstance(segment, TextSegment)
        )
        return Message(
            role=MessageRole.TOOL,
            content=content,
            name=entry.tool_name,
            tool_call_id=entry.call_id,
        )
    return Message(role=_ROLES[entry.kind], content=extract_text(entry) or "")


def transcript_to_messages(transcript: Transcript) -> List[Message]:
    """Render a transcript as provider messages, in order."""
    return [entry_to_message(entry) for entry in transcript]


class LLMGenerator:
    """Generator backed by an :class:`LLMProvider`.

    Example:
        provider = OllamaProvider(LLMConfig(model="llama3.2"))
        generator = LLMGenerator(provider, Transcript([Entry.instructions("Be brief.")]))
        response = await generator.respond("Hello")
    """

    def __init__(
        self,
        llm_provider: LLMProvider,
        transcript: Optional[Transcript] = None,
        context_window_limit: Optional[int] = None,
        **generate_kwargs: Any,
    ):
        """Initialize the generator.

        Args:
            llm_provider: Backend used for generation.
            transcript: Initial transcript. Empty when omitted.
            context_window_limit: When set, requests whose estimated size
                exceeds this many tokens fail locally with
                ContextWindowExceededError instead of reaching the backend.
            **generate_kwargs: Extra parameters for every generate call.
        """
        self.llm_provider = llm_provider
        self.context_window_limit = context_window_limit
        self._transcript = transcript if transcript is not None else Transcript()
        self._generate_kwargs = generate_kwargs

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    async def respond(self, prompt: str) -> LLMResponse:
        """Send the transcript plus prompt to the provider.

        Args:
            prompt: The user prompt.

        Returns:
            The provider response.

        Raises:
            ContextWindowExceededError: From the local pre-check or the
                provider.
        """
        prompt_entry = Entry.prompt(prompt)

        if self.context_window_limit is not None and not fits_in_context_window(
            self._transcript.entries, prompt_entry, limit=self.context_window_limit
        ):
            estimated = estimate_total_tokens(self._transcript) + estimate_entry_tokens(
                prompt_entry
            )
            raise ContextWindowExceededError(
                f"Estimated {estimated} tokens exceeds the context window "
                f"of {self.context_window_limit} tokens",
                provider="local",
            )

        messages = transcript_to_messages(self._transcript)
        messages.append(Message(role=MessageRole.USER, content=prompt))
        logger.debug("Generating with %d messages", len(messages))

        response = await self.llm_provider.generate(messages, **self._generate_kwargs)

        self._transcript = self._transcript.appending(
            prompt_entry, Entry.response(response.content)
        )
        return response

    def with_transcript(self, transcript: Transcript) -> "LLMGenerator":
        return LLMGenerator(
            self.llm_provider,
            transcript,
            context_window_limit=self.context_window_limit,
            **self._generate_kwargs,
        )

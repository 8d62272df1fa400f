"""Transcript model for conversational sessions.

A transcript is an immutable, ordered log of entries exchanged with a
language model. Reducers never mutate a transcript: they build a new one
from a filtered or partially replaced list of entries.

Example:
    transcript = Transcript([
        Entry.instructions("You are a helpful assistant."),
        Entry.prompt("Hello"),
        Entry.response("Hi! How can I help?"),
    ])
    instructions, conversation = transcript.split()
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union, overload

from .constants import CHARS_PER_TOKEN


class EntryKind(str, Enum):
    """Kinds of transcript entries."""

    INSTRUCTIONS = "instructions"
    PROMPT = "prompt"
    RESPONSE = "response"
    TOOL_CALL = "tool_call"
    TOOL_OUTPUT = "tool_output"


@dataclass(frozen=True)
class TextSegment:
    """A run of plain text inside an entry."""

    content: str


@dataclass(frozen=True)
class StructuredSegment:
    """Opaque non-text content (images, generated structures, ...)."""

    source: str
    content: Any = field(default=None, compare=False, hash=False)


Segment = Union[TextSegment, StructuredSegment]

# Entries whose text segments are addressed by estimation and summarization.
_TEXT_KINDS = frozenset({EntryKind.INSTRUCTIONS, EntryKind.PROMPT, EntryKind.RESPONSE})


def _new_entry_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Entry:
    """One immutable unit of a transcript.

    Attributes:
        kind: What the entry represents.
        segments: Ordered content segments.
        tool_name: Tool involved, for tool call/output entries.
        call_id: Identifier linking a tool output to its call.
        arguments: Tool call arguments.
        id: Unique identifier. Not part of equality.
    """

    kind: EntryKind
    segments: Tuple[Segment, ...] = ()
    tool_name: Optional[str] = None
    call_id: Optional[str] = None
    arguments: Dict[str, Any] = field(default_factory=dict, hash=False)
    id: str = field(default_factory=_new_entry_id, compare=False)

    @classmethod
    def instructions(cls, text: str) -> "Entry":
        """Create a system-level instructions entry."""
        return cls(kind=EntryKind.INSTRUCTIONS, segments=(TextSegment(text),))

    @classmethod
    def prompt(cls, text: str) -> "Entry":
        """Create a user prompt entry."""
        return cls(kind=EntryKind.PROMPT, segments=(TextSegment(text),))

    @classmethod
    def response(cls, text: str) -> "Entry":
        """Create a model response entry."""
        return cls(kind=EntryKind.RESPONSE, segments=(TextSegment(text),))

    @classmethod
    def tool_call(
        cls,
        name: str,
        arguments: Optional[Dict[str, Any]] = None,
        call_id: Optional[str] = None,
    ) -> "Entry":
        """Create a tool call entry."""
        return cls(
            kind=EntryKind.TOOL_CALL,
            tool_name=name,
            call_id=call_id or f"call_{_new_entry_id()[:12]}",
            arguments=dict(arguments or {}),
        )

    @classmethod
    def tool_output(
        cls,
        name: str,
        text: str,
        call_id: Optional[str] = None,
    ) -> "Entry":
        """Create a tool output entry."""
        return cls(
            kind=EntryKind.TOOL_OUTPUT,
            segments=(TextSegment(text),),
            tool_name=name,
            call_id=call_id,
        )

    @property
    def is_instructions(self) -> bool:
        return self.kind == EntryKind.INSTRUCTIONS

    @property
    def text(self) -> Optional[str]:
        """Text content of the entry, see :func:`extract_text`."""
        return extract_text(self)


def extract_text(entry: Entry) -> Optional[str]:
    """Extract the text content of an entry.

    Joins every text segment of an instructions, prompt or response entry.

    Args:
        entry: The entry to read.

    Returns:
        The joined text, or None for tool entries which carry no
        addressable text.
    """
    if entry.kind not in _TEXT_KINDS:
        return None
    return "".join(
        segment.content for segment in entry.segments if isinstance(segment, TextSegment)
    )


class Transcript(Sequence):
    """Immutable ordered sequence of entries.

    Supports indexing, slicing (which returns a new Transcript), length
    and iteration. Order is chronological and semantically meaningful.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[Entry] = ()):
        self._entries: Tuple[Entry, ...] = tuple(entries)

    @overload
    def __getitem__(self, index: int) -> Entry: ...

    @overload
    def __getitem__(self, index: slice) -> "Transcript": ...

    def __getitem__(self, index: Union[int, slice]) -> Union[Entry, "Transcript"]:
        if isinstance(index, slice):
            return Transcript(self._entries[index])
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Transcript):
            return self._entries == other._entries
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        return f"Transcript(entries={len(self._entries)})"

    @property
    def entries(self) -> Tuple[Entry, ...]:
        """The entries as a tuple."""
        return self._entries

    def split(self) -> Tuple[List[Entry], List[Entry]]:
        """Partition into instruction entries and conversation entries.

        Both lists keep the original relative order.
        """
        instructions: List[Entry] = []
        conversation: List[Entry] = []
        for entry in self._entries:
            if entry.is_instructions:
                instructions.append(entry)
            else:
                conversation.append(entry)
        return instructions, conversation

    def appending(self, *entries: Entry) -> "Transcript":
        """Return a new transcript with entries appended."""
        return Transcript(self._entries + entries)

    def character_count(self) -> int:
        """Total characters of text content across all entries."""
        return sum(len(extract_text(entry) or "") for entry in self._entries)

    def estimated_token_count(self) -> int:
        """Estimate tokens from the character count (about 4 per token).

        Biased towards English and other Latin-script text; token-dense
        scripts such as Japanese or Chinese are under-counted.
        """
        return max(1, self.character_count() // CHARS_PER_TOKEN)

    def pretty_printed(self, prefix_count: int = 100) -> str:
        """Render one line per entry with a role tag and a text prefix."""
        roles = {
            EntryKind.INSTRUCTIONS: "[SYSTEM]",
            EntryKind.PROMPT: "[USER]",
            EntryKind.RESPONSE: "[ASSISTANT]",
        }
        lines = []
        for index, entry in enumerate(self._entries):
            role = roles.get(entry.kind, "[OTHER]")
            text = extract_text(entry)
            if text is None:
                text = "..."
            lines.append(f"{index}. {role} {text[:prefix_count]}...")
        return "\n".join(lines)

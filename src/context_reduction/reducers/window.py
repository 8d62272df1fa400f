"""Reducers that keep a window of recent entries."""

from __future__ import annotations

from ..transcript import Transcript
from .base import ContextReducer, last_entries


class SlidingWindowReducer(ContextReducer):
    """Keep only the last ``turns`` conversation entries.

    Example:
        reducer = SlidingWindowReducer(turns=4)
        reduced = await reducer.reduce(transcript)
    """

    def __init__(self, turns: int, keep_instructions: bool = True):
        """Initialize the reducer.

        Args:
            turns: Number of trailing conversation entries to keep.
            keep_instructions: Whether instructions entries are preserved.

        Raises:
            ValueError: If turns is negative.
        """
        if turns < 0:
            raise ValueError("turns cannot be negative")
        self.turns = turns
        self.keep_instructions = keep_instructions

    @property
    def name(self) -> str:
        return f"SlidingWindow({self.turns})"

    async def reduce(self, transcript: Transcript) -> Transcript:
        instructions, conversation = transcript.split()
        kept = instructions if self.keep_instructions else []
        return Transcript(kept + last_entries(conversation, self.turns))


class HeadTailWindowReducer(ContextReducer):
    """Keep every instructions entry plus the last ``tail_turns`` entries."""

    def __init__(self, tail_turns: int = 2):
        if tail_turns < 0:
            raise ValueError("tail_turns cannot be negative")
        self.tail_turns = tail_turns

    @property
    def name(self) -> str:
        return "HeadTailWindow"

    async def reduce(self, transcript: Transcript) -> Transcript:
        instructions, conversation = transcript.split()
        return Transcript(instructions + last_entries(conversation, self.tail_turns))


class NoOpReducer(ContextReducer):
    """Return the transcript unchanged."""

    @property
    def name(self) -> str:
        return "NoOp"

    async def reduce(self, transcript: Transcript) -> Transcript:
        return transcript

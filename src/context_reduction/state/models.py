"""Structured state models."""

from __future__ import annotations

from typing import Any, Iterable, List

from pydantic import BaseModel, Field, field_validator


class ExtractedFact(BaseModel):
    """One key-value piece of information.

    Keys follow a naming convention: bare descriptive keys for facts,
    ``constraint_`` for constraints and ``decision_`` for decisions.
    """

    key: str = Field(
        description=(
            "The key or name of this piece of information "
            "(e.g., 'name', 'date', 'constraint_quiet_table')"
        )
    )
    value: str = Field(description="The value of this piece of information")

    @field_validator("key", "value", mode="before")
    @classmethod
    def _coerce_to_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float, bool)):
            return str(value)
        return value


class StructuredState(BaseModel):
    """Facts extracted from a conversation."""

    information: List[ExtractedFact] = Field(
        default_factory=list,
        description=(
            "Extract all important information as key-value pairs. Use "
            "descriptive keys that indicate the type of information."
        ),
    )

    @classmethod
    def combine(cls, states: Iterable["StructuredState"]) -> "StructuredState":
        """Fold states into one, keeping keys unique.

        Facts are visited in order. A new key is appended. A known key
        with the same value is kept once. A known key with a different
        value becomes ``"<old>; <new>"``.
        """
        combined: List[ExtractedFact] = []
        positions = {}

        for state in states:
            for fact in state.information:
                index = positions.get(fact.key)
                if index is None:
                    positions[fact.key] = len(combined)
                    combined.append(ExtractedFact(key=fact.key, value=fact.value))
                elif combined[index].value != fact.value:
                    combined[index] = ExtractedFact(
                        key=fact.key,
                        value=f"{combined[index].value}; {fact.value}",
                    )

        return cls(information=combined)

    def merge(self, other: "StructuredState") -> "StructuredState":
        """Return a new state combining this one with ``other``."""
        return StructuredState.combine([self, other])

    def sorted_facts(self) -> List[ExtractedFact]:
        """Facts ordered by key."""
        return sorted(self.information, key=lambda fact: fact.key)

    def is_empty(self) -> bool:
        return not self.information

    def format_lines(self) -> List[str]:
        """Render facts sorted by key as ``"  - key: value"`` lines."""
        return [f"  - {fact.key}: {fact.value}" for fact in self.sorted_facts()]

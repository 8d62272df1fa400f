"""Reduction policies.

A policy names a reduction strategy plus its parameters. Policies compare
by kind and numeric parameter only: the attached configuration object is
carried along but ignored by equality and hashing, so swapping
configurations does not look like a policy change.

Example:
    policy = ReductionPolicy.rolling_summary(
        RollingSummaryConfiguration(recent_turns_to_keep=4)
    )
    assert policy == ReductionPolicy.rolling_summary()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .state.config import StructuredStateConfiguration
from .summarization.config import (
    HierarchicalSummaryConfiguration,
    RollingSummaryConfiguration,
)


class PolicyKind(str, Enum):
    """Known reduction strategies."""

    SLIDING_WINDOW = "sliding_window"
    HEAD_TAIL_WINDOW = "head_tail_window"
    ROLLING_SUMMARY = "rolling_summary"
    HIERARCHICAL_SUMMARY = "hierarchical_summary"
    STRUCTURED_STATE = "structured_state"
    SALIENCE_PRUNING = "salience_pruning"
    SEMANTIC_RECALL = "semantic_recall"
    TOPIC_MEMORY = "topic_memory"
    QUERY_REWRITING = "query_rewriting"
    DYNAMIC_INJECTION = "dynamic_injection"
    DH_RAG = "dh_rag"
    REFLECTIVE_MEMORY = "reflective_memory"


IMPLEMENTED_KINDS = frozenset({
    PolicyKind.SLIDING_WINDOW,
    PolicyKind.HEAD_TAIL_WINDOW,
    PolicyKind.ROLLING_SUMMARY,
    PolicyKind.HIERARCHICAL_SUMMARY,
    PolicyKind.STRUCTURED_STATE,
})

_DISPLAY_NAMES = {
    PolicyKind.HEAD_TAIL_WINDOW: "HeadTailWindow",
    PolicyKind.ROLLING_SUMMARY: "RollingSummary",
    PolicyKind.HIERARCHICAL_SUMMARY: "HierarchicalSummary",
    PolicyKind.STRUCTURED_STATE: "StructuredState",
    PolicyKind.SALIENCE_PRUNING: "SaliencePruning",
    PolicyKind.SEMANTIC_RECALL: "SemanticRecall",
    PolicyKind.TOPIC_MEMORY: "TopicMemory",
    PolicyKind.QUERY_REWRITING: "QueryRewriting",
    PolicyKind.DYNAMIC_INJECTION: "DynamicInjection",
    PolicyKind.DH_RAG: "dhRAG",
    PolicyKind.REFLECTIVE_MEMORY: "ReflectiveMemory",
}


@dataclass(frozen=True)
class ReductionPolicy:
    """A reduction strategy and its parameters.

    Attributes:
        kind: The strategy.
        turns: Window size for the window strategies.
        configuration: Strategy configuration; not compared or hashed.
    """

    kind: PolicyKind
    turns: Optional[int] = None
    configuration: Any = field(default=None, compare=False, hash=False)

    def __post_init__(self):
        if self.kind == PolicyKind.HEAD_TAIL_WINDOW and self.turns is None:
            object.__setattr__(self, "turns", 2)
        if self.kind == PolicyKind.SLIDING_WINDOW and self.turns is None:
            raise ValueError("sliding window policies need a number of turns")
        if self.turns is not None and self.turns < 0:
            raise ValueError("turns cannot be negative")

    @classmethod
    def sliding_window(cls, turns: int) -> "ReductionPolicy":
        """Keep only the last ``turns`` conversation entries."""
        return cls(PolicyKind.SLIDING_WINDOW, turns=turns)

    @classmethod
    def head_tail_window(cls, tail_turns: int = 2) -> "ReductionPolicy":
        """Keep all instructions plus the last ``tail_turns`` entries."""
        return cls(PolicyKind.HEAD_TAIL_WINDOW, turns=tail_turns)

    @classmethod
    def rolling_summary(
        cls, configuration: Optional[RollingSummaryConfiguration] = None
    ) -> "ReductionPolicy":
        return cls(PolicyKind.ROLLING_SUMMARY, configuration=configuration)

    @classmethod
    def hierarchical_summary(
        cls, configuration: Optional[HierarchicalSummaryConfiguration] = None
    ) -> "ReductionPolicy":
        return cls(PolicyKind.HIERARCHICAL_SUMMARY, configuration=configuration)

    @classmethod
    def structured_state(
        cls, configuration: Optional[StructuredStateConfiguration] = None
    ) -> "ReductionPolicy":
        return cls(PolicyKind.STRUCTURED_STATE, configuration=configuration)

    @classmethod
    def salience_pruning(cls) -> "ReductionPolicy":
        return cls(PolicyKind.SALIENCE_PRUNING)

    @classmethod
    def semantic_recall(cls) -> "ReductionPolicy":
        return cls(PolicyKind.SEMANTIC_RECALL)

    @classmethod
    def topic_memory(cls) -> "ReductionPolicy":
        return cls(PolicyKind.TOPIC_MEMORY)

    @classmethod
    def query_rewriting(cls) -> "ReductionPolicy":
        return cls(PolicyKind.QUERY_REWRITING)

    @classmethod
    def dynamic_injection(cls) -> "ReductionPolicy":
        return cls(PolicyKind.DYNAMIC_INJECTION)

    @classmethod
    def dh_rag(cls) -> "ReductionPolicy":
        return cls(PolicyKind.DH_RAG)

    @classmethod
    def reflective_memory(cls) -> "ReductionPolicy":
        return cls(PolicyKind.REFLECTIVE_MEMORY)

    @property
    def name(self) -> str:
        """Display name, e.g. ``SlidingWindow(10)`` or ``RollingSummary``."""
        if self.kind == PolicyKind.SLIDING_WINDOW:
            return f"SlidingWindow({self.turns})"
        return _DISPLAY_NAMES[self.kind]

    @property
    def is_implemented(self) -> bool:
        """False for strategies that fall back to the no-op reducer."""
        return self.kind in IMPLEMENTED_KINDS

    def __str__(self) -> str:
        return self.name

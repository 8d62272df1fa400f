"""Policy-driven reduction engine."""

from __future__ import annotations

from typing import Optional

from .llm.base import LLMProvider
from .policy import PolicyKind, ReductionPolicy
from .reducers.base import ContextReducer
from .reducers.state import StructuredStateReducer
from .reducers.summary import HierarchicalSummaryReducer, RollingSummaryReducer
from .reducers.window import HeadTailWindowReducer, NoOpReducer, SlidingWindowReducer
from .transcript import Transcript


def create_reducer(
    policy: ReductionPolicy,
    llm_provider: Optional[LLMProvider] = None,
) -> ContextReducer:
    """Factory function to create the reducer for a policy.

    Args:
        policy: The reduction policy.
        llm_provider: Provider for LLM-backed default components of the
            summary and state strategies.

    Returns:
        The matching reducer; a NoOpReducer for unimplemented strategies.

    Raises:
        ReductionConfigurationError: If a summary or state strategy has
            no component configured and no provider was given.
    """
    if policy.kind == PolicyKind.SLIDING_WINDOW:
        return SlidingWindowReducer(turns=policy.turns)
    if policy.kind == PolicyKind.HEAD_TAIL_WINDOW:
        return HeadTailWindowReducer(tail_turns=policy.turns)
    if policy.kind == PolicyKind.ROLLING_SUMMARY:
        return RollingSummaryReducer(policy.configuration, llm_provider)
    if policy.kind == PolicyKind.HIERARCHICAL_SUMMARY:
        return HierarchicalSummaryReducer(policy.configuration, llm_provider)
    if policy.kind == PolicyKind.STRUCTURED_STATE:
        return StructuredStateReducer(policy.configuration, llm_provider)
    return NoOpReducer()


class ContextReductionEngine:
    """Reduce transcripts according to a policy.

    The engine holds no state between calls: each reduction builds a
    fresh reducer from the policy.

    Example:
        engine = ContextReductionEngine(ReductionPolicy.sliding_window(6))
        reduced = await engine.reduce(transcript)
    """

    def __init__(
        self,
        policy: ReductionPolicy,
        llm_provider: Optional[LLMProvider] = None,
    ):
        self.policy = policy
        self.llm_provider = llm_provider

    async def reduce(self, transcript: Transcript) -> Transcript:
        """Reduce a transcript with the configured policy."""
        reducer = create_reducer(self.policy, self.llm_provider)
        return await reducer.reduce(transcript)

    @property
    def policy_name(self) -> str:
        return self.policy.name

    @property
    def is_policy_implemented(self) -> bool:
        return self.policy.is_implemented

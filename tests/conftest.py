"""Common test fixtures and configuration for context_reduction tests."""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Union

import pytest

from context_reduction.llm.base import (
    BaseLLMProvider,
    ContextWindowExceededError,
    LLMConfig,
    LLMResponse,
    Message,
    RetryConfig,
)
from context_reduction.transcript import Entry, Transcript

ScriptedOutcome = Union[str, LLMResponse, Exception]


# ============================================================================
# Transcript Fixtures
# ============================================================================


@pytest.fixture
def sample_transcript() -> Transcript:
    """Instructions followed by three prompt/response turns."""
    return Transcript([
        Entry.instructions("sys"),
        Entry.prompt("t1"),
        Entry.response("r1"),
        Entry.prompt("t2"),
        Entry.response("r2"),
        Entry.prompt("t3"),
        Entry.response("r3"),
    ])


@pytest.fixture
def long_transcript() -> Transcript:
    """Instructions followed by twenty conversation entries."""
    entries = [Entry.instructions("You are a helpful assistant.")]
    for i in range(10):
        entries.append(Entry.prompt(f"Question {i}"))
        entries.append(Entry.response(f"Answer {i}"))
    return Transcript(entries)


# ============================================================================
# LLM Fixtures
# ============================================================================


@pytest.fixture
def sample_llm_config() -> LLMConfig:
    """Create sample LLM configuration."""
    return LLMConfig(
        model="test-model",
        api_key="test-api-key",
        temperature=0.7,
        max_tokens=1000,
        timeout=30.0,
        retry_config=RetryConfig(max_retries=0, base_delay=0.0, jitter=False),
    )


@pytest.fixture
def sample_llm_response() -> LLMResponse:
    """Create sample LLM response."""
    return LLMResponse(
        content="This is a test response.",
        model="test-model",
        finish_reason="stop",
        usage={"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    )


class MockLLMProvider(BaseLLMProvider):
    """Mock LLM provider for testing.

    Scripted responses are consumed by successful calls only. A call whose
    last message matches ``overflow_when`` raises ContextWindowExceededError
    without consuming a response.
    """

    def __init__(
        self,
        config: LLMConfig,
        responses: Optional[List[ScriptedOutcome]] = None,
        overflow_when: Optional[Callable[[str], bool]] = None,
    ):
        super().__init__(config)
        self.responses = list(responses or [])
        self.overflow_when = overflow_when
        self.call_count = 0
        self.success_count = 0
        self.prompts: List[str] = []
        self.last_messages: Optional[List[Message]] = None
        self.last_kwargs: dict = {}

    async def generate(
        self,
        messages: List[Message],
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a mock response."""
        self.last_messages = messages
        self.last_kwargs = kwargs
        self.call_count += 1
        prompt = messages[-1].content if messages else ""
        self.prompts.append(prompt)

        if self.overflow_when is not None and self.overflow_when(prompt):
            raise ContextWindowExceededError("prompt is too long", provider="mock")

        self.success_count += 1
        if not self.responses:
            return LLMResponse(
                content="Mock response",
                model=self.config.model,
                finish_reason="stop",
            )

        outcome = self.responses[min(self.success_count - 1, len(self.responses) - 1)]
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, LLMResponse):
            return outcome
        return LLMResponse(content=outcome, model=self.config.model, finish_reason="stop")


@pytest.fixture
def mock_llm_provider(sample_llm_config: LLMConfig) -> MockLLMProvider:
    """Create mock LLM provider."""
    return MockLLMProvider(sample_llm_config)


# ============================================================================
# Generator Fixtures
# ============================================================================


class ScriptedGenerator:
    """Generator that replays scripted outcomes.

    The outcome list and call log are shared with every generator derived
    through ``with_transcript``, so a test sees the whole retry sequence.
    """

    def __init__(
        self,
        transcript: Optional[Transcript] = None,
        outcomes: Optional[List[ScriptedOutcome]] = None,
        calls: Optional[List[Transcript]] = None,
    ):
        self._transcript = transcript if transcript is not None else Transcript()
        self.outcomes = outcomes if outcomes is not None else []
        self.calls = calls if calls is not None else []

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    async def respond(self, prompt: str) -> LLMResponse:
        self.calls.append(self._transcript)
        outcome = self.outcomes.pop(0) if self.outcomes else "ok"
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, str):
            outcome = LLMResponse(content=outcome, model="scripted")
        self._transcript = self._transcript.appending(
            Entry.prompt(prompt), Entry.response(outcome.content)
        )
        return outcome

    def with_transcript(self, transcript: Transcript) -> "ScriptedGenerator":
        return ScriptedGenerator(transcript, self.outcomes, self.calls)


def overflow(message: str = "context window exceeded") -> ContextWindowExceededError:
    """Build a fresh overflow error for scripted outcomes."""
    return ContextWindowExceededError(message, provider="scripted")

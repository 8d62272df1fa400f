"""Local fixtures for LLM module tests."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from context_reduction.llm.base import (
    BaseLLMProvider,
    LLMConfig,
    LLMResponse,
    Message,
    RetryConfig,
)


# ============================================================================
# Concrete Implementation for Testing Abstract Base Class
# ============================================================================


class ConcreteLLMProvider(BaseLLMProvider):
    """Concrete implementation of BaseLLMProvider for testing retries."""

    def __init__(
        self,
        config: LLMConfig,
        fail_times: int = 0,
        failure_exception: Optional[Exception] = None,
    ):
        super().__init__(config)
        self.fail_times = fail_times
        self.failure_exception = failure_exception or Exception("Test failure")
        self.call_count = 0

    async def generate(
        self,
        messages: List[Message],
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a response, failing the first ``fail_times`` attempts."""

        async def _attempt() -> LLMResponse:
            self.call_count += 1
            if self.call_count <= self.fail_times:
                raise self.failure_exception
            return LLMResponse(content="Success", model=self.config.model)

        return await self._retry_with_backoff(_attempt)


@pytest.fixture
def fast_retry_config() -> RetryConfig:
    """Retry configuration without delays."""
    return RetryConfig(max_retries=3, base_delay=0.0, max_delay=0.0, jitter=False)


@pytest.fixture
def retrying_llm_config(fast_retry_config: RetryConfig) -> LLMConfig:
    """LLM configuration that retries three times without waiting."""
    return LLMConfig(model="test-model", api_key="test-key", retry_config=fast_retry_config)


# ============================================================================
# Ollama Transport Helpers
# ============================================================================


class RecordingTransport:
    """Build an httpx.MockTransport that records request payloads."""

    def __init__(self, responder: Callable[[Dict[str, Any]], httpx.Response]):
        self.responder = responder
        self.requests: List[Dict[str, Any]] = []
        self.paths: List[str] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.paths.append(request.url.path)
        payload = json.loads(request.content)
        self.requests.append(payload)
        return self.responder(payload)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url="http://ollama.test",
            transport=httpx.MockTransport(self.handle),
        )


def ollama_reply(content: str, model: str = "llama3.2") -> httpx.Response:
    """A successful non-streaming /api/chat reply."""
    return httpx.Response(
        200,
        json={
            "model": model,
            "message": {"role": "assistant", "content": content},
            "done": True,
            "done_reason": "stop",
            "prompt_eval_count": 12,
            "eval_count": 3,
        },
    )

"""Ollama LLM Provider implementation for local models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from ..base import (
    BaseLLMProvider,
    ContextWindowExceededError,
    LLMConfig,
    LLMProviderError,
    LLMResponse,
    Message,
    MessageRole,
)

_OVERFLOW_MARKERS = (
    "context length",
    "context window",
    "exceeds the available context",
    "input length exceeds",
)


def is_context_overflow_message(text: str) -> bool:
    """Check whether an Ollama error body reports an oversized prompt."""
    lowered = text.lower()
    return any(marker in lowered for marker in _OVERFLOW_MARKERS)


class OllamaProvider(BaseLLMProvider):
    """Ollama provider for local LLM models.

    Small local models are the natural target for context reduction: set
    ``extra_params={"options": {"num_ctx": 4096}}`` to pin the window.
    """

    DEFAULT_BASE_URL = "http://localhost:11434"

    def __init__(
        self,
        config: LLMConfig,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize Ollama provider.

        Args:
            config: LLM configuration with model name, base_url, etc.
            client: Preconfigured HTTP client. Built from ``config`` when
                omitted.
        """
        super().__init__(config)
        self._base_url = config.base_url or self.DEFAULT_BASE_URL
        self._client = client or httpx.AsyncClient(
            base_url=self._base_url,
            timeout=config.timeout,
        )

    def _format_messages(self, messages: List[Message]) -> List[Dict[str, Any]]:
        """Format messages for Ollama API."""
        formatted = []
        for msg in messages:
            message_dict: Dict[str, Any] = {
                "role": msg.role.value,
                "content": msg.content,
            }

            if msg.tool_calls and msg.role == MessageRole.ASSISTANT:
                message_dict["tool_calls"] = [
                    {
                        "function": {
                            "name": tc.name,
                            "arguments": tc.arguments,
                        }
                    }
                    for tc in msg.tool_calls
                ]

            formatted.append(message_dict)
        return formatted

    async def generate(
        self,
        messages: List[Message],
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a response using Ollama API.

        Args:
            messages: List of messages in the conversation.
            **kwargs: Additional parameters passed to the API.

        Returns:
            LLMResponse with the generated content.

        Raises:
            ContextWindowExceededError: If Ollama rejects the prompt as
                longer than the model context.
            LLMProviderError: For other HTTP or transport failures.
        """
        async def _make_request() -> LLMResponse:
            request_data: Dict[str, Any] = {
                "model": self.config.model,
                "messages": self._format_messages(messages),
                "stream": False,
                "options": {
                    "temperature": kwargs.get("temperature", self.config.temperature),
                },
            }

            if self.config.max_tokens:
                request_data["options"]["num_predict"] = self.config.max_tokens

            extra = dict(self.config.extra_params)
            request_data["options"].update(extra.pop("options", {}))
            request_data.update(extra)

            try:
                response = await self._client.post(
                    "/api/chat",
                    json=request_data,
                )
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as e:
                if is_context_overflow_message(e.response.text):
                    raise ContextWindowExceededError(
                        e.response.text,
                        provider="ollama",
                        status_code=e.response.status_code,
                    ) from e
                raise LLMProviderError(
                    f"Ollama API error: {e.response.text}",
                    provider="ollama",
                    status_code=e.response.status_code,
                ) from e
            except Exception as e:
                raise LLMProviderError(str(e), provider="ollama") from e

            if "error" in data:
                if is_context_overflow_message(str(data["error"])):
                    raise ContextWindowExceededError(str(data["error"]), provider="ollama")
                raise LLMProviderError(str(data["error"]), provider="ollama")

            message = data.get("message", {})

            return LLMResponse(
                content=message.get("content", ""),
                model=data.get("model", self.config.model),
                finish_reason=data.get("done_reason", "stop"),
                usage={
                    "prompt_tokens": data.get("prompt_eval_count", 0),
                    "completion_tokens": data.get("eval_count", 0),
                    "total_tokens": data.get("prompt_eval_count", 0) + data.get("eval_count", 0),
                },
                raw_response=data,
            )

        return await self._retry_with_backoff(_make_request)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

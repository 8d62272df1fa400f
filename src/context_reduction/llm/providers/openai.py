"""OpenAI LLM Provider implementation."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from openai import AsyncOpenAI
from openai import AuthenticationError as OpenAIAuthError
from openai import RateLimitError as OpenAIRateLimitError

from ..base import (
    AuthenticationError,
    BaseLLMProvider,
    ContextWindowExceededError,
    LLMConfig,
    LLMProviderError,
    LLMResponse,
    Message,
    MessageRole,
    RateLimitError,
)

_CONTEXT_LENGTH_CODE = "context_length_exceeded"


def is_context_length_error(error: Exception) -> bool:
    """Check whether an OpenAI error reports an oversized request."""
    if getattr(error, "code", None) == _CONTEXT_LENGTH_CODE:
        return True
    message = str(error).lower()
    return _CONTEXT_LENGTH_CODE in message or "maximum context length" in message


class OpenAIProvider(BaseLLMProvider):
    """OpenAI API provider for chat completion models.

    Also works with OpenAI-compatible servers through ``base_url``.
    """

    def __init__(self, config: LLMConfig):
        """Initialize OpenAI provider.

        Args:
            config: LLM configuration with model, api_key, etc.
        """
        super().__init__(config)
        self._client = AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
        )

    def _format_messages(self, messages: List[Message]) -> List[Dict[str, Any]]:
        """Format messages for OpenAI API."""
        formatted = []
        for msg in messages:
            message_dict: Dict[str, Any] = {
                "role": msg.role.value,
                "content": msg.content,
            }

            if msg.tool_call_id and msg.role == MessageRole.TOOL:
                message_dict["tool_call_id"] = msg.tool_call_id

            if msg.tool_calls and msg.role == MessageRole.ASSISTANT:
                message_dict["tool_calls"] = [
                    {
                        "id": tc.id,
                        "type": "function",
                        "function": {
                            "name": tc.name,
                            "arguments": json.dumps(tc.arguments),
                        },
                    }
                    for tc in msg.tool_calls
                ]

            formatted.append(message_dict)
        return formatted

    def _handle_error(self, error: Exception) -> None:
        """Convert OpenAI errors to our error types."""
        if is_context_length_error(error):
            raise ContextWindowExceededError(
                str(error),
                provider="openai",
                status_code=400,
            ) from error
        if isinstance(error, OpenAIRateLimitError):
            raise RateLimitError(
                str(error),
                provider="openai",
                status_code=429,
            ) from error
        if isinstance(error, OpenAIAuthError):
            raise AuthenticationError(
                str(error),
                provider="openai",
                status_code=401,
            ) from error
        raise LLMProviderError(str(error), provider="openai") from error

    async def generate(
        self,
        messages: List[Message],
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a response using OpenAI API.

        Args:
            messages: List of messages in the conversation.
            **kwargs: Additional parameters passed to the API.

        Returns:
            LLMResponse with the generated content.

        Raises:
            ContextWindowExceededError: If the conversation is too long
                for the model.
        """
        async def _make_request() -> LLMResponse:
            request_params: Dict[str, Any] = {
                "model": self.config.model,
                "messages": self._format_messages(messages),
            }

            if self.config.max_tokens:
                request_params["max_tokens"] = self.config.max_tokens

            request_params.update(self.config.extra_params)
            request_params.update(kwargs)
            request_params["temperature"] = kwargs.get(
                "temperature", self.config.temperature
            )

            try:
                response = await self._client.chat.completions.create(**request_params)
            except Exception as e:
                self._handle_error(e)

            choice = response.choices[0]
            return LLMResponse(
                content=choice.message.content or "",
                model=response.model,
                finish_reason=choice.finish_reason,
                usage={
                    "prompt_tokens": response.usage.prompt_tokens,
                    "completion_tokens": response.usage.completion_tokens,
                    "total_tokens": response.usage.total_tokens,
                }
                if response.usage
                else None,
                raw_response=response,
            )

        return await self._retry_with_backoff(_make_request)

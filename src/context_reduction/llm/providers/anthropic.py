"""Anthropic LLM Provider implementation."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from anthropic import AsyncAnthropic
from anthropic import AuthenticationError as AnthropicAuthError
from anthropic import RateLimitError as AnthropicRateLimitError

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


def is_prompt_too_long_error(error: Exception) -> bool:
    """Check whether an Anthropic error reports an oversized prompt."""
    message = str(error).lower()
    return "prompt is too long" in message or "context window" in message


class AnthropicProvider(BaseLLMProvider):
    """Anthropic API provider for Claude models."""

    def __init__(self, config: LLMConfig):
        """Initialize Anthropic provider.

        Args:
            config: LLM configuration with model, api_key, etc.
        """
        super().__init__(config)
        self._client = AsyncAnthropic(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
        )

    def _format_messages(
        self, messages: List[Message]
    ) -> Tuple[str, List[Dict[str, Any]]]:
        """Format messages for Anthropic API.

        Anthropic takes system text as a separate parameter; several
        instructions messages are joined with blank lines.

        Returns:
            Tuple of (system_prompt, formatted_messages)
        """
        system_parts: List[str] = []
        formatted = []

        for msg in messages:
            if msg.role == MessageRole.SYSTEM:
                system_parts.append(msg.content)
                continue

            if msg.role == MessageRole.TOOL:
                formatted.append({
                    "role": "user",
                    "content": [
                        {
                            "type": "tool_result",
                            "tool_use_id": msg.tool_call_id,
                            "content": msg.content,
                        }
                    ],
                })
                continue

            message_dict: Dict[str, Any] = {
                "role": "user" if msg.role == MessageRole.USER else "assistant",
            }

            if msg.tool_calls and msg.role == MessageRole.ASSISTANT:
                content = []
                if msg.content:
                    content.append({"type": "text", "text": msg.content})
                for tc in msg.tool_calls:
                    content.append({
                        "type": "tool_use",
                        "id": tc.id,
                        "name": tc.name,
                        "input": tc.arguments,
                    })
                message_dict["content"] = content
            else:
                message_dict["content"] = msg.content

            formatted.append(message_dict)

        return "\n\n".join(system_parts), formatted

    def _handle_error(self, error: Exception) -> None:
        """Convert Anthropic errors to our error types."""
        if is_prompt_too_long_error(error):
            raise ContextWindowExceededError(
                str(error),
                provider="anthropic",
                status_code=400,
            ) from error
        if isinstance(error, AnthropicRateLimitError):
            raise RateLimitError(
                str(error),
                provider="anthropic",
                status_code=429,
            ) from error
        if isinstance(error, AnthropicAuthError):
            raise AuthenticationError(
                str(error),
                provider="anthropic",
                status_code=401,
            ) from error
        raise LLMProviderError(str(error), provider="anthropic") from error

    async def generate(
        self,
        messages: List[Message],
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a response using Anthropic API.

        Args:
            messages: List of messages in the conversation.
            **kwargs: Additional parameters passed to the API.

        Returns:
            LLMResponse with the generated content.

        Raises:
            ContextWindowExceededError: If the prompt is too long.
        """
        async def _make_request() -> LLMResponse:
            system_prompt, formatted_messages = self._format_messages(messages)

            request_params: Dict[str, Any] = {
                "model": self.config.model,
                "messages": formatted_messages,
                "max_tokens": self.config.max_tokens or 4096,
            }

            if system_prompt:
                request_params["system"] = system_prompt

            # Set temperature if not default
            if self.config.temperature != 0.7:
                request_params["temperature"] = self.config.temperature

            request_params.update(self.config.extra_params)
            request_params.update(kwargs)

            try:
                response = await self._client.messages.create(**request_params)
            except Exception as e:
                self._handle_error(e)

            content_parts = [
                block.text for block in response.content if block.type == "text"
            ]

            return LLMResponse(
                content="".join(content_parts),
                model=response.model,
                finish_reason=response.stop_reason,
                usage={
                    "prompt_tokens": response.usage.input_tokens,
                    "completion_tokens": response.usage.output_tokens,
                    "total_tokens": response.usage.input_tokens + response.usage.output_tokens,
                },
                raw_response=response,
            )

        return await self._retry_with_backoff(_make_request)

"""LLM Provider abstraction layer."""

from .base import (
    AuthenticationError,
    BaseLLMProvider,
    ContextWindowExceededError,
    InvalidRequestError,
    LLMConfig,
    LLMProvider,
    LLMProviderError,
    LLMResponse,
    Message,
    MessageRole,
    RateLimitError,
    RetryConfig,
    ToolCall,
)
from .generator import Generator, LLMGenerator, entry_to_message, transcript_to_messages
from .providers import (
    AnthropicProvider,
    OllamaProvider,
    OpenAIProvider,
)

__all__ = [
    # Base types
    "BaseLLMProvider",
    "LLMConfig",
    "LLMProvider",
    "LLMResponse",
    "Message",
    "MessageRole",
    "ToolCall",
    "RetryConfig",
    # Errors
    "AuthenticationError",
    "ContextWindowExceededError",
    "InvalidRequestError",
    "LLMProviderError",
    "RateLimitError",
    # Generators
    "Generator",
    "LLMGenerator",
    "entry_to_message",
    "transcript_to_messages",
    # Providers
    "OpenAIProvider",
    "AnthropicProvider",
    "OllamaProvider",
]

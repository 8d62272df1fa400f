"""LLM Providers package."""

from .openai import OpenAIProvider
from .anthropic import AnthropicProvider
from .ollama import OllamaProvider

__all__ = [
    "OpenAIProvider",
    "AnthropicProvider",
    "OllamaProvider",
]

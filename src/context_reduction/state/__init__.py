"""Structured state extraction."""

from .base import CallableStateExtractor, StateExtractorProtocol
from .config import StructuredStateConfiguration
from .extractor import EXCERPT_KEY, LLMStateExtractor, parse_state_response
from .models import ExtractedFact, StructuredState

__all__ = [
    "CallableStateExtractor",
    "EXCERPT_KEY",
    "ExtractedFact",
    "LLMStateExtractor",
    "StateExtractorProtocol",
    "StructuredState",
    "StructuredStateConfiguration",
    "parse_state_response",
]

"""Topic detection for per-topic summarization."""

from .base import CallableTopicDetector, TopicDetectorProtocol, group_entries_by_indices
from .detector import (
    LLMTopicDetector,
    TopicDetectionResponse,
    TopicDetectionResult,
    parse_topic_response,
    render_indexed_entries,
)

__all__ = [
    "CallableTopicDetector",
    "LLMTopicDetector",
    "TopicDetectionResponse",
    "TopicDetectionResult",
    "TopicDetectorProtocol",
    "group_entries_by_indices",
    "parse_topic_response",
    "render_indexed_entries",
]

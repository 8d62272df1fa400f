"""Context window management for conversational language-model sessions.

Keeps a growing transcript within a model's token budget by dropping,
summarizing or distilling older entries, and recovers automatically when
a request overflows the context window anyway.

Example:
    from context_reduction import (
        ContextualSession, Entry, LLMConfig, LLMGenerator, OllamaProvider,
        ReductionPolicy, Transcript,
    )

    provider = OllamaProvider(LLMConfig(model="llama3.2"))
    generator = LLMGenerator(provider, Transcript([Entry.instructions("Be concise.")]))
    session = ContextualSession(generator, policy=ReductionPolicy.rolling_summary())
    response = await session.respond("Hello!")
"""

from .constants import (
    CHARS_PER_TOKEN,
    CONTEXT_WINDOW_LIMIT,
    DEFAULT_LOCALE,
    MAX_REDUCTION_ATTEMPTS,
    SAFE_CONTENT_TOKEN_LIMIT,
)
from .context import (
    ConversationChunker,
    chunk_entries,
    estimate_entry_tokens,
    estimate_tokens,
    estimate_total_tokens,
    fits_in_context_window,
)
from .engine import ContextReductionEngine, create_reducer
from .llm import (
    AnthropicProvider,
    ContextWindowExceededError,
    Generator,
    LLMConfig,
    LLMGenerator,
    LLMProvider,
    LLMProviderError,
    LLMResponse,
    OllamaProvider,
    OpenAIProvider,
    RetryConfig,
)
from .observability import ReductionLogLevel, configure_logging, get_logger, log_reduction
from .policy import PolicyKind, ReductionPolicy
from .reducers import (
    ContextReducer,
    HeadTailWindowReducer,
    HierarchicalSummaryReducer,
    NoOpReducer,
    ReductionConfigurationError,
    RollingSummaryReducer,
    SlidingWindowReducer,
    StructuredStateReducer,
)
from .session import (
    ContextualSession,
    ReductionEvent,
    ReductionInfo,
    ReductionObserver,
    ReductionTrigger,
    SessionState,
)
from .state import (
    CallableStateExtractor,
    ExtractedFact,
    LLMStateExtractor,
    StateExtractorProtocol,
    StructuredState,
    StructuredStateConfiguration,
)
from .summarization import (
    CallableSummarizer,
    EmptyInputError,
    ExtractiveSummarizer,
    HierarchicalSummaryConfiguration,
    LLMSummarizer,
    MissingLocaleInstructionsError,
    RollingSummaryConfiguration,
    SummarizerError,
    SummarizerProtocol,
    SummaryGranularity,
)
from .topics import CallableTopicDetector, LLMTopicDetector, TopicDetectorProtocol
from .transcript import (
    Entry,
    EntryKind,
    StructuredSegment,
    TextSegment,
    Transcript,
    extract_text,
)

__version__ = "0.1.0"

__all__ = [
    # Constants
    "CHARS_PER_TOKEN",
    "CONTEXT_WINDOW_LIMIT",
    "DEFAULT_LOCALE",
    "MAX_REDUCTION_ATTEMPTS",
    "SAFE_CONTENT_TOKEN_LIMIT",
    # Transcript
    "Entry",
    "EntryKind",
    "StructuredSegment",
    "TextSegment",
    "Transcript",
    "extract_text",
    # Token estimation and chunking
    "ConversationChunker",
    "chunk_entries",
    "estimate_entry_tokens",
    "estimate_tokens",
    "estimate_total_tokens",
    "fits_in_context_window",
    # LLM layer
    "AnthropicProvider",
    "ContextWindowExceededError",
    "Generator",
    "LLMConfig",
    "LLMGenerator",
    "LLMProvider",
    "LLMProviderError",
    "LLMResponse",
    "OllamaProvider",
    "OpenAIProvider",
    "RetryConfig",
    # Summarization
    "CallableSummarizer",
    "EmptyInputError",
    "ExtractiveSummarizer",
    "HierarchicalSummaryConfiguration",
    "LLMSummarizer",
    "MissingLocaleInstructionsError",
    "RollingSummaryConfiguration",
    "SummarizerError",
    "SummarizerProtocol",
    "SummaryGranularity",
    # Topics
    "CallableTopicDetector",
    "LLMTopicDetector",
    "TopicDetectorProtocol",
    # State
    "CallableStateExtractor",
    "ExtractedFact",
    "LLMStateExtractor",
    "StateExtractorProtocol",
    "StructuredState",
    "StructuredStateConfiguration",
    # Reducers
    "ContextReducer",
    "HeadTailWindowReducer",
    "HierarchicalSummaryReducer",
    "NoOpReducer",
    "ReductionConfigurationError",
    "RollingSummaryReducer",
    "SlidingWindowReducer",
    "StructuredStateReducer",
    # Policy and engine
    "ContextReductionEngine",
    "PolicyKind",
    "ReductionPolicy",
    "create_reducer",
    # Session
    "ContextualSession",
    "ReductionEvent",
    "ReductionInfo",
    "ReductionObserver",
    "ReductionTrigger",
    "SessionState",
    # Logging
    "ReductionLogLevel",
    "configure_logging",
    "get_logger",
    "log_reduction",
]

"""Observability for context reduction.

Example:
    from context_reduction.observability import get_logger, LogContext, set_context

    logger = get_logger("my_app")
    set_context(LogContext(session_id="chat-1", correlation_id="req-123"))
    logger.info("Session started", policy="RollingSummary")
"""

from .logging import (
    LogConfig,
    LogContext,
    LogLevel,
    StructuredLogger,
    clear_context,
    clear_global_context,
    configure_logging,
    get_context,
    get_global_context,
    get_logger,
    reset_logging,
    set_context,
    set_global_context,
)
from .reduction import (
    ReductionLogLevel,
    format_reduction_message,
    log_reduction,
    reduction_stats,
)

__all__ = [
    # Logging
    "LogConfig",
    "LogContext",
    "LogLevel",
    "StructuredLogger",
    "clear_context",
    "clear_global_context",
    "configure_logging",
    "get_context",
    "get_global_context",
    "get_logger",
    "reset_logging",
    "set_context",
    "set_global_context",
    # Reduction logging
    "ReductionLogLevel",
    "format_reduction_message",
    "log_reduction",
    "reduction_stats",
]

"""Structured logging with context for context reduction.

This module provides a logging system with:
- Structured logging using structlog
- Context propagation (session and correlation IDs)
- Console or JSON rendering and an optional rotating log file
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from dataclasses import dataclass, field
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Union

import structlog
from structlog.types import Processor


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    def to_int(self) -> int:
        """Convert to logging module integer level."""
        return {
            LogLevel.DEBUG: logging.DEBUG,
            LogLevel.INFO: logging.INFO,
            LogLevel.WARNING: logging.WARNING,
            LogLevel.ERROR: logging.ERROR,
            LogLevel.CRITICAL: logging.CRITICAL,
        }[self]


@dataclass
class LogContext:
    """Context for structured logging.

    Holds contextual data that should be included in all log entries
    within the current execution scope.

    Attributes:
        correlation_id: ID for tracking related requests.
        session_id: ID of the current contextual session.
        policy: Name of the reduction policy in use.
        extra: Additional context data.
    """

    correlation_id: Optional[str] = None
    session_id: Optional[str] = None
    policy: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary for logging."""
        result: Dict[str, Any] = {}
        if self.correlation_id:
            result["correlation_id"] = self.correlation_id
        if self.session_id:
            result["session_id"] = self.session_id
        if self.policy:
            result["policy"] = self.policy
        result.update(self.extra)
        return result

    def with_extra(self, **kwargs: Any) -> "LogContext":
        """Create a new context with additional data."""
        return LogContext(
            correlation_id=self.correlation_id,
            session_id=self.session_id,
            policy=self.policy,
            extra={**self.extra, **kwargs},
        )


_log_context: ContextVar[Optional[LogContext]] = ContextVar(
    "log_context", default=None
)

# Global context that applies to all log entries
_global_context: Dict[str, Any] = {}


def set_context(context: LogContext) -> None:
    """Set the current log context."""
    _log_context.set(context)


def get_context() -> Optional[LogContext]:
    """Get the current log context."""
    return _log_context.get()


def clear_context() -> None:
    """Clear the current log context."""
    _log_context.set(None)


def set_global_context(**kwargs: Any) -> None:
    """Set global context that applies to all log entries."""
    _global_context.update(kwargs)


def clear_global_context() -> None:
    """Clear all global context."""
    _global_context.clear()


def get_global_context() -> Dict[str, Any]:
    """Get the global context."""
    return _global_context.copy()


@dataclass
class LogConfig:
    """Configuration for the logging system.

    Attributes:
        level: Minimum log level.
        json_format: Render JSON lines instead of the console format.
        colors: Use colors in console rendering.
        include_caller: Whether to include caller info.
        stream: Stream the renderer writes to.
        file_path: Optional rotating log file.
        max_bytes: Size at which the log file rotates.
        backup_count: Number of rotated files kept.
    """

    level: LogLevel = LogLevel.INFO
    json_format: bool = False
    colors: bool = True
    include_caller: bool = False
    stream: TextIO = field(default_factory=lambda: sys.stdout)
    file_path: Optional[Union[str, Path]] = None
    max_bytes: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


class StructuredLogger:
    """Structured logger with context support.

    Every call merges the global context and the current
    :class:`LogContext` into the event's fields.
    """

    def __init__(self, name: str, bound: Optional[Any] = None):
        """Initialize the logger.

        Args:
            name: Logger name (usually module name).
            bound: Already-bound structlog logger to wrap.
        """
        self.name = name
        self._logger = bound if bound is not None else structlog.get_logger(name)

    def _get_merged_context(self, **extra: Any) -> Dict[str, Any]:
        """Merge all context sources into a single dict."""
        context: Dict[str, Any] = {}
        context.update(_global_context)

        log_context = get_context()
        if log_context:
            context.update(log_context.to_dict())

        context.update(extra)
        return context

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """Create a new logger with bound context.

        Args:
            **kwargs: Context to bind to the logger.

        Returns:
            New StructuredLogger with bound context.
        """
        return StructuredLogger(self.name, self._logger.bind(**kwargs))

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log a debug message."""
        self._logger.debug(msg, **self._get_merged_context(**kwargs))

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log an info message."""
        self._logger.info(msg, **self._get_merged_context(**kwargs))

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log a warning message."""
        self._logger.warning(msg, **self._get_merged_context(**kwargs))

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log an error message."""
        self._logger.error(msg, **self._get_merged_context(**kwargs))

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log an exception with traceback."""
        self._logger.exception(msg, **self._get_merged_context(**kwargs))

    def log(self, level: LogLevel, msg: str, **kwargs: Any) -> None:
        """Log a message at the specified level."""
        method = getattr(self, level.value)
        method(msg, **kwargs)


_loggers: Dict[str, StructuredLogger] = {}
_installed_handlers: List[logging.Handler] = []
_previous_root_level: Optional[int] = None


def get_logger(name: str = "context_reduction") -> StructuredLogger:
    """Get or create a logger instance.

    Args:
        name: Logger name.

    Returns:
        StructuredLogger instance.
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]


def configure_logging(config: Optional[LogConfig] = None) -> None:
    """Configure structlog and the standard library for this package.

    structlog events are handed to the standard library, so the stream
    handler and the optional rotating file receive both structlog events
    and records from plain ``logging`` loggers. Calling this again
    replaces the handlers installed by the previous call.

    Args:
        config: Logging configuration to apply. Defaults apply when None.
    """
    global _previous_root_level

    config = config or LogConfig()
    _loggers.clear()
    _remove_installed_handlers()

    shared_processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if config.include_caller:
        shared_processors.append(structlog.processors.CallsiteParameterAdder())

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(config.level.to_int()),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    if config.json_format:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=config.colors)

    stream_handler = logging.StreamHandler(config.stream)
    stream_handler.setFormatter(_make_formatter(renderer, shared_processors))
    _install_handler(stream_handler, config)

    if config.file_path is not None:
        _setup_file_handler(config, shared_processors)

    root = logging.getLogger()
    if _previous_root_level is None:
        _previous_root_level = root.level
    root.setLevel(config.level.to_int())


def reset_logging() -> None:
    """Remove the handlers installed by :func:`configure_logging`."""
    global _previous_root_level

    _remove_installed_handlers()
    if _previous_root_level is not None:
        logging.getLogger().setLevel(_previous_root_level)
        _previous_root_level = None
    _loggers.clear()
    structlog.reset_defaults()


def _make_formatter(
    renderer: Processor, shared_processors: List[Processor]
) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        foreign_pre_chain=shared_processors,
    )


def _install_handler(handler: logging.Handler, config: LogConfig) -> None:
    handler.setLevel(config.level.to_int())
    logging.getLogger().addHandler(handler)
    _installed_handlers.append(handler)


def _remove_installed_handlers() -> None:
    root = logging.getLogger()
    for handler in _installed_handlers:
        root.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()


def _setup_file_handler(config: LogConfig, shared_processors: List[Processor]) -> None:
    """Attach a rotating file handler to the root logger."""
    path = Path(config.file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8",
    )

    if config.json_format:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    handler.setFormatter(_make_formatter(renderer, shared_processors))
    _install_handler(handler, config)

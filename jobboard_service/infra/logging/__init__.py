"""Structured logging: queue-based handlers, JSON output and request context."""

from __future__ import annotations

from jobboard_service.infra.logging.config import configure_logging, setup_logging, shutdown
from jobboard_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    remove_from_log_context,
    set_log_context,
)
from jobboard_service.infra.logging.formatters import JSONFormatter
from jobboard_service.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "remove_from_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]

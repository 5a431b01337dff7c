"""Observability - structured logging."""

from .logger import LogContext, configure_logging, get_log_level

__all__ = [
    "configure_logging",
    "get_log_level",
    "LogContext",
]

"""Structured logging configuration.

initplan logs through structlog bound to standard logging. Two extra level
names, VERBOSE (15) and TRACE (5), are registered so applications that
already use them can pass the same level string here.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog

TRACE = 5
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

LOG_LEVELS = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "VERBOSE": VERBOSE,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class LogContext:
    """
    Context manager binding key/value pairs to every log line in a block.

    Usage:
        with LogContext(initializer="app"):
            initializer.init()
    """

    def __init__(self, **kwargs: Any) -> None:
        self.new_context = kwargs
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        self._tokens = structlog.contextvars.bind_contextvars(**self.new_context)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)


def get_log_level(level: str) -> int:
    """
    Get numeric log level from string.

    Args:
        level: Level name (TRACE, DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Numeric log level, INFO for unknown names
    """
    return LOG_LEVELS.get(level.upper(), logging.INFO)


def _handlers(log_file: str | Path | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        file_path = Path(log_file)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(file_path))
    return handlers


def _processors(json_logs: bool) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        # Renders the traceback attached to "Module initialization failed"
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    log_file: str | Path | None = None,
) -> None:
    """
    Route the ``initplan.*`` structlog loggers through the standard logging module.

    What each level shows for a planning or init() run:
    - ERROR: a callback raised; the line names the module and carries the traceback
    - WARNING: a module was registered twice, or registered after init()
    - INFO: one summary line per plan (module count, max depth, tie-break)
      and per completed init()
    - DEBUG: every registration, the full order, each callback as it starts
    - VERBOSE and TRACE: accepted so applications can share one level setting;
      initplan itself emits nothing at these levels

    Output always goes to stderr, so ``initplan plan --json`` keeps a clean stdout.

    Args:
        level: Level name, see LOG_LEVELS; unknown names fall back to INFO
        json_logs: One JSON object per line instead of the console renderer
        log_file: Also append log lines to this file, creating its directory
    """
    log_level = get_log_level(level)

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=_handlers(log_file),
        force=True,
    )
    logging.getLogger().setLevel(log_level)

    structlog.configure(
        processors=_processors(json_logs),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

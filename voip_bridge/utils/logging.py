"""Structured logging setup using structlog."""

import logging
import sys
from contextlib import AbstractContextManager
from typing import Literal, TextIO

import structlog


def setup_logging(
    level: str = "INFO",
    format: Literal["json", "console"] = "json",
    stream: TextIO | None = None,
) -> None:
    """Configure structured logging for the bridge.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        format: Output format - 'json' for devices shipping logs, 'console' for local runs
        stream: Destination stream, stderr by default so stdout stays free for replay output
    """
    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=getattr(logging, level.upper()),
        force=True,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(default=repr),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=stream is None and sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance with the given name.

    Args:
        name: Logger name, typically __name__

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def call_context(call_id: str, **extra: str) -> AbstractContextManager:
    """Bind a call identifier to every log event emitted inside the block."""
    return structlog.contextvars.bound_contextvars(call_id=call_id, **extra)

"""Logging configuration for optail.

Diagnostics go to stderr through structlog on top of the standard library
``logging`` module. stdout is reserved for oplog entries.
"""

import logging
import sys
from typing import Any, Dict, Optional, TextIO

import structlog

from ..config.config_manager import LoggingConfig


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Logger name

    Returns:
        structlog.stdlib.BoundLogger: The logger instance
    """
    return structlog.get_logger(name)


def add_context_to_logger(
    logger: structlog.stdlib.BoundLogger,
    context: Dict[str, Any]
) -> structlog.stdlib.BoundLogger:
    """Add contextual information to a logger.

    The returned logger includes ``context`` with every log message.

    Args:
        logger: The logger to add context to
        context: Dictionary of contextual information

    Returns:
        structlog.stdlib.BoundLogger: The logger with added context
    """
    return logger.bind(**context)


def configure_logging(config: LoggingConfig, stream: Optional[TextIO] = None) -> None:
    """Configure logging based on configuration.

    Args:
        config: Logging configuration
        stream: Where to write log records, stderr by default
    """
    level = getattr(logging, config.level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    if config.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

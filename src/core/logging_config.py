"""Structured logging configuration.

This module initializes structlog with a stable JSON line format.
Log lines go to stderr so command output on stdout stays parseable.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL, SUPPORTED_LOG_LEVELS


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level()),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger(name)


def _resolve_level() -> int:
    """Resolve the minimum log level from the environment.

    Unknown level names fall back to the default level.

    Returns:
        Numeric stdlib log level.
    """
    level_name = os.getenv("PZCACHE_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if level_name not in SUPPORTED_LOG_LEVELS:
        level_name = DEFAULT_LOG_LEVEL
    return int(getattr(logging, level_name))

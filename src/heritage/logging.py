"""Structlog-based logging for Heritage.

Library code logs through structlog with event-style keys; no print()
outside the CLI. Events are rendered as JSON and handed to stdlib logging,
which writes them to stderr so CLI output on stdout stays clean.
"""
from __future__ import annotations

import logging
import sys
from typing import Literal

import structlog

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _level_number(level: str) -> int:
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: LogLevel = "INFO") -> None:
    """Configure structlog and the root stdlib logger.

    Safe to call again (the CLI does, once the environment is loaded); later
    calls only change the level.
    """
    number = _level_number(level)
    logging.basicConfig(format="%(message)s", level=number, stream=sys.stderr)
    logging.getLogger().setLevel(number)
    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(number),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = "heritage"):
    return structlog.get_logger(name)


# Initialize default config
configure_logging()

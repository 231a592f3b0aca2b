"""Structlog-based logging for the name similarity engine.

Library code logs through structlog; no print() outside the CLI. Logs go to
stderr so batch commands can keep stdout for their tables.
"""
from __future__ import annotations

from typing import Literal

import logging
import sys

import structlog

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _stderr_logger(*args) -> structlog.PrintLogger:
    # resolved per logger so a swapped sys.stderr (test runners) is honoured
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: LogLevel = "INFO", json_output: bool = True) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum level emitted
        json_output: JSON lines for batch runs; a readable console format otherwise
    """
    numeric_level = getattr(logging, level)
    logging.basicConfig(format="%(message)s", level=numeric_level)
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = "gps_names"):
    return structlog.get_logger(name)

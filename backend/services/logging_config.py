"""Centralized logging configuration for the diff backend."""

from __future__ import annotations

import logging
import sys

LOGGER_PREFIX = "mdview_diff"


def setup_logging(level: int | str = logging.INFO, format_string: str | None = None) -> None:
    """
    Configure the root logger for the backend process.

    Args:
        level: Logging level, as a number or a name such as "DEBUG"
        format_string: Optional custom format string
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_string,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger(LOGGER_PREFIX).setLevel(level)

    # Access logs are noisy while a file is being watched
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module."""
    return logging.getLogger(f"{LOGGER_PREFIX}.{name}")

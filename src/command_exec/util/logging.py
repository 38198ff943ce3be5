"""Logging utilities for command-exec."""

from __future__ import annotations

import logging
from typing import Final

DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LIBRARY_LOGGER_NAME: Final[str] = "command_exec"
SILENT: Final[int] = logging.CRITICAL + 10
_LEVELS: Final[dict[str, int]] = {
    "SILENT": SILENT,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def configure_logging(level: str = "INFO", fmt: str | None = None) -> None:
    """Configure application logging.

    Args:
        level: Logging level name (e.g., "INFO", "DEBUG", "SILENT").
        fmt: Optional logging format string. Defaults to a structured format.
    """

    logging.basicConfig(
        level=normalize_level(level),
        format=fmt or DEFAULT_LOG_FORMAT,
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module or component."""

    return logging.getLogger(name)


def set_library_level(level: str) -> None:
    """Set the level of the library logger; ``SILENT`` suppresses all output."""

    get_logger(LIBRARY_LOGGER_NAME).setLevel(normalize_level(level))


def normalize_level(level: str) -> int:
    """Translate a level name to its numeric value, defaulting to INFO."""

    return _LEVELS.get(level.strip().upper(), logging.INFO)

"""Utility helpers package."""

from command_exec.util.logging import configure_logging, get_logger, set_library_level
from command_exec.util.observability import EventLogger

__all__ = ["EventLogger", "configure_logging", "get_logger", "set_library_level"]

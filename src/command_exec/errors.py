"""Exception hierarchy for command-exec."""

from __future__ import annotations

from pathlib import Path


class CommandExecError(Exception):
    """Base class for errors raised by command-exec."""


class ConfigurationError(CommandExecError, ValueError):
    """Raised when a configuration file cannot be parsed."""


class CommandResolutionError(CommandExecError):
    """Raised when a command cannot be resolved to a runnable file.

    Attributes:
        path: The path that failed validation.
    """

    def __init__(self, message: str, path: Path | str) -> None:
        super().__init__(message)
        self.path = Path(path)


class CommandNotFound(CommandResolutionError):
    """Raised when the command does not exist."""


class CommandIsNotAFile(CommandResolutionError):
    """Raised when the command path is not a regular file."""


class CommandIsNotExecutable(CommandResolutionError):
    """Raised when the command file lacks execute permission."""


class CommandExecutionFailed(CommandExecError):
    """Raised after a failed run when the on-error policy is ``raise_error``."""


class CommandExecutionThrown(Exception):
    """Raised after a failed run when the on-error policy is ``throw_error``.

    Kept outside the ``CommandExecError`` hierarchy so callers can intercept it
    separately from genuine errors.
    """

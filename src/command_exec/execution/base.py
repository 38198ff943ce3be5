"""Execution strategy base types and interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Execution:
    """Raw outcome of launching a command line.

    Attributes:
        stdout: Captured standard output lines without terminators.
        stderr: Captured standard error lines without terminators.
        pid: Process id of the spawned child.
        exit_code: Exit status of the child; negative when killed by a signal.
    """

    pid: int
    exit_code: int
    stdout: list[str] = field(default_factory=list)
    stderr: list[str] = field(default_factory=list)


class ExecutionStrategy(ABC):
    """Abstract base class for the ways a command line can be launched."""

    @abstractmethod
    def execute(self, command_line: str, working_directory: Path) -> Execution:
        """Run a command line and wait for it to terminate.

        Args:
            command_line: Full command line, interpreted by the system shell.
            working_directory: Directory the child process starts in.

        Returns:
            Execution with the child's pid, exit code and any captured output.
        """


def split_lines(text: str) -> list[str]:
    """Split process output into lines, dropping line terminators."""

    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]

"""Execution strategy that leaves output attached to the caller's terminal."""

from __future__ import annotations

import subprocess
from pathlib import Path

from command_exec.execution.base import Execution, ExecutionStrategy


class ShellStrategy(ExecutionStrategy):
    """Launch through the shell without capturing output.

    Whatever the program prints goes to the inherited streams, so the
    resulting stdout and stderr are always empty.
    """

    def execute(self, command_line: str, working_directory: Path) -> Execution:
        process = subprocess.Popen(command_line, shell=True, cwd=str(working_directory))
        exit_code = process.wait()
        return Execution(pid=process.pid, exit_code=exit_code)

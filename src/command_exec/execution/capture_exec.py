"""Execution strategy that captures stdout and stderr."""

from __future__ import annotations

import subprocess
from pathlib import Path

from command_exec.execution.base import Execution, ExecutionStrategy, split_lines


class CaptureStrategy(ExecutionStrategy):
    """Launch through the shell and collect both output streams."""

    def execute(self, command_line: str, working_directory: Path) -> Execution:
        with subprocess.Popen(
            command_line,
            shell=True,
            cwd=str(working_directory),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        ) as process:
            stdout, stderr = process.communicate()

        return Execution(
            pid=process.pid,
            exit_code=process.returncode,
            stdout=split_lines(stdout),
            stderr=split_lines(stderr),
        )

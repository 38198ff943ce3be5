"""Execution strategies package."""

from __future__ import annotations

from command_exec.config import RunVia, parse_run_via
from command_exec.execution.base import Execution, ExecutionStrategy, split_lines
from command_exec.execution.capture_exec import CaptureStrategy
from command_exec.execution.shell_exec import ShellStrategy


def select_strategy(run_via: RunVia | str) -> ExecutionStrategy:
    """Return the strategy for ``run_via``; unknown values select capture."""

    if not isinstance(run_via, RunVia):
        run_via = parse_run_via(run_via)
    if run_via is RunVia.SHELL:
        return ShellStrategy()
    return CaptureStrategy()


__all__ = [
    "CaptureStrategy",
    "Execution",
    "ExecutionStrategy",
    "ShellStrategy",
    "select_strategy",
    "split_lines",
]

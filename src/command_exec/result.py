"""Process result record shared by the runner and its consumers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from command_exec.config import ErrorSource
from command_exec.util.logging import get_logger

_LOGGER = get_logger("command_exec.result")


class ProcessStatus(str, Enum):
    """Classification of a finished run."""

    SUCCESS = "success"
    FAILED = "failed"


class FailureReason(str, Enum):
    """Detection source that caused a run to fail."""

    NONE = "none"
    RETURN_CODE = "return_code"
    STDOUT = "stdout"
    STDERR = "stderr"
    LOG_FILE = "log_file"

    @classmethod
    def from_source(cls, source: ErrorSource) -> FailureReason:
        """Map a detection source to its failure reason."""

        return cls(source.value)


@dataclass
class ProcessResult:
    """Evidence and classification for one run of a command.

    Attributes:
        stdout: Captured standard output, one entry per line without terminators.
        stderr: Captured standard error, one entry per line without terminators.
        log_file: Log file written by the command, if configured.
        log_file_lines: Log file contents read after the process exited.
        return_code: Exit status of the process.
        pid: Process id of the child.
        start_time: Time immediately before the spawn.
        end_time: Time immediately after the child terminated.
        status: Classification of the run.
        reason_for_failure: Source of the first detected failure.
    """

    stdout: list[str] = field(default_factory=list)
    stderr: list[str] = field(default_factory=list)
    log_file: Path | None = None
    log_file_lines: list[str] = field(default_factory=list)
    return_code: int | None = None
    pid: int | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    status: ProcessStatus = ProcessStatus.SUCCESS
    reason_for_failure: FailureReason = FailureReason.NONE

    @property
    def succeeded(self) -> bool:
        """Return True if the run was classified as successful."""

        return self.status is ProcessStatus.SUCCESS

    @property
    def duration_s(self) -> float | None:
        """Return the run duration in seconds, once both timestamps are set."""

        if self.start_time is None or self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    def read_log_file(self) -> list[str]:
        """Read the log file from disk into ``log_file_lines``.

        A missing or unreadable log file is logged and yields no lines.
        """

        if self.log_file is None:
            self.log_file_lines = []
            return self.log_file_lines
        try:
            text = self.log_file.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            _LOGGER.warning("Unable to read log file %s: %s", self.log_file, exc)
            self.log_file_lines = []
        else:
            self.log_file_lines = text.splitlines()
        return self.log_file_lines


def result_to_dict(result: ProcessResult) -> dict[str, Any]:
    """Serialize a ProcessResult into a JSON-compatible dictionary."""

    return {
        "status": result.status.value,
        "reason_for_failure": result.reason_for_failure.value,
        "return_code": result.return_code,
        "pid": result.pid,
        "start_time": result.start_time.isoformat() if result.start_time else None,
        "end_time": result.end_time.isoformat() if result.end_time else None,
        "duration_s": result.duration_s,
        "stdout": list(result.stdout),
        "stderr": list(result.stderr),
        "log_file": str(result.log_file) if result.log_file else None,
        "log_file_lines": list(result.log_file_lines),
    }

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from command_exec.result import FailureReason, ProcessResult, ProcessStatus, result_to_dict


def test_defaults_describe_an_unfinished_success() -> None:
    result = ProcessResult()

    assert result.stdout == []
    assert result.stderr == []
    assert result.status is ProcessStatus.SUCCESS
    assert result.reason_for_failure is FailureReason.NONE
    assert result.succeeded is True
    assert result.duration_s is None


def test_duration_uses_both_timestamps() -> None:
    start = datetime(2024, 1, 1, tzinfo=UTC)
    result = ProcessResult(start_time=start, end_time=start + timedelta(seconds=2.5))

    assert result.duration_s == 2.5


def test_read_log_file_splits_lines(tmp_path: Path) -> None:
    log_file = tmp_path / "app.log"
    log_file.write_text("first\nsecond\n", encoding="utf-8")
    result = ProcessResult(log_file=log_file)

    assert result.read_log_file() == ["first", "second"]
    assert result.log_file_lines == ["first", "second"]


def test_read_missing_log_file_warns(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="command_exec.result")
    result = ProcessResult(log_file=tmp_path / "missing.log")

    assert result.read_log_file() == []
    assert any("missing.log" in record.message for record in caplog.records)


def test_result_to_dict_is_json_friendly() -> None:
    result = ProcessResult(
        stdout=["out"],
        return_code=1,
        pid=42,
        status=ProcessStatus.FAILED,
        reason_for_failure=FailureReason.RETURN_CODE,
    )

    data = result_to_dict(result)

    assert data["status"] == "failed"
    assert data["reason_for_failure"] == "return_code"
    assert data["stdout"] == ["out"]
    assert data["pid"] == 42
    assert data["start_time"] is None
    assert data["log_file"] is None

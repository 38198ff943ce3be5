from __future__ import annotations

import json
from pathlib import Path

import pytest

from command_exec.app import AppConfigError, build_config, create_command
from command_exec.config import ErrorSource, OnErrorPolicy, RunVia


def test_build_config_applies_overrides(tmp_path: Path) -> None:
    config_path = tmp_path / "command_exec.yaml"
    config_path.write_text(
        json.dumps(
            {
                "options": "-q",
                "error_indicators": {"allowed_words_in_stdout": ["error: none"]},
            }
        ),
        encoding="utf-8",
    )

    config = build_config(
        config_path,
        parameter="file.txt",
        working_directory=tmp_path,
        detect_on=["stdout", "return_code"],
        allowed_return_codes=[0, 1],
        forbidden_words_in_stdout=["error"],
        on_error_do="throw_error",
        run_via="shell",
    )

    assert config.options == "-q"
    assert config.parameter == "file.txt"
    assert config.working_directory == tmp_path.resolve()
    assert config.error_detection_on == frozenset({ErrorSource.STDOUT, ErrorSource.RETURN_CODE})
    assert config.error_indicators.allowed_return_code == (0, 1)
    assert config.error_indicators.forbidden_words_in_stdout == ("error",)
    assert config.error_indicators.allowed_words_in_stdout == ("error: none",)
    assert config.on_error_do is OnErrorPolicy.THROW_ERROR
    assert config.run_via is RunVia.SHELL


def test_build_config_wraps_configuration_errors(tmp_path: Path) -> None:
    config_path = tmp_path / "command_exec.yaml"
    config_path.write_text(json.dumps({"unknown": True}), encoding="utf-8")

    with pytest.raises(AppConfigError):
        build_config(config_path)

    with pytest.raises(AppConfigError):
        build_config(tmp_path / "missing.yaml", detect_on=["stdin"])


def test_create_command_resolves_path(tmp_path: Path) -> None:
    script = tmp_path / "tool"
    script.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    script.chmod(0o755)

    command = create_command(str(script), build_config(tmp_path / "missing.yaml"))

    assert command.path == script


def test_build_config_rejects_missing_working_directory(tmp_path: Path) -> None:
    with pytest.raises(AppConfigError, match="not a directory"):
        build_config(tmp_path / "missing.yaml", working_directory=tmp_path / "gone")

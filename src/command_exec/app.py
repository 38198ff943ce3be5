"""Application wiring for CLI-friendly command runs."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Iterable

from command_exec.command import Command
from command_exec.config import (
    CommandConfig,
    config_to_dict,
    load_config,
    parse_error_sources,
    parse_on_error_policy,
    parse_run_via,
    update_config,
)
from command_exec.errors import ConfigurationError
from command_exec.util.logging import get_logger

CONFIG_FILE_NAME = "command_exec.yaml"

_LOGGER = get_logger("command_exec.app")


class AppConfigError(RuntimeError):
    """Raised when configuration setup fails."""


def initialize_config(workspace: Path) -> Path:
    """Create a default configuration file in the workspace.

    Args:
        workspace: Directory where the config should be written.

    Returns:
        Path to the generated configuration file.

    Raises:
        AppConfigError: If the config file already exists.
    """

    workspace = workspace.resolve()
    config_path = workspace / CONFIG_FILE_NAME
    if config_path.exists():
        raise AppConfigError(
            f"Config file already exists at {config_path}. Remove it or choose another "
            "workspace."
        )
    config_path.write_text(
        json.dumps(config_to_dict(CommandConfig(working_directory=workspace)), indent=2),
        encoding="utf-8",
    )
    _LOGGER.info("Initialized configuration at %s", config_path)
    return config_path


def build_config(
    config_path: Path | None = None,
    *,
    options: str | None = None,
    parameter: str | None = None,
    working_directory: Path | None = None,
    log_file: Path | None = None,
    detect_on: Iterable[str] = (),
    allowed_return_codes: Iterable[int] = (),
    forbidden_words_in_stdout: Iterable[str] = (),
    forbidden_words_in_stderr: Iterable[str] = (),
    forbidden_words_in_log_file: Iterable[str] = (),
    on_error_do: str | None = None,
    run_via: str | None = None,
    log_level: str | None = None,
) -> CommandConfig:
    """Load configuration from disk and apply command-line overrides.

    Empty overrides leave the loaded values untouched.

    Raises:
        AppConfigError: If the configuration file or an override is invalid.
    """

    try:
        config = load_config(config_path)
        sources = list(detect_on)
        config = update_config(
            config,
            options=options,
            parameter=parameter,
            working_directory=working_directory.resolve() if working_directory else None,
            log_file=log_file.resolve() if log_file else None,
            error_detection_on=parse_error_sources(sources) if sources else None,
            on_error_do=parse_on_error_policy(on_error_do) if on_error_do else None,
            run_via=parse_run_via(run_via) if run_via else None,
            log_level=log_level,
        )
    except ConfigurationError as exc:
        raise AppConfigError(str(exc)) from exc

    if not config.working_directory.is_dir():
        raise AppConfigError(f"Working directory {config.working_directory} is not a directory.")

    indicator_overrides = {
        "allowed_return_code": tuple(allowed_return_codes),
        "forbidden_words_in_stdout": tuple(forbidden_words_in_stdout),
        "forbidden_words_in_stderr": tuple(forbidden_words_in_stderr),
        "forbidden_words_in_log_file": tuple(forbidden_words_in_log_file),
    }
    indicator_overrides = {key: value for key, value in indicator_overrides.items() if value}
    if indicator_overrides:
        config = replace(
            config,
            error_indicators=replace(config.error_indicators, **indicator_overrides),
        )
    return config


def create_command(name: str, config: CommandConfig) -> Command:
    """Resolve ``name`` into a runnable Command."""

    _LOGGER.debug("Creating command %s", name)
    return Command(name, config)

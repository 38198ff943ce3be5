"""Configuration models and loaders for command-exec."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from command_exec.errors import ConfigurationError

CONFIG_FILE_NAMES: tuple[str, ...] = ("command_exec.yaml", "command_exec.yml", "pyproject.toml")


class ErrorSource(str, Enum):
    """Evidence sources that can be checked for errors."""

    RETURN_CODE = "return_code"
    STDOUT = "stdout"
    STDERR = "stderr"
    LOG_FILE = "log_file"


class OnErrorPolicy(str, Enum):
    """What a command does once a run is classified as failed."""

    NOTHING = "nothing"
    RAISE_ERROR = "raise_error"
    THROW_ERROR = "throw_error"


class RunVia(str, Enum):
    """Execution strategy used to launch the command."""

    CAPTURE = "open3"
    SHELL = "system"


_RUN_VIA_ALIASES: dict[str, RunVia] = {
    "open3": RunVia.CAPTURE,
    "capture": RunVia.CAPTURE,
    "system": RunVia.SHELL,
    "shell": RunVia.SHELL,
}


@dataclass(frozen=True)
class ErrorIndicators:
    """Allowed and forbidden values per detection source.

    Attributes:
        allowed_return_code: Exit codes that count as success.
        forbidden_return_code: Exit codes that always count as failure.
        allowed_words_in_stderr: Substrings that excuse a forbidden match on the same line.
        forbidden_words_in_stderr: Substrings that mark a stderr line as failed.
        allowed_words_in_stdout: Substrings that excuse a forbidden match on the same line.
        forbidden_words_in_stdout: Substrings that mark a stdout line as failed.
        allowed_words_in_log_file: Substrings that excuse a forbidden match on the same line.
        forbidden_words_in_log_file: Substrings that mark a log file line as failed.
    """

    allowed_return_code: tuple[int, ...] = (0,)
    forbidden_return_code: tuple[int, ...] = ()
    allowed_words_in_stderr: tuple[str, ...] = ()
    forbidden_words_in_stderr: tuple[str, ...] = ()
    allowed_words_in_stdout: tuple[str, ...] = ()
    forbidden_words_in_stdout: tuple[str, ...] = ()
    allowed_words_in_log_file: tuple[str, ...] = ()
    forbidden_words_in_log_file: tuple[str, ...] = ()

    def words_for(self, source: ErrorSource) -> tuple[tuple[str, ...], tuple[str, ...]]:
        """Return ``(forbidden, allowed)`` words for a text source."""

        if source is ErrorSource.STDERR:
            return self.forbidden_words_in_stderr, self.allowed_words_in_stderr
        if source is ErrorSource.STDOUT:
            return self.forbidden_words_in_stdout, self.allowed_words_in_stdout
        if source is ErrorSource.LOG_FILE:
            return self.forbidden_words_in_log_file, self.allowed_words_in_log_file
        raise ValueError(f"{source.value} is not a text source")


@dataclass(frozen=True)
class CommandConfig:
    """Configuration for a single command.

    Attributes:
        options: Options inserted between the executable and its parameter.
        parameter: Trailing parameter string.
        working_directory: Directory the command runs in.
        log_file: Optional log file written by the command.
        search_paths: Directories searched for bare command names. Defaults to $PATH.
        secure_path: Strip ``..`` segments from the command path before resolving.
        error_detection_on: Sources inspected after the run.
        error_indicators: Allowed and forbidden values per source.
        on_error_do: Policy applied to a failed run.
        run_via: Execution strategy.
        log_level: Level for the library logger; None leaves it untouched.
    """

    options: str = ""
    parameter: str = ""
    working_directory: Path = field(default_factory=Path.cwd)
    log_file: Path | None = None
    search_paths: tuple[Path, ...] | None = None
    secure_path: bool = False
    error_detection_on: frozenset[ErrorSource] = frozenset({ErrorSource.RETURN_CODE})
    error_indicators: ErrorIndicators = field(default_factory=lambda: ErrorIndicators())
    on_error_do: OnErrorPolicy = OnErrorPolicy.NOTHING
    run_via: RunVia = RunVia.CAPTURE
    log_level: str | None = None


_INDICATOR_KEYS = frozenset(ErrorIndicators.__dataclass_fields__)
_CONFIG_KEYS = frozenset(CommandConfig.__dataclass_fields__)


def load_config(path: Path | None = None) -> CommandConfig:
    """Load command configuration from disk.

    Args:
        path: Optional path to a configuration file or a directory to search.

    Returns:
        Parsed CommandConfig with defaults applied when no config exists.

    Raises:
        ConfigurationError: If the file is malformed or contains unknown keys.
    """

    config_path = _resolve_config_path(path)
    if config_path is None:
        return CommandConfig()

    if config_path.suffix in {".yaml", ".yml"}:
        raw_data = _load_yaml(config_path)
    elif config_path.suffix == ".toml":
        raw_data = _load_toml(config_path)
    else:
        raise ConfigurationError(f"Unsupported config file type: {config_path}")

    return parse_command_config(raw_data, base_path=config_path.parent)


def parse_command_config(raw_data: dict[str, Any], base_path: Path | None = None) -> CommandConfig:
    """Build a CommandConfig from a mapping, applying defaults field by field.

    Relative ``working_directory`` and ``log_file`` values are resolved against
    ``base_path`` when it is given.
    """

    unknown = set(raw_data) - _CONFIG_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    defaults = CommandConfig()
    working_directory = _optional_path(raw_data.get("working_directory"), base_path)
    search_paths = raw_data.get("search_paths")

    return CommandConfig(
        options=str(raw_data.get("options") or ""),
        parameter=str(raw_data.get("parameter") or ""),
        working_directory=working_directory or defaults.working_directory,
        log_file=_optional_path(raw_data.get("log_file"), base_path),
        search_paths=(
            tuple(Path(item) for item in _as_list(search_paths)) if search_paths else None
        ),
        secure_path=_parse_bool(raw_data.get("secure_path", False), "secure_path"),
        error_detection_on=parse_error_sources(
            raw_data.get("error_detection_on", [ErrorSource.RETURN_CODE.value])
        ),
        error_indicators=_parse_error_indicators(raw_data.get("error_indicators", {})),
        on_error_do=parse_on_error_policy(raw_data.get("on_error_do")),
        run_via=parse_run_via(raw_data.get("run_via")),
        log_level=_optional_str(raw_data.get("log_level")),
    )


def config_to_dict(config: CommandConfig) -> dict[str, Any]:
    """Serialize a CommandConfig into a JSON-compatible dictionary."""

    indicators = config.error_indicators
    return {
        "options": config.options,
        "parameter": config.parameter,
        "working_directory": str(config.working_directory),
        "log_file": str(config.log_file) if config.log_file else None,
        "search_paths": (
            [str(item) for item in config.search_paths] if config.search_paths else None
        ),
        "secure_path": config.secure_path,
        "error_detection_on": sorted(_enum_value(source) for source in config.error_detection_on),
        "error_indicators": {
            name: list(getattr(indicators, name)) for name in sorted(_INDICATOR_KEYS)
        },
        "on_error_do": _enum_value(config.on_error_do),
        "run_via": _enum_value(config.run_via),
        "log_level": config.log_level,
    }


def update_config(config: CommandConfig, **changes: Any) -> CommandConfig:
    """Return a config copy with the non-None ``changes`` applied."""

    applied = {key: value for key, value in changes.items() if value is not None}
    return replace(config, **applied)


def parse_error_sources(raw: Any) -> frozenset[ErrorSource]:
    """Parse a single source name or a list of names."""

    sources: set[ErrorSource] = set()
    for item in _as_list(raw):
        try:
            sources.add(ErrorSource(str(item)))
        except ValueError as exc:
            raise ConfigurationError(f"Unknown error detection source: {item}") from exc
    return frozenset(sources)


def parse_on_error_policy(raw: Any) -> OnErrorPolicy:
    """Parse an on-error policy; unknown values fall back to ``nothing``."""

    try:
        return OnErrorPolicy(str(raw))
    except ValueError:
        return OnErrorPolicy.NOTHING


def parse_run_via(raw: Any) -> RunVia:
    """Parse a runner name; unknown values fall back to the capture strategy."""

    return _RUN_VIA_ALIASES.get(str(raw).strip().lower(), RunVia.CAPTURE)


def _parse_error_indicators(raw: Any) -> ErrorIndicators:
    if not raw:
        return ErrorIndicators()
    if not isinstance(raw, dict):
        raise ConfigurationError("error_indicators must be a mapping.")
    unknown = set(raw) - _INDICATOR_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown error indicators: {', '.join(sorted(unknown))}")

    values: dict[str, tuple[Any, ...]] = {}
    for name, value in raw.items():
        items = _as_list(value)
        if name.endswith("_return_code"):
            try:
                values[name] = tuple(int(item) for item in items)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"{name} must contain integers.") from exc
        else:
            values[name] = tuple(str(item) for item in items)
    return ErrorIndicators(**values)


def _resolve_config_path(path: Path | None) -> Path | None:
    candidate_paths: list[Path] = []
    if path is None:
        candidate_paths.extend(Path(name) for name in CONFIG_FILE_NAMES)
    elif path.is_dir():
        candidate_paths.extend(path / name for name in CONFIG_FILE_NAMES)
    else:
        candidate_paths.append(path)

    for candidate in candidate_paths:
        if candidate.exists():
            return candidate
    return None


def _load_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        try:
            data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Invalid TOML in {path}: {exc}") from exc
    if path.name == "pyproject.toml":
        tool_config = data.get("tool", {}).get("command_exec", {})
        if not isinstance(tool_config, dict):
            raise ConfigurationError("tool.command_exec must be a mapping.")
        return tool_config
    return data


def _load_yaml(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None
    if data is not None:
        if not isinstance(data, dict):
            raise ConfigurationError("YAML configuration must be a mapping.")
        return data

    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigurationError("YAML configuration must be a mapping.")
    return parsed


_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0", ""})


def _parse_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}.")


def _enum_value(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_path(value: Any, base_path: Path | None) -> Path | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    candidate = Path(text).expanduser()
    if base_path is not None and not candidate.is_absolute():
        candidate = (base_path / candidate).resolve()
    return candidate

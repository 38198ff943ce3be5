"""Run a configured command and classify its outcome."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from pathlib import Path

from command_exec.config import (
    CommandConfig,
    ErrorSource,
    OnErrorPolicy,
    config_to_dict,
    parse_error_sources,
    parse_on_error_policy,
)
from command_exec.detector import DetectionMode, ErrorDetector
from command_exec.errors import (
    CommandExecutionFailed,
    CommandExecutionThrown,
    CommandResolutionError,
)
from command_exec.execution import select_strategy
from command_exec.resolver import resolve_executable
from command_exec.result import FailureReason, ProcessResult, ProcessStatus
from command_exec.util.logging import get_logger, set_library_level
from command_exec.util.observability import EventLogger

FAILURE_MESSAGE = (
    "An error occurred. Check command.result for the reason via reason_for_failure "
    "and the evidence in stdout, stderr, log_file_lines and return_code."
)

_TEXT_SOURCES: tuple[ErrorSource, ...] = (
    ErrorSource.STDERR,
    ErrorSource.STDOUT,
    ErrorSource.LOG_FILE,
)


@dataclass(frozen=True)
class RunSucceeded:
    """Outcome of a run classified as successful."""

    result: ProcessResult


@dataclass(frozen=True)
class RunFailed:
    """Outcome of a run classified as failed.

    Attributes:
        result: The populated process result.
        reason: Source of the first detected failure.
    """

    result: ProcessResult
    reason: FailureReason


RunOutcome = RunSucceeded | RunFailed


class Command:
    """An executable plus the rules used to judge its runs.

    The executable is resolved and validated when the command is created;
    resolution errors are raised immediately and are not subject to the
    on-error policy.
    """

    def __init__(
        self,
        name: str | Path,
        config: CommandConfig | None = None,
        *,
        logger: logging.Logger | None = None,
        event_logger: EventLogger | None = None,
    ) -> None:
        """Initialize the command.

        Args:
            name: Command name or path to the executable.
            config: Command configuration. Defaults to ``CommandConfig()``.
            logger: Optional logger used instead of the library logger.
            event_logger: Optional structured event logger.

        Raises:
            CommandNotFound: If the command cannot be found.
            CommandIsNotAFile: If the command path is not a regular file.
            CommandIsNotExecutable: If the command file is not executable.
        """

        self._config = _normalize_config(config or CommandConfig())
        self._logger = logger or get_logger("command_exec.command")
        if logger is None and self._config.log_level:
            set_library_level(self._config.log_level)
        self._events = event_logger or EventLogger("command_exec.events")
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug("Command configuration: %s", config_to_dict(self._config))

        try:
            self._path = resolve_executable(
                name,
                self._config.search_paths,
                secure=self._config.secure_path,
            )
        except CommandResolutionError as exc:
            self._logger.error("%s", exc)
            raise

        self._result: ProcessResult | None = None

    @property
    def path(self) -> Path:
        """Absolute path of the resolved executable."""

        return self._path

    @property
    def config(self) -> CommandConfig:
        return self._config

    @property
    def options(self) -> str:
        return self._config.options

    @property
    def parameter(self) -> str:
        return self._config.parameter

    @property
    def log_file(self) -> Path | None:
        return self._config.log_file

    @property
    def working_directory(self) -> Path:
        return self._config.working_directory

    @property
    def result(self) -> ProcessResult | None:
        """Result of the most recent run, or None before the first run."""

        return self._result

    def to_string(self) -> str:
        """Return the command line as ``path [options] [parameter]``."""

        segments = [str(self._path)]
        if self.options.strip():
            segments.append(self.options)
        if self.parameter.strip():
            segments.append(self.parameter)
        return " ".join(segments)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Command({self.to_string()!r})"

    def run(self) -> ProcessResult:
        """Run the command, classify the run and apply the on-error policy.

        Returns:
            The populated ProcessResult, also available as ``command.result``.

        Raises:
            CommandExecutionFailed: If the run failed and the policy is ``raise_error``.
            CommandExecutionThrown: If the run failed and the policy is ``throw_error``.
        """

        result = self._run_and_classify()
        if not result.succeeded:
            self._apply_error_policy()
        return result

    def run_outcome(self) -> RunOutcome:
        """Run the command and return a tagged outcome without applying the policy."""

        result = self._run_and_classify()
        if result.succeeded:
            return RunSucceeded(result=result)
        return RunFailed(result=result, reason=result.reason_for_failure)

    @classmethod
    def execute(
        cls,
        name: str | Path,
        config: CommandConfig | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> Command:
        """Create a command, run it and return the command."""

        command = cls(name, config, logger=logger)
        command.run()
        return command

    def _run_and_classify(self) -> ProcessResult:
        result = ProcessResult(log_file=self.log_file)
        command_line = self.to_string()
        strategy = select_strategy(self._config.run_via)
        self._logger.debug(
            "Running '%s' in %s via %s",
            command_line,
            self.working_directory,
            strategy.__class__.__name__,
        )

        result.start_time = datetime.now(UTC)
        execution = strategy.execute(command_line, self.working_directory)
        result.end_time = datetime.now(UTC)

        result.stdout = list(execution.stdout)
        result.stderr = list(execution.stderr)
        result.pid = execution.pid
        result.return_code = execution.exit_code
        if self.log_file is not None:
            result.read_log_file()

        detector = self._detect_errors(result)
        failure = detector.failed_sample
        if failure is not None:
            result.status = ProcessStatus.FAILED
            result.reason_for_failure = FailureReason.from_source(failure.tag)
            self._logger.debug("Error detection on %s found an error", failure.tag.value)
        else:
            result.status = ProcessStatus.SUCCESS
            result.reason_for_failure = FailureReason.NONE

        self._result = result
        self._logger.debug("Result of command run: %s", result.status.value)
        self._events.log(
            "command.completed",
            {
                "command": command_line,
                "status": result.status.value,
                "reason_for_failure": result.reason_for_failure.value,
                "return_code": result.return_code,
                "pid": result.pid,
                "duration_s": result.duration_s,
            },
            level="DEBUG",
        )
        return result

    def _detect_errors(self, result: ProcessResult) -> ErrorDetector:
        detector = ErrorDetector()
        sources = self._config.error_detection_on
        indicators = self._config.error_indicators

        if ErrorSource.RETURN_CODE in sources:
            detector.check_for(
                result.return_code,
                DetectionMode.NOT_CONTAINS,
                indicators.allowed_return_code,
                tag=ErrorSource.RETURN_CODE,
            )
            if indicators.forbidden_return_code:
                detector.check_for(
                    result.return_code,
                    DetectionMode.CONTAINS_ANY,
                    indicators.forbidden_return_code,
                    tag=ErrorSource.RETURN_CODE,
                )

        samples = {
            ErrorSource.STDERR: result.stderr,
            ErrorSource.STDOUT: result.stdout,
            ErrorSource.LOG_FILE: result.log_file_lines,
        }
        for source in _TEXT_SOURCES:
            if source not in sources:
                continue
            forbidden, allowed = indicators.words_for(source)
            detector.check_for(
                samples[source],
                DetectionMode.CONTAINS_ANY_AS_SUBSTRING,
                forbidden,
                exceptions=allowed,
                tag=source,
            )
        return detector

    def _apply_error_policy(self) -> None:
        policy = self._config.on_error_do
        if not isinstance(policy, OnErrorPolicy):
            policy = parse_on_error_policy(policy)

        if policy is OnErrorPolicy.RAISE_ERROR:
            raise CommandExecutionFailed(FAILURE_MESSAGE)
        if policy is OnErrorPolicy.THROW_ERROR:
            raise CommandExecutionThrown(FAILURE_MESSAGE)


def _normalize_config(config: CommandConfig) -> CommandConfig:
    sources = config.error_detection_on
    if all(isinstance(source, ErrorSource) for source in sources):
        return config
    return replace(config, error_detection_on=parse_error_sources(sources))

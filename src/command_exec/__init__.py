"""Run external programs and classify their outcome with configurable rules."""

from command_exec.command import Command, RunFailed, RunOutcome, RunSucceeded
from command_exec.config import (
    CommandConfig,
    ErrorIndicators,
    ErrorSource,
    OnErrorPolicy,
    RunVia,
    load_config,
)
from command_exec.detector import DetectionMode, ErrorDetector, FailedSample
from command_exec.errors import (
    CommandExecError,
    CommandExecutionFailed,
    CommandExecutionThrown,
    CommandIsNotAFile,
    CommandIsNotExecutable,
    CommandNotFound,
    CommandResolutionError,
    ConfigurationError,
)
from command_exec.result import FailureReason, ProcessResult, ProcessStatus

__all__ = [
    "Command",
    "CommandConfig",
    "CommandExecError",
    "CommandExecutionFailed",
    "CommandExecutionThrown",
    "CommandIsNotAFile",
    "CommandIsNotExecutable",
    "CommandNotFound",
    "CommandResolutionError",
    "ConfigurationError",
    "DetectionMode",
    "ErrorDetector",
    "ErrorIndicators",
    "ErrorSource",
    "FailedSample",
    "FailureReason",
    "OnErrorPolicy",
    "ProcessResult",
    "ProcessStatus",
    "RunFailed",
    "RunOutcome",
    "RunSucceeded",
    "RunVia",
    "load_config",
]

"""Rule-based error detection over captured run evidence."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from command_exec.config import ErrorSource


class DetectionMode(str, Enum):
    """Predicate used to compare a sample against indicator values."""

    NOT_CONTAINS = "not_contains"
    CONTAINS_ANY = "contains_any"
    CONTAINS_ANY_AS_SUBSTRING = "contains_any_as_substring"


@dataclass(frozen=True)
class FailedSample:
    """A sample that failed a detection check.

    Attributes:
        tag: Source the sample was drawn from.
        sample: The value or lines that were checked.
        mode: Predicate that reported the failure.
        matches: Offending values; for substring checks, the failing lines.
    """

    tag: ErrorSource
    sample: Any
    mode: DetectionMode
    matches: tuple[Any, ...] = ()


@dataclass
class ErrorDetector:
    """Accumulates failures from a sequence of checks.

    The first recorded failure is kept as ``failed_sample`` for the lifetime of
    the detector; later failures are only appended to ``failed_samples``.
    """

    failed_samples: list[FailedSample] = field(default_factory=list)

    @property
    def found_error(self) -> bool:
        """Return True if any check recorded a failure."""

        return bool(self.failed_samples)

    @property
    def failed_sample(self) -> FailedSample | None:
        """Return the first recorded failure, if any."""

        return self.failed_samples[0] if self.failed_samples else None

    def check_for(
        self,
        sample: Any,
        mode: DetectionMode,
        comparison_values: Iterable[Any],
        *,
        tag: ErrorSource,
        exceptions: Iterable[str] = (),
    ) -> bool:
        """Check a sample and record a failure if the predicate does not hold.

        Args:
            sample: A single value, or a sequence of lines for substring checks.
            mode: Predicate to evaluate.
            comparison_values: Allowed or forbidden values, depending on ``mode``.
            tag: Source attached to any failure produced by this call.
            exceptions: Substrings that excuse a forbidden match on the same line.

        Returns:
            True if this call recorded a failure.
        """

        values = tuple(comparison_values)
        if mode is DetectionMode.NOT_CONTAINS:
            matches: tuple[Any, ...] = () if sample in values else (sample,)
        elif mode is DetectionMode.CONTAINS_ANY:
            matches = (sample,) if sample in values else ()
        elif mode is DetectionMode.CONTAINS_ANY_AS_SUBSTRING:
            matches = tuple(_offending_lines(sample, values, tuple(exceptions)))
        else:
            raise ValueError(f"Unsupported detection mode: {mode!r}")

        if not matches:
            return False
        self.failed_samples.append(FailedSample(tag=tag, sample=sample, mode=mode, matches=matches))
        return True


def _offending_lines(
    lines: Sequence[str], forbidden: tuple[str, ...], exceptions: tuple[str, ...]
) -> Iterable[str]:
    for line in lines:
        if not any(word in line for word in forbidden):
            continue
        if any(word in line for word in exceptions):
            continue
        yield line

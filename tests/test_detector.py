from __future__ import annotations

import pytest

from command_exec.config import ErrorSource
from command_exec.detector import DetectionMode, ErrorDetector


def test_not_contains_fails_when_value_is_missing() -> None:
    detector = ErrorDetector()

    failed = detector.check_for(1, DetectionMode.NOT_CONTAINS, [0], tag=ErrorSource.RETURN_CODE)

    assert failed is True
    assert detector.found_error is True
    assert detector.failed_sample is not None
    assert detector.failed_sample.tag is ErrorSource.RETURN_CODE
    assert detector.failed_sample.matches == (1,)


def test_not_contains_passes_for_allowed_value() -> None:
    detector = ErrorDetector()

    failed = detector.check_for(2, DetectionMode.NOT_CONTAINS, [0, 2], tag=ErrorSource.RETURN_CODE)

    assert failed is False
    assert detector.found_error is False
    assert detector.failed_sample is None


def test_contains_any_fails_for_forbidden_value() -> None:
    detector = ErrorDetector()

    detector.check_for(3, DetectionMode.CONTAINS_ANY, [3, 4], tag=ErrorSource.RETURN_CODE)
    assert detector.found_error is True

    clean = ErrorDetector()
    clean.check_for(0, DetectionMode.CONTAINS_ANY, [3, 4], tag=ErrorSource.RETURN_CODE)
    assert clean.found_error is False


def test_substring_check_reports_offending_lines() -> None:
    detector = ErrorDetector()
    lines = ["all good", "an error occurred", "fatal: error again"]

    detector.check_for(
        lines,
        DetectionMode.CONTAINS_ANY_AS_SUBSTRING,
        ["error"],
        tag=ErrorSource.STDOUT,
    )

    assert detector.failed_sample is not None
    assert detector.failed_sample.matches == ("an error occurred", "fatal: error again")


def test_exception_only_excuses_its_own_line() -> None:
    excused = ErrorDetector()
    excused.check_for(
        ["error. execution failed"],
        DetectionMode.CONTAINS_ANY_AS_SUBSTRING,
        ["error"],
        exceptions=["execution failed"],
        tag=ErrorSource.STDERR,
    )
    assert excused.found_error is False

    mixed = ErrorDetector()
    mixed.check_for(
        ["error. execution failed", "plain error"],
        DetectionMode.CONTAINS_ANY_AS_SUBSTRING,
        ["error"],
        exceptions=["execution failed"],
        tag=ErrorSource.STDERR,
    )
    assert mixed.failed_sample is not None
    assert mixed.failed_sample.matches == ("plain error",)


def test_substring_check_without_forbidden_words_never_fails() -> None:
    detector = ErrorDetector()

    detector.check_for(
        ["error everywhere"],
        DetectionMode.CONTAINS_ANY_AS_SUBSTRING,
        [],
        tag=ErrorSource.LOG_FILE,
    )

    assert detector.found_error is False


def test_first_failure_is_kept() -> None:
    detector = ErrorDetector()

    detector.check_for(1, DetectionMode.NOT_CONTAINS, [0], tag=ErrorSource.RETURN_CODE)
    detector.check_for(
        ["error"],
        DetectionMode.CONTAINS_ANY_AS_SUBSTRING,
        ["error"],
        tag=ErrorSource.STDOUT,
    )

    assert len(detector.failed_samples) == 2
    assert detector.failed_sample is not None
    assert detector.failed_sample.tag is ErrorSource.RETURN_CODE


def test_unknown_mode_is_rejected() -> None:
    detector = ErrorDetector()

    with pytest.raises(ValueError):
        detector.check_for(0, "bogus", [0], tag=ErrorSource.RETURN_CODE)  # type: ignore[arg-type]


def test_allow_list_failure_precedes_deny_list_failure() -> None:
    detector = ErrorDetector()

    detector.check_for(3, DetectionMode.NOT_CONTAINS, [0], tag=ErrorSource.RETURN_CODE)
    detector.check_for(3, DetectionMode.CONTAINS_ANY, [3], tag=ErrorSource.RETURN_CODE)

    assert [sample.mode for sample in detector.failed_samples] == [
        DetectionMode.NOT_CONTAINS,
        DetectionMode.CONTAINS_ANY,
    ]
    assert detector.failed_sample is not None
    assert detector.failed_sample.mode is DetectionMode.NOT_CONTAINS

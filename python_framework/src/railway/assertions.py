"""
pytest-friendly assertions over Result values.

Each helper returns the unwrapped side so a test can keep asserting on it:

    from railway import ErrorCode, ResultAssertions

    def test_missing_anchor():
        result = parser.parse("<html></html>")
        ResultAssertions.assert_failure(result, ErrorCode.STRUCTURAL_PARSE_ERROR)
        ResultAssertions.assert_failure_message_contains(result, "not found")
"""

from __future__ import annotations

from typing import Any, TypeVar

from railway.failure import ErrorCode, FailureDescription
from railway.result import Result

T = TypeVar("T")


def _show(result: Result[Any]) -> str:
    if result.is_success():
        return f"Success({result.value()!r})"
    error = result.error()
    return f"Failure({error.code.value}: {error.message!r})"


def _suffix(message: str) -> str:
    return f" — {message}" if message else ""


class ResultAssertions:
    """Assertion helpers that print both tracks readably when they fail."""

    @staticmethod
    def assert_success(result: Result[T], message: str = "") -> T:
        """Fail unless `result` is a Success; return its value."""
        assert result.is_success(), f"Expected Success but got {_show(result)}{_suffix(message)}"
        return result.value()

    @staticmethod
    def assert_failure(
        result: Result[Any],
        expected_code: ErrorCode | None = None,
        message: str = "",
    ) -> FailureDescription:
        """Fail unless `result` is a Failure (with `expected_code`, when given); return the error."""
        assert result.is_failure(), f"Expected Failure but got {_show(result)}{_suffix(message)}"
        error = result.error()
        assert expected_code is None or error.code is expected_code, (
            f"Expected error code {expected_code.value if expected_code else None}"
            f" but got {_show(result)}{_suffix(message)}"
        )
        return error

    @staticmethod
    def assert_failure_message_contains(result: Result[Any], substring: str) -> None:
        """Case-insensitive substring check on the failure message."""
        error = ResultAssertions.assert_failure(result)
        assert substring.casefold() in error.message.casefold(), (
            f"Expected failure message to contain {substring!r}, got {error.message!r}"
        )

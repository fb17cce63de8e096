"""
Railway-Oriented Programming (ROP) framework.

Explicit, composable error handling — no exceptions in business logic.

    from railway import Result, ErrorCode

    def require_rows(rows: list[str]) -> Result[list[str]]:
        if not rows:
            return Result.failure(ErrorCode.STRUCTURAL_PARSE_ERROR, "no table rows")
        return Result.success(rows)
"""

from railway.result import Result, Success, Failure
from railway.failure import ErrorCode, FailureDescription
from railway.execution import (
    ExecutionContext,
    NoOpExecutionContext,
    LoggingExecutionContext,
)
from railway.assertions import ResultAssertions

__all__ = [
    "Result",
    "Success",
    "Failure",
    "ErrorCode",
    "FailureDescription",
    "ExecutionContext",
    "NoOpExecutionContext",
    "LoggingExecutionContext",
    "ResultAssertions",
]

__version__ = "1.0.0"

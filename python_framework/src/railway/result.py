"""
Result monad — the core of Railway-Oriented Programming.

A Result[T] is either Success(value: T) or Failure(error: FailureDescription).
Operations return Result instead of raising. Errors propagate through the
failure track via .flat_map() short-circuiting.

    ┌───────────┐   flat_map    ┌───────────┐   flat_map    ┌──────────┐
    │  fetch    │──Success──────│  parse    │──Success──────│  write   │──→ Result[T]
    └─────┬─────┘               └─────┬─────┘               └─────┬────┘
          │ Failure                   │ Failure                   │ Failure
          └───────────────────────────┴───────────────────────────┴──→ Result[T]

Each track implements the operations for itself: Success applies the given
function, Failure hands back its own error untouched.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Generic, NoReturn, TypeVar

from railway.failure import ErrorCode, FailureDescription

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


class Result(Generic[T]):
    """
    Railway-Oriented Programming Result monad.

    Two possible states:
      - Success(value: T)  — the happy path
      - Failure(error: FailureDescription) — the error track

        >>> Result.success(42).map(lambda x: x * 2).value()
        84
        >>> Result.failure(ErrorCode.TRANSPORT_ERROR, "offline").map(lambda x: x * 2).is_failure()
        True
    """

    __slots__ = ()

    # ──────────────────────── Introspection ────────────────────────

    def is_success(self) -> bool:
        raise NotImplementedError

    def is_failure(self) -> bool:
        return not self.is_success()

    def value(self) -> T:
        """Extract the success value. Raises ValueError if called on a Failure."""
        raise NotImplementedError

    def error(self) -> FailureDescription:
        """Extract the failure description. Raises ValueError if called on a Success."""
        raise NotImplementedError

    # ──────────────────────── Track Operations ────────────────────────

    def either(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[FailureDescription], R],
    ) -> R:
        """Fold both tracks into one value."""
        raise NotImplementedError

    def map(self, mapper: Callable[[T], U]) -> Result[U]:
        """Transform the success value. Short-circuits on failure."""
        return self.flat_map(lambda v: Success(mapper(v)))

    def flat_map(self, mapper: Callable[[T], Result[U]]) -> Result[U]:
        """
        Chain a Result-returning function. Short-circuits on failure.

        This is the operator that connects railway segments:

            fetcher.fetch().flat_map(parser.parse)
        """
        raise NotImplementedError

    def ensure(
        self,
        predicate: Callable[[T], bool],
        error: FailureDescription | ErrorCode,
        message: str = "",
    ) -> Result[T]:
        """
        Switch to the failure track when the success value fails `predicate`.

            Result.success(body).ensure(
                lambda text: bool(text.strip()),
                ErrorCode.TRANSPORT_ERROR, "Response body is empty",
            )
        """
        description = (
            FailureDescription(code=error, message=message)
            if isinstance(error, ErrorCode)
            else error
        )
        return self.flat_map(lambda v: self if predicate(v) else Failure(description))

    def peek(self, action: Callable[[T], Any]) -> Result[T]:
        """Run a side effect on the success value; the Result is returned as-is."""
        return self

    # ──────────────────────── Static Factories ────────────────────────

    @staticmethod
    def success(value: T) -> Result[T]:
        return Success(value)

    @staticmethod
    def failure(
        code: ErrorCode,
        message: str,
        exception: BaseException | None = None,
    ) -> Result[T]:
        """
        Create a failed Result with error code, message, and optional exception.

            Result.failure(ErrorCode.STRUCTURAL_PARSE_ERROR, "expected section not found")
        """
        return Failure(FailureDescription(code=code, message=message, exception=exception))

    @staticmethod
    def from_computation(
        computation: Callable[[], T],
        error_code: ErrorCode,
        error_message: str,
    ) -> Result[T]:
        """
        Run `computation`, turning any exception it raises into a Failure.

        The adapter boundary: nothing raised by I/O leaks into a pipeline.

            return Result.from_computation(
                lambda: path.read_bytes(),
                ErrorCode.LOCAL_EXPORT_ERROR,
                "Failed to read PEM bundle",
            )
        """
        try:
            value = computation()
        except Exception as e:
            return Failure(FailureDescription(error_code, error_message, e))
        return Success(value)

    @staticmethod
    def all_of(results: Iterable[Result[T]]) -> Result[list[T]]:
        """
        Collect Results into a Result of list.

        The first Failure (in iteration order) is returned; later Results
        are not inspected.
        """
        values: list[T] = []
        for result in results:
            if result.is_failure():
                return Failure(result.error())
            values.append(result.value())
        return Success(values)


@dataclass(frozen=True, slots=True, eq=False)
class Success(Result[T]):
    """The success track — wraps a value of type T."""

    _value: T

    __match_args__ = ("_value",)

    def __init__(self, value: T) -> None:
        if value is None:
            raise TypeError("Success value must not be None")
        object.__setattr__(self, "_value", value)

    def is_success(self) -> bool:
        return True

    def value(self) -> T:
        return self._value

    def error(self) -> NoReturn:
        raise ValueError(f"Cannot get error from a Success: {self._value}")

    def either(self, on_success, on_failure):
        return on_success(self._value)

    def flat_map(self, mapper):
        return mapper(self._value)

    def peek(self, action):
        action(self._value)
        return self

    def __repr__(self) -> str:
        return f"Success({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Success):
            return self._value == other._value
        if isinstance(other, Result):
            return False
        return NotImplemented

    def __hash__(self) -> int:
        return hash(("Success", self._value))


@dataclass(frozen=True, slots=True, eq=False)
class Failure(Result[T]):
    """
    The failure track — wraps a FailureDescription.

    Two failures are equal when code and message match; the exception and
    timestamp are diagnostic only.
    """

    _error: FailureDescription

    __match_args__ = ("_error",)

    def __init__(self, error: FailureDescription) -> None:
        if error is None:
            raise TypeError("Failure error must not be None")
        object.__setattr__(self, "_error", error)

    def is_success(self) -> bool:
        return False

    def value(self) -> NoReturn:
        raise ValueError(f"Cannot get value from a Failure: {self._error.message}")

    def error(self) -> FailureDescription:
        return self._error

    def either(self, on_success, on_failure):
        return on_failure(self._error)

    def flat_map(self, mapper):
        return self

    def __repr__(self) -> str:
        return f"Failure({self._error.code.value}: {self._error.message!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Failure):
            return (self._error.code, self._error.message) == (
                other._error.code,
                other._error.message,
            )
        if isinstance(other, Result):
            return False
        return NotImplemented

    def __hash__(self) -> int:
        return hash(("Failure", self._error.code, self._error.message))

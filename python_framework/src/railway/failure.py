"""
Failure description — what travels on the failure track.

An ErrorCode names the kind of failure; FailureDescription carries the code,
a human-readable message, the originating exception (if any) and when it
happened. Both are immutable so they can travel through a pipeline untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique
from typing import Optional


@unique
class ErrorCode(Enum):
    """
    Kinds of failure a generation run can end with.

    Every code is fatal for a generation run; non-fatal conditions
    (unmatched trust-list entries, undecodable store blocks) never reach
    the failure track.
    """

    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    """Network retrieval failed: connectivity, non-success status, empty body."""

    STRUCTURAL_PARSE_ERROR = "STRUCTURAL_PARSE_ERROR"
    """Expected document anchor or column label is missing."""

    ROW_SHAPE_ERROR = "ROW_SHAPE_ERROR"
    """A table row has fewer cells than the columns being indexed."""

    LOCAL_EXPORT_ERROR = "LOCAL_EXPORT_ERROR"
    """The local certificate store could not be exported or read."""

    OUTPUT_WRITE_ERROR = "OUTPUT_WRITE_ERROR"
    """The generated artifact could not be written."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """System misconfiguration."""

    TECHNICAL_ERROR = "TECHNICAL_ERROR"
    """Unexpected infrastructure failure."""

    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    """Unclassified failure."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    What went wrong, as data: code, message, the originating exception and when.

    >>> desc = FailureDescription(ErrorCode.TRANSPORT_ERROR, "Trust list download failed")
    >>> desc.code
    <ErrorCode.TRANSPORT_ERROR: 'TRANSPORT_ERROR'>
    >>> desc.message
    'Trust list download failed'
    """

    code: ErrorCode
    message: str
    exception: Optional[BaseException] = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def describe(self) -> str:
        """One-line summary: message plus the originating exception, if any."""
        if self.exception is None:
            return self.message
        return f"{self.message}: {self.exception}"


"""Custom exception types and error kinds for finsight."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced by the engine."""

    NOT_FOUND = "not_found"
    ZERO_OR_INVALID_RATE = "zero_or_invalid_rate"
    MALFORMED_RECORD = "malformed_record"
    TRANSPORT_FAILURE = "transport_failure"


class FinsightError(Exception):
    """Base error carrying a kind and structured details."""

    kind: ErrorKind = ErrorKind.TRANSPORT_FAILURE

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class NotFoundError(FinsightError):
    """Raised when a requested record or currency does not exist."""

    kind = ErrorKind.NOT_FOUND


class TransportError(FinsightError):
    """Raised by a store when it cannot be reached or a query fails."""

    kind = ErrorKind.TRANSPORT_FAILURE


class ReferenceDataError(FinsightError):
    """Raised when currency metadata or rates are missing entirely.

    No amount can be displayed meaningfully in that state, so callers
    surface it as a page level failure instead of degrading cells. The kind
    is TRANSPORT_FAILURE when the rates were lost to a store failure.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        kind: ErrorKind = ErrorKind.NOT_FOUND,
    ) -> None:
        super().__init__(message, details)
        self.kind = kind

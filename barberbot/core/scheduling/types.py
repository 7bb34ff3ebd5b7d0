"""Result types shared by the parser, the calendar gateway and the router."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class BookingError(str, Enum):
    """Ways a booking turn can fail."""

    MALFORMED_INPUT = "malformed_input"    # Missing date/time tokens or fields
    INVALID_DATETIME = "invalid_datetime"  # Fields present, not a real moment
    GATEWAY_FAILURE = "gateway_failure"    # Calendar call failed or gave no link

    @property
    def is_parse_error(self) -> bool:
        """Check if the error came from reading the customer's text."""
        return self in {BookingError.MALFORMED_INPUT, BookingError.INVALID_DATETIME}


@dataclass(frozen=True)
class TimeInterval:
    """Appointment window with timezone-aware bounds."""

    start: datetime
    end: datetime

    @property
    def duration_minutes(self) -> int:
        """Length of the window in whole minutes."""
        return int((self.end - self.start).total_seconds() // 60)


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing a date/time reply.

    Exactly one of ``interval`` and ``error`` is set.
    """

    interval: Optional[TimeInterval] = None
    error: Optional[BookingError] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        """Check if parsing produced an interval."""
        return self.interval is not None

    @classmethod
    def success(cls, interval: TimeInterval) -> "ParseResult":
        """Build a successful result."""
        return cls(interval=interval)

    @classmethod
    def failure(cls, error: BookingError, detail: str) -> "ParseResult":
        """Build a failed result with a log-friendly detail."""
        return cls(error=error, detail=detail)

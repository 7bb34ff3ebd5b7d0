"""
Date/time reply parser.

Customers answer the booking prompt with ``DD/MM/YYYY HH:MM`` (24-hour),
e.g. ``25/12/2025 15:00``. The parser turns that text into an appointment
window in the shop's timezone, or reports why it could not.
"""

import logging
import re
from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from barberbot.config import get_settings
from .types import BookingError, ParseResult, TimeInterval

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/Sao_Paulo"
DEFAULT_DURATION_MINUTES = 60

# Customers are asked for AAAA; "25" is never read as 25 AD
MIN_YEAR = 1000

# Leading integer of a field: "09" -> 9, "15h" -> 15, "h15" -> no match
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def _leading_int(value: str) -> Optional[int]:
    """Read the integer a field starts with, or None if it starts with none."""
    match = _INT_PREFIX.match(value)
    if match is None:
        return None
    return int(match.group(1))


class DateTimeParser:
    """
    Parser for ``DD/MM/YYYY HH:MM`` booking replies.

    Validation is strict: a day that does not exist in the given month
    (``31/04``, ``29/02`` on a non-leap year) is rejected, never rolled over
    into the following month. Years must have four digits (1000 to 9999);
    past dates are accepted.
    """

    def __init__(
        self,
        timezone: str = DEFAULT_TIMEZONE,
        duration_minutes: int = DEFAULT_DURATION_MINUTES,
    ):
        """Initialize parser.

        Args:
            timezone: IANA zone the typed wall-clock time belongs to
            duration_minutes: Appointment length added to the start
        """
        self.timezone = timezone
        self._tz = ZoneInfo(timezone)
        self._duration = timedelta(minutes=duration_minutes)

    def parse(self, text: str) -> ParseResult:
        """Parse a date/time reply.

        Args:
            text: Raw message body

        Returns:
            ParseResult with the interval, or MALFORMED_INPUT /
            INVALID_DATETIME
        """
        tokens = text.split()
        if len(tokens) < 2:
            return ParseResult.failure(
                BookingError.MALFORMED_INPUT, "expected a date and a time"
            )

        date_part, time_part = tokens[0], tokens[1]
        date_fields = date_part.split("/")
        time_fields = time_part.split(":")

        fields = (date_fields + [""] * 3)[:3] + (time_fields + [""] * 2)[:2]
        if not all(fields):
            return ParseResult.failure(
                BookingError.MALFORMED_INPUT,
                f"incomplete date/time fields in {date_part!r} {time_part!r}",
            )

        numbers = [_leading_int(f) for f in fields]
        if any(n is None for n in numbers):
            return ParseResult.failure(
                BookingError.INVALID_DATETIME,
                f"non-numeric date/time field in {date_part!r} {time_part!r}",
            )

        day, month, year, hour, minute = numbers

        if year < MIN_YEAR:
            return ParseResult.failure(
                BookingError.INVALID_DATETIME, f"year {year} is not a four-digit year"
            )

        # datetime() refuses out-of-range fields instead of normalizing them
        try:
            start = datetime(year, month, day, hour, minute, tzinfo=self._tz)
        except (ValueError, OverflowError) as e:
            return ParseResult.failure(BookingError.INVALID_DATETIME, str(e))

        return ParseResult.success(TimeInterval(start=start, end=start + self._duration))


# Singleton
_parser: Optional[DateTimeParser] = None


def get_datetime_parser() -> DateTimeParser:
    """Get singleton DateTimeParser configured from settings."""
    global _parser
    if _parser is None:
        settings = get_settings()
        _parser = DateTimeParser(
            timezone=settings.business_timezone,
            duration_minutes=settings.appointment_duration_minutes,
        )
    return _parser

"""
Scheduling Module

Provides date/time parsing and the calendar gateway contract used by the
conversation router.

Usage:
    from barberbot.core.scheduling import get_datetime_parser

    result = get_datetime_parser().parse("25/12/2025 15:00")
    if result.ok:
        print(result.interval.start, result.interval.end)
    else:
        print(result.error)  # BookingError.MALFORMED_INPUT / INVALID_DATETIME
"""

# Result types
from barberbot.core.scheduling.types import (
    BookingError,
    ParseResult,
    TimeInterval,
)

# Parser
from barberbot.core.scheduling.datetime_parser import (
    DateTimeParser,
    get_datetime_parser,
)

# Calendar gateway contract
from barberbot.core.scheduling.gateway import (
    BookingRequest,
    BookingResult,
    CalendarGateway,
)

__all__ = [
    # Result types
    "BookingError",
    "ParseResult",
    "TimeInterval",
    # Parser
    "DateTimeParser",
    "get_datetime_parser",
    # Calendar gateway
    "BookingRequest",
    "BookingResult",
    "CalendarGateway",
]

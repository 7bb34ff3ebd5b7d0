"""
Calendar gateway contract.

The router books appointments through this interface only. The Google
Calendar adapter lives in barberbot.infra.google_calendar; tests use
in-memory fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .types import BookingError


@dataclass(frozen=True)
class BookingRequest:
    """Event to create on the shop calendar."""

    summary: str
    description: str
    start: datetime
    end: datetime
    timezone: str

    def to_event_body(self) -> dict:
        """Convert to a Google Calendar event resource."""
        return {
            "summary": self.summary,
            "description": self.description,
            "start": {"dateTime": self.start.isoformat(), "timeZone": self.timezone},
            "end": {"dateTime": self.end.isoformat(), "timeZone": self.timezone},
        }


@dataclass
class BookingResult:
    """Result of a booking attempt."""

    success: bool
    confirmation_link: Optional[str] = None
    event_id: Optional[str] = None
    error: Optional[BookingError] = None
    message: Optional[str] = None

    @classmethod
    def booked(cls, confirmation_link: str, event_id: Optional[str] = None) -> "BookingResult":
        """Build a successful result."""
        return cls(success=True, confirmation_link=confirmation_link, event_id=event_id)

    @classmethod
    def failed(cls, message: str) -> "BookingResult":
        """Build a failed result."""
        return cls(success=False, error=BookingError.GATEWAY_FAILURE, message=message)


class CalendarGateway(ABC):
    """Capability to create calendar events."""

    @abstractmethod
    async def create_event(self, request: BookingRequest) -> BookingResult:
        """Create an event.

        Implementations must not raise for service errors; they return
        BookingResult.failed() instead.
        """

    def is_configured(self) -> bool:
        """Check if the gateway has what it needs to book (used by /health/ready)."""
        return True

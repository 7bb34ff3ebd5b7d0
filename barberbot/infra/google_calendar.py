"""
Google Calendar gateway.

Books appointments on the shop calendar with a service account.

Setup:
1. Enable the Google Calendar API in a Google Cloud project
2. Create a service account and download its JSON key
3. Save it as credenciais.json (or point GOOGLE_CREDENTIALS_FILE at it)
4. Share the shop calendar with the service account e-mail, or keep the
   default "primary" calendar of the service account itself

API Documentation: https://developers.google.com/calendar/api/v3/reference/events/insert
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

import google_auth_httplib2
import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from barberbot.config import get_settings
from barberbot.core.scheduling.gateway import BookingRequest, BookingResult, CalendarGateway

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar"]


class CalendarConfigError(Exception):
    """Raised when the calendar service cannot be built from the configured credentials."""
    pass


class GoogleCalendarGateway(CalendarGateway):
    """
    CalendarGateway backed by the Google Calendar v3 API.

    The API client is synchronous; calls run in a worker thread so the
    event loop keeps serving other webhooks meanwhile. The timeout lives on
    the HTTP connection, so an insert that times out is aborted in that
    thread and reported as a failure.
    """

    def __init__(
        self,
        credentials_file: Optional[str] = None,
        calendar_id: Optional[str] = None,
        timeout: Optional[float] = None,
        service: Any = None,
    ):
        """Initialize gateway.

        Args:
            credentials_file: Service account key path (defaults to settings)
            calendar_id: Target calendar (defaults to settings, "primary")
            timeout: HTTP socket timeout in seconds (defaults to settings)
            service: Prebuilt calendar service (for testing)
        """
        settings = get_settings()
        self.credentials_file = Path(credentials_file or settings.google_credentials_file)
        self.calendar_id = calendar_id or settings.google_calendar_id
        self.timeout = timeout if timeout is not None else settings.booking_timeout_seconds
        self._service = service

    def is_configured(self) -> bool:
        """Check if a service is available or can be built from the key file."""
        return self._service is not None or self.credentials_file.is_file()

    def _get_service(self) -> Any:
        """Get or build the Calendar API service."""
        if self._service is None:
            if not self.credentials_file.is_file():
                raise CalendarConfigError(
                    f"Credentials file not found: {self.credentials_file}"
                )

            try:
                credentials = service_account.Credentials.from_service_account_file(
                    str(self.credentials_file), scopes=SCOPES
                )
            except (ValueError, GoogleAuthError) as e:
                raise CalendarConfigError(f"Invalid service account key: {e}") from e

            http = google_auth_httplib2.AuthorizedHttp(
                credentials, http=httplib2.Http(timeout=self.timeout or None)
            )
            self._service = build("calendar", "v3", http=http, cache_discovery=False)
            logger.info(f"Google Calendar service ready (calendar={self.calendar_id})")

        return self._service

    def _insert(self, body: dict) -> dict:
        """Blocking events.insert call."""
        service = self._get_service()
        return service.events().insert(calendarId=self.calendar_id, body=body).execute()

    async def create_event(self, request: BookingRequest) -> BookingResult:
        """Create the appointment event.

        Args:
            request: Event to create

        Returns:
            BookingResult with the event's htmlLink, or a failure
        """
        try:
            event = await asyncio.to_thread(self._insert, request.to_event_body())

        except CalendarConfigError as e:
            logger.error(f"Calendar not configured: {e}")
            return BookingResult.failed(str(e))
        except HttpError as e:
            logger.error(f"Google Calendar API error: {e}")
            return BookingResult.failed(f"calendar api error: {e.resp.status}")
        except TimeoutError:
            logger.error(f"Google Calendar request timed out after {self.timeout}s")
            return BookingResult.failed("timeout")
        except Exception as e:
            logger.error(f"Failed to create calendar event: {e}", exc_info=True)
            return BookingResult.failed(str(e))

        link = event.get("htmlLink") if isinstance(event, dict) else None
        if not link:
            logger.error(f"Calendar event created without htmlLink: {event!r}")
            return BookingResult.failed("missing htmlLink")

        logger.debug(f"Calendar event {event.get('id')} created")
        return BookingResult.booked(confirmation_link=link, event_id=event.get("id"))


# Singleton
_gateway: Optional[GoogleCalendarGateway] = None


def get_calendar_gateway() -> GoogleCalendarGateway:
    """Get singleton GoogleCalendarGateway."""
    global _gateway
    if _gateway is None:
        _gateway = GoogleCalendarGateway()
    return _gateway

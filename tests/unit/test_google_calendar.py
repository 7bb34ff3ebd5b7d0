"""Tests for the Google Calendar gateway."""

import time
from datetime import datetime
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

import httplib2
import pytest
from googleapiclient.errors import HttpError

from barberbot.config import get_settings
from barberbot.core.conversation import ConversationRouter, messages
from barberbot.core.scheduling import BookingError, BookingRequest, DateTimeParser
from barberbot.infra.google_calendar import SCOPES, GoogleCalendarGateway

SAO_PAULO = ZoneInfo("America/Sao_Paulo")


@pytest.fixture
def booking_request():
    """Appointment on Christmas afternoon."""
    return BookingRequest(
        summary="Corte de Cabelo - Barbearia TwoWell",
        description="Agendamento para o cliente com WhatsApp: 5511988887777",
        start=datetime(2025, 12, 25, 15, 0, tzinfo=SAO_PAULO),
        end=datetime(2025, 12, 25, 16, 0, tzinfo=SAO_PAULO),
        timezone="America/Sao_Paulo",
    )


@pytest.fixture
def service():
    """Mock Calendar v3 service whose insert succeeds."""
    service = MagicMock()
    service.events.return_value.insert.return_value.execute.return_value = {
        "id": "evt-123",
        "htmlLink": "https://www.google.com/calendar/event?eid=abc",
        "status": "confirmed",
    }
    return service


class TestBookingRequest:
    """Test BookingRequest."""

    def test_to_event_body(self, booking_request):
        """Test the Google event resource shape."""
        body = booking_request.to_event_body()

        assert body == {
            "summary": "Corte de Cabelo - Barbearia TwoWell",
            "description": "Agendamento para o cliente com WhatsApp: 5511988887777",
            "start": {
                "dateTime": "2025-12-25T15:00:00-03:00",
                "timeZone": "America/Sao_Paulo",
            },
            "end": {
                "dateTime": "2025-12-25T16:00:00-03:00",
                "timeZone": "America/Sao_Paulo",
            },
        }


class TestGoogleCalendarGateway:
    """Test GoogleCalendarGateway."""

    @pytest.mark.asyncio
    async def test_create_event_success(self, service, booking_request):
        """Test a created event returns its link."""
        gateway = GoogleCalendarGateway(calendar_id="primary", service=service)

        result = await gateway.create_event(booking_request)

        assert result.success is True
        assert result.confirmation_link == "https://www.google.com/calendar/event?eid=abc"
        assert result.event_id == "evt-123"
        assert result.error is None

    @pytest.mark.asyncio
    async def test_create_event_sends_body(self, service, booking_request):
        """Test the insert call targets the configured calendar."""
        gateway = GoogleCalendarGateway(calendar_id="barbearia@group.calendar.google.com", service=service)

        await gateway.create_event(booking_request)

        service.events.return_value.insert.assert_called_once_with(
            calendarId="barbearia@group.calendar.google.com",
            body=booking_request.to_event_body(),
        )

    @pytest.mark.asyncio
    async def test_http_error(self, service, booking_request):
        """Test an API error becomes a failed result."""
        service.events.return_value.insert.return_value.execute.side_effect = HttpError(
            httplib2.Response({"status": 500}), b"backend error"
        )
        gateway = GoogleCalendarGateway(service=service)

        result = await gateway.create_event(booking_request)

        assert result.success is False
        assert result.error == BookingError.GATEWAY_FAILURE
        assert "500" in result.message

    @pytest.mark.asyncio
    async def test_unexpected_error(self, service, booking_request):
        """Test network errors become a failed result."""
        service.events.return_value.insert.return_value.execute.side_effect = OSError(
            "connection reset"
        )
        gateway = GoogleCalendarGateway(service=service)

        result = await gateway.create_event(booking_request)

        assert result.success is False
        assert result.message == "connection reset"

    @pytest.mark.asyncio
    async def test_missing_link(self, service, booking_request):
        """Test an event without htmlLink is not a confirmed booking."""
        service.events.return_value.insert.return_value.execute.return_value = {
            "id": "evt-123"
        }
        gateway = GoogleCalendarGateway(service=service)

        result = await gateway.create_event(booking_request)

        assert result.success is False
        assert result.confirmation_link is None

    @pytest.mark.asyncio
    async def test_missing_credentials_file(self, tmp_path, booking_request):
        """Test a missing key file fails the booking instead of raising."""
        gateway = GoogleCalendarGateway(credentials_file=str(tmp_path / "missing.json"))

        result = await gateway.create_event(booking_request)

        assert result.success is False
        assert "not found" in result.message

    @pytest.mark.asyncio
    async def test_invalid_credentials_file(self, tmp_path, booking_request):
        """Test a key file that is not a service account key."""
        key_file = tmp_path / "credenciais.json"
        key_file.write_text("{}")
        gateway = GoogleCalendarGateway(credentials_file=str(key_file))

        result = await gateway.create_event(booking_request)

        assert result.success is False
        assert "Invalid service account key" in result.message

    def test_is_configured(self, tmp_path, service):
        """Test configuration check by key file or prebuilt service."""
        key_file = tmp_path / "credenciais.json"

        assert GoogleCalendarGateway(credentials_file=str(key_file)).is_configured() is False
        key_file.write_text("{}")
        assert GoogleCalendarGateway(credentials_file=str(key_file)).is_configured() is True
        assert GoogleCalendarGateway(service=service).is_configured() is True


class TestGoogleCalendarTimeouts:
    """Test how slow Google Calendar requests end."""

    def test_timeout_set_on_http_connection(self, tmp_path):
        """Test the service is built on an HTTP client carrying the timeout."""
        key_file = tmp_path / "credenciais.json"
        key_file.write_text("{}")
        gateway = GoogleCalendarGateway(credentials_file=str(key_file), timeout=7.5)

        with patch(
            "barberbot.infra.google_calendar.service_account.Credentials.from_service_account_file"
        ) as from_file, patch("barberbot.infra.google_calendar.build") as build:
            gateway._get_service()

        from_file.assert_called_once_with(str(key_file), scopes=SCOPES)
        kwargs = build.call_args.kwargs
        assert "credentials" not in kwargs
        assert kwargs["http"].http.timeout == 7.5
        assert kwargs["http"].credentials is from_file.return_value

    def test_timeout_defaults_to_settings(self, service):
        """Test the timeout comes from settings when not given."""
        gateway = GoogleCalendarGateway(service=service)

        assert gateway.timeout == get_settings().booking_timeout_seconds

    @pytest.mark.asyncio
    async def test_slow_insert_is_awaited(self, service, booking_request):
        """Test a slow insert that completes is reported as booked."""
        created = []

        def slow_execute():
            time.sleep(0.3)
            created.append("evt")
            return {"id": "evt", "htmlLink": "https://www.google.com/calendar/event?eid=slow"}

        service.events.return_value.insert.return_value.execute.side_effect = slow_execute
        gateway = GoogleCalendarGateway(service=service, timeout=0.1)

        result = await gateway.create_event(booking_request)

        assert created == ["evt"]
        assert result.success is True
        assert result.confirmation_link.endswith("eid=slow")

    @pytest.mark.asyncio
    async def test_socket_timeout_is_a_failure(self, service, booking_request):
        """Test a request aborted by the socket timeout fails without retrying."""
        execute = service.events.return_value.insert.return_value.execute
        execute.side_effect = TimeoutError("timed out")
        gateway = GoogleCalendarGateway(service=service, timeout=0.1)

        result = await gateway.create_event(booking_request)

        assert result.success is False
        assert result.message == "timeout"
        execute.assert_called_once()

    @pytest.mark.asyncio
    async def test_reply_matches_calendar_outcome(self, service, transport, make_message):
        """Test the customer is told "booked" when a slow insert created the event."""
        created = []

        def slow_execute():
            time.sleep(0.3)
            created.append("evt")
            return {"id": "evt", "htmlLink": "https://www.google.com/calendar/event?eid=slow"}

        service.events.return_value.insert.return_value.execute.side_effect = slow_execute
        router = ConversationRouter(
            transport=transport,
            calendar=GoogleCalendarGateway(service=service, timeout=0.1),
            parser=DateTimeParser(),
            typing_delay=0,
        )
        await router.handle(make_message("1"))

        replies = await router.handle(make_message("25/12/2025 15:00"))

        assert created == ["evt"]
        assert replies[-1] == messages.BOOKING_SUCCESS.format(
            link="https://www.google.com/calendar/event?eid=slow"
        )

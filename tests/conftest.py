"""Shared fakes for the transport and calendar capabilities."""

import asyncio
import itertools
from typing import Optional

import pytest

from barberbot.core.conversation import (
    ChatHandle,
    InboundMessage,
    MessageTransport,
    TransportError,
)
from barberbot.core.scheduling import BookingRequest, BookingResult, CalendarGateway


class FakeTransport(MessageTransport):
    """Records every typing indicator and text in one shared event log."""

    def __init__(self, events: list, display_name: Optional[str] = None):
        self.events = events
        self.display_name = display_name
        self.fail_text = False

    async def send_typing_indicator(self, chat: ChatHandle) -> None:
        self.events.append(("typing", chat.recipient))

    async def send_text(self, chat: ChatHandle, text: str) -> None:
        if self.fail_text:
            raise TransportError("send failed")
        self.events.append(("text", text))

    async def get_display_name(self, chat: ChatHandle) -> Optional[str]:
        return self.display_name

    @property
    def texts(self) -> list[str]:
        return [payload for kind, payload in self.events if kind == "text"]


class FakeCalendar(CalendarGateway):
    """Returns a canned result and records requests in the shared event log."""

    def __init__(self, events: list):
        self.events = events
        self.requests: list[BookingRequest] = []
        self.result = BookingResult.booked("https://calendar.example/abc", event_id="evt-1")
        self.error: Optional[Exception] = None
        self.delay = 0.0

    async def create_event(self, request: BookingRequest) -> BookingResult:
        self.requests.append(request)
        self.events.append(("calendar", request.start.isoformat()))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def events():
    """Shared, ordered log of transport and calendar calls."""
    return []


@pytest.fixture
def transport(events):
    """In-memory transport."""
    return FakeTransport(events, display_name="João Silva")


@pytest.fixture
def calendar(events):
    """In-memory calendar gateway that books successfully."""
    return FakeCalendar(events)


@pytest.fixture
def make_message():
    """Factory for inbound messages from a direct chat, each with a new message id."""
    ids = itertools.count(1)

    def _make(
        body: str,
        sender_id: str = "5511988887777",
        message_id: Optional[str] = None,
    ) -> InboundMessage:
        return InboundMessage(
            sender_id=sender_id,
            body=body,
            chat=ChatHandle(
                recipient=sender_id,
                message_id=message_id or f"wamid.TEST{next(ids)}",
            ),
        )

    return _make

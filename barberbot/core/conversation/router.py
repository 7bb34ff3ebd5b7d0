"""
Conversation Router - Main Orchestrator.

Decides how each inbound message is read, runs the booking flow against the
calendar gateway and sends the replies through the message transport.

Dispatch order (first match wins):
1. Messages from groups, broadcasts and other non-personal chats are ignored.
2. A customer waiting to send a date/time gets the text parsed as one,
   even if it looks like a greeting or a menu number.
3. Greeting words show the welcome menu.
4. The first character of the message selects a menu option (1-5).
   Anything else gets no reply.
"""

import asyncio
import logging
from collections import OrderedDict
from typing import Awaitable, Callable, Optional

from barberbot.config import get_settings
from barberbot.core.scheduling import (
    BookingRequest,
    BookingResult,
    CalendarGateway,
    DateTimeParser,
    get_datetime_parser,
)
from . import messages
from .state import ConversationState, is_pending
from .store import SessionStore
from .transport import ChatHandle, InboundMessage, MessageTransport

logger = logging.getLogger(__name__)

# WhatsApp address domains that belong to a single person
DIRECT_CHAT_DOMAINS = {"c.us", "s.whatsapp.net"}


def is_direct_chat(sender_id: str) -> bool:
    """Check if a sender id is an individual's chat.

    Accepts bare phone numbers (Cloud API wa_id, optionally with "+") and
    personal addresses like ``5511999999999@c.us``. Groups (``@g.us``),
    broadcasts (``status@broadcast``) and channels are rejected.
    """
    sender_id = sender_id.strip()
    if not sender_id:
        return False

    if "@" in sender_id:
        user, _, domain = sender_id.partition("@")
        return domain in DIRECT_CHAT_DOMAINS and user.isdigit()

    return sender_id.lstrip("+").isdigit()


class ConversationRouter:
    """
    Handles one conversation turn at a time.

    Coordinates:
    - Session state (who is expected to send a date/time)
    - Date/time parsing
    - Calendar booking
    - Replies, each preceded by a "typing..." pause
    """

    def __init__(
        self,
        transport: MessageTransport,
        calendar: CalendarGateway,
        store: Optional[SessionStore] = None,
        parser: Optional[DateTimeParser] = None,
        typing_delay: Optional[float] = None,
        seen_message_limit: Optional[int] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize router.

        Args:
            transport: Chat platform used for replies
            calendar: Calendar gateway used for bookings
            store: Session store (a fresh in-memory one if not provided)
            parser: Date/time parser (settings-configured singleton if not provided)
            typing_delay: Seconds the typing indicator is shown (defaults to settings)
            seen_message_limit: How many inbound message ids are remembered
                to drop redeliveries (defaults to settings)
            sleep: Awaitable used for the typing pause
        """
        settings = get_settings()
        self.transport = transport
        self.calendar = calendar
        self.store = store if store is not None else SessionStore()
        self.parser = parser or get_datetime_parser()
        self.typing_delay = (
            settings.typing_delay_seconds if typing_delay is None else typing_delay
        )
        self.seen_message_limit = (
            settings.seen_message_limit if seen_message_limit is None else seen_message_limit
        )
        self._sleep = sleep
        self._turn_lock = asyncio.Lock()

        # LRU of inbound message ids already accepted
        self._seen_messages: OrderedDict[str, None] = OrderedDict()

        self._menu_handlers: dict[str, Callable[[InboundMessage, list[str]], Awaitable[None]]] = {
            "1": self._start_booking,
        }
        for option, text in messages.MENU_REPLIES.items():
            self._menu_handlers[option] = self._fixed_reply(text)

    async def handle(self, msg: InboundMessage) -> list[str]:
        """Handle one inbound message.

        Turns run one at a time, in arrival order, so the session store
        never sees two turns interleave. A message whose id was already
        accepted (a webhook redelivery) is dropped. Never raises: a failed
        turn is logged and ends with whatever replies were already delivered.

        Args:
            msg: Received message

        Returns:
            Texts sent back to the customer, in order
        """
        replies: list[str] = []

        if not is_direct_chat(msg.sender_id):
            logger.debug(f"Ignoring message from non-direct chat {msg.sender_id}")
            return replies

        # Checked before waiting for the lock so a redelivery that arrives
        # while the first copy is still running is dropped too
        if self._is_duplicate(msg):
            logger.info(f"Ignoring redelivered message {msg.chat.message_id}")
            return replies

        async with self._turn_lock:
            try:
                await self._dispatch(msg, replies)
            except Exception as e:
                logger.error(
                    f"Error handling message from {msg.sender_id}: {e}", exc_info=True
                )

        return replies

    def _is_duplicate(self, msg: InboundMessage) -> bool:
        """Check if a message id was seen before, remembering it if not.

        Messages without an id are never treated as duplicates.
        """
        message_id = msg.chat.message_id
        if not message_id:
            return False

        if message_id in self._seen_messages:
            self._seen_messages.move_to_end(message_id)
            return True

        self._seen_messages[message_id] = None
        while len(self._seen_messages) > self.seen_message_limit:
            self._seen_messages.popitem(last=False)
        return False

    async def _dispatch(self, msg: InboundMessage, replies: list[str]) -> None:
        """Route a message by session state, greeting, then menu option."""
        state = self.store.get(msg.sender_id)

        if is_pending(state):
            try:
                await self._handle_datetime_reply(msg, replies)
            finally:
                self.store.clear(msg.sender_id)
            return

        if messages.is_greeting(msg.body):
            name = await self._lookup_name(msg.chat)
            await self._reply(msg.chat, messages.welcome(name), replies)
            return

        option = msg.body.strip()[:1]
        handler = self._menu_handlers.get(option)
        if handler is None:
            logger.debug(f"No handler for message from {msg.sender_id}")
            return

        await handler(msg, replies)

    # === Menu options ===

    async def _start_booking(self, msg: InboundMessage, replies: list[str]) -> None:
        """Option 1: ask for a date/time and wait for it."""
        await self._reply(msg.chat, messages.BOOKING_PROMPT, replies)
        self.store.set(msg.sender_id, ConversationState.AWAITING_DATETIME)

    def _fixed_reply(
        self, text: str
    ) -> Callable[[InboundMessage, list[str]], Awaitable[None]]:
        """Build a menu handler that answers with a fixed text."""

        async def handler(msg: InboundMessage, replies: list[str]) -> None:
            await self._reply(msg.chat, text, replies)

        return handler

    # === Booking ===

    async def _handle_datetime_reply(self, msg: InboundMessage, replies: list[str]) -> None:
        """Parse the date/time reply and book it.

        The caller clears the session state whatever happens here.
        """
        parsed = self.parser.parse(msg.body)

        if not parsed.ok:
            logger.info(
                f"Unreadable date/time from {msg.sender_id}: "
                f"{parsed.error.value} ({parsed.detail})"
            )
            await self._reply(msg.chat, messages.FORMAT_HELP, replies)
            return

        await self._reply(msg.chat, messages.BOOKING_ACK.format(text=msg.body), replies)

        request = BookingRequest(
            summary=messages.EVENT_SUMMARY,
            description=messages.EVENT_DESCRIPTION.format(sender_id=msg.sender_id),
            start=parsed.interval.start,
            end=parsed.interval.end,
            timezone=self.parser.timezone,
        )
        result = await self._book(request)

        if result.success and result.confirmation_link:
            logger.info(f"Booked {request.start.isoformat()} for {msg.sender_id}")
            await self._reply(
                msg.chat,
                messages.BOOKING_SUCCESS.format(link=result.confirmation_link),
                replies,
            )
        else:
            logger.warning(
                f"Booking failed for {msg.sender_id}: {result.message or 'no confirmation link'}"
            )
            await self._reply(msg.chat, messages.BOOKING_FAILED, replies)

    async def _book(self, request: BookingRequest) -> BookingResult:
        """Call the calendar gateway once; errors become failures.

        Not cancelled here: the gateway bounds its own request, so a
        reported failure is never followed by a late event insert.
        """
        try:
            return await self.calendar.create_event(request)
        except Exception as e:
            logger.error(f"Calendar gateway error: {e}", exc_info=True)
            return BookingResult.failed(str(e))

    # === Transport helpers ===

    async def _lookup_name(self, chat: ChatHandle) -> Optional[str]:
        """Get the customer's display name; None if the lookup fails."""
        try:
            return await self.transport.get_display_name(chat)
        except Exception as e:
            logger.warning(f"Display name lookup failed: {e}")
            return None

    async def _reply(self, chat: ChatHandle, text: str, replies: list[str]) -> None:
        """Show typing, wait the fixed delay, then send the text."""
        await self.transport.send_typing_indicator(chat)
        if self.typing_delay > 0:
            await self._sleep(self.typing_delay)
        await self.transport.send_text(chat, text)
        replies.append(text)

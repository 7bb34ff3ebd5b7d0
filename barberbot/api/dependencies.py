"""
Shared bot components for the API routes.

One transport, one calendar gateway and one router (owning the session
store) live for the whole process. Routes get them through FastAPI
dependencies so tests can override them.
"""

import logging
from typing import Optional

from barberbot.core.conversation import ConversationRouter, MessageTransport
from barberbot.core.scheduling import CalendarGateway
from barberbot.infra.google_calendar import get_calendar_gateway
from barberbot.infra.whatsapp import get_whatsapp_transport

logger = logging.getLogger(__name__)

_router: Optional[ConversationRouter] = None


def get_transport() -> MessageTransport:
    """Get the process-wide message transport."""
    return get_whatsapp_transport()


def get_calendar() -> CalendarGateway:
    """Get the process-wide calendar gateway."""
    return get_calendar_gateway()


def get_conversation_router() -> ConversationRouter:
    """Get singleton ConversationRouter."""
    global _router
    if _router is None:
        _router = ConversationRouter(transport=get_transport(), calendar=get_calendar())
        logger.debug("Conversation router created")
    return _router

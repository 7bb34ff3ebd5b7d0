"""
Conversation Module

Session state, the transport contract and the router that ties them to the
scheduling module.

Usage:
    from barberbot.core.conversation import ConversationRouter, InboundMessage, ChatHandle

    router = ConversationRouter(transport=transport, calendar=calendar)
    replies = await router.handle(
        InboundMessage(sender_id="5511999999999", body="oi", chat=ChatHandle("5511999999999"))
    )
"""

from barberbot.core.conversation.state import ConversationState, is_pending
from barberbot.core.conversation.store import SessionStore
from barberbot.core.conversation.transport import (
    ChatHandle,
    InboundMessage,
    MessageTransport,
    TransportError,
)
from barberbot.core.conversation.router import ConversationRouter, is_direct_chat

__all__ = [
    # State
    "ConversationState",
    "is_pending",
    "SessionStore",
    # Transport contract
    "ChatHandle",
    "InboundMessage",
    "MessageTransport",
    "TransportError",
    # Router
    "ConversationRouter",
    "is_direct_chat",
]

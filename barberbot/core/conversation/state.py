"""Conversation state per customer."""

from enum import Enum


class ConversationState(str, Enum):
    """What the bot expects from a customer next."""

    NONE = "none"
    AWAITING_DATETIME = "awaiting_datetime"  # Booking prompt sent, waiting for DD/MM/YYYY HH:MM


def is_pending(state: ConversationState) -> bool:
    """Check if the next message must be read as an answer, not a command."""
    return state is ConversationState.AWAITING_DATETIME

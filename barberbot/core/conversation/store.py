"""In-memory session store for conversation state."""

import logging

from .state import ConversationState

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Process-lifetime mapping of customer identity -> ConversationState.

    Owned by the ConversationRouter and only touched while a turn is being
    handled. Turns run one at a time on the asyncio event loop and the store
    never awaits, so no locking is needed. If turns ever run on several
    threads this must become a locked mapping.

    Entries never expire and nothing survives a restart.
    """

    def __init__(self):
        """Initialize an empty store."""
        self._states: dict[str, ConversationState] = {}

    def get(self, user_id: str) -> ConversationState:
        """Get a customer's state (NONE when unknown)."""
        return self._states.get(user_id, ConversationState.NONE)

    def set(self, user_id: str, state: ConversationState) -> None:
        """Set a customer's state. Setting NONE removes the entry."""
        if state is ConversationState.NONE:
            self.clear(user_id)
            return

        self._states[user_id] = state
        logger.debug(f"Session {user_id} -> {state.value}")

    def clear(self, user_id: str) -> None:
        """Forget a customer's state."""
        if self._states.pop(user_id, None) is not None:
            logger.debug(f"Session {user_id} cleared")

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._states

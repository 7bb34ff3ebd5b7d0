"""
Message transport contract.

The router talks to the chat platform only through MessageTransport.
The WhatsApp Cloud API adapter lives in barberbot.infra.whatsapp.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class TransportError(Exception):
    """Raised when a message or presence update could not be delivered."""
    pass


@dataclass(frozen=True)
class ChatHandle:
    """What the transport needs to answer a chat.

    Opaque to the router: it is only passed back to the transport.
    """

    recipient: str                      # Address replies go to (wa_id)
    message_id: Optional[str] = None    # Inbound message being answered
    display_name: Optional[str] = None  # Sender's profile name, if shared


@dataclass(frozen=True)
class InboundMessage:
    """One received chat message."""

    sender_id: str
    body: str
    chat: ChatHandle


class MessageTransport(ABC):
    """Capability to reply on the chat platform."""

    @abstractmethod
    async def send_typing_indicator(self, chat: ChatHandle) -> None:
        """Show the "typing..." presence in the chat.

        Best effort: adapters log presence failures instead of raising.
        """

    @abstractmethod
    async def send_text(self, chat: ChatHandle, text: str) -> None:
        """Deliver a text message.

        Raises:
            TransportError: If the platform refused or could not be reached
        """

    async def get_display_name(self, chat: ChatHandle) -> Optional[str]:
        """Get the sender's display name, if the platform shares it."""
        return chat.display_name

    async def connect(self) -> None:
        """Open platform connections. Called once at startup."""

    async def close(self) -> None:
        """Release platform connections. Called once at shutdown."""

    @property
    def is_ready(self) -> bool:
        """Check if replies can be sent."""
        return True

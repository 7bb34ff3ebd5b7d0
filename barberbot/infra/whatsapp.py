"""
WhatsApp Cloud API transport.

Sends replies and typing indicators through the Meta Graph API:
- POST /{version}/{phone_number_id}/messages  (text messages)
- POST /{version}/{phone_number_id}/messages  (read receipt + typing indicator)

Inbound messages arrive on the webhook route (barberbot.api.routes.webhook).
"""

import hashlib
import hmac
import logging
from typing import Optional

import httpx

from barberbot.config import get_settings
from barberbot.core.conversation.transport import ChatHandle, MessageTransport, TransportError

logger = logging.getLogger(__name__)


def verify_signature(payload: bytes, signature_header: Optional[str], app_secret: str) -> bool:
    """Check an X-Hub-Signature-256 header against the raw request body.

    Args:
        payload: Raw request body
        signature_header: Header value, "sha256=<hex digest>"
        app_secret: Meta app secret

    Returns:
        True if the signature matches
    """
    if not signature_header or not signature_header.startswith("sha256="):
        return False

    expected = hmac.new(app_secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature_header.removeprefix("sha256="))


class WhatsAppCloudTransport(MessageTransport):
    """
    MessageTransport for the WhatsApp Cloud API.

    Lifecycle: connect() opens the HTTP client, close() releases it.
    The client is also created lazily on first use.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        phone_number_id: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize transport.

        Args:
            access_token: Graph API bearer token (defaults to settings)
            phone_number_id: Sender phone number id (defaults to settings)
            api_url: Graph API base URL (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
        """
        settings = get_settings()
        self.access_token = access_token if access_token is not None else settings.whatsapp_access_token
        self.phone_number_id = (
            phone_number_id if phone_number_id is not None else settings.whatsapp_phone_number_id
        )
        base_url = (api_url or settings.whatsapp_api_url).rstrip("/")
        self.messages_url = (
            f"{base_url}/{settings.whatsapp_api_version}/{self.phone_number_id}/messages"
        )
        self.timeout = timeout or settings.whatsapp_timeout
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_ready(self) -> bool:
        """Check if credentials are configured."""
        return bool(self.access_token) and bool(self.phone_number_id)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Authorization": f"Bearer {self.access_token}"},
            )
        return self._client

    async def connect(self) -> None:
        """Open the HTTP client."""
        await self._get_client()
        if self.is_ready:
            logger.info("WhatsApp transport connected and ready")
        else:
            logger.warning(
                "WhatsApp credentials not set. Replies will fail until "
                "WHATSAPP_ACCESS_TOKEN and WHATSAPP_PHONE_NUMBER_ID are configured."
            )

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _post(self, payload: dict) -> dict:
        """POST to the messages endpoint.

        Raises:
            TransportError: On HTTP or connection errors
        """
        client = await self._get_client()

        try:
            response = await client.post(self.messages_url, json=payload)
            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"WhatsApp API returned {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"WhatsApp API unreachable: {e}") from e

    async def send_text(self, chat: ChatHandle, text: str) -> None:
        """Send a text message.

        Args:
            chat: Chat to answer
            text: Message body

        Raises:
            TransportError: If the message was not accepted
        """
        data = await self._post(
            {
                "messaging_product": "whatsapp",
                "recipient_type": "individual",
                "to": chat.recipient,
                "type": "text",
                "text": {"preview_url": True, "body": text},
            }
        )

        message_ids = [m.get("id") for m in data.get("messages", [])]
        logger.info(f"WhatsApp message sent to {chat.recipient} (ids: {message_ids})")

    async def send_typing_indicator(self, chat: ChatHandle) -> None:
        """Mark the inbound message read and show "typing...".

        The Cloud API ties the indicator to an inbound message, so nothing
        is sent when the chat has no message id. Failures are logged only.
        """
        if not chat.message_id:
            return

        try:
            await self._post(
                {
                    "messaging_product": "whatsapp",
                    "status": "read",
                    "message_id": chat.message_id,
                    "typing_indicator": {"type": "text"},
                }
            )
        except TransportError as e:
            logger.warning(f"Typing indicator failed for {chat.recipient}: {e}")


# Singleton
_transport: Optional[WhatsAppCloudTransport] = None


def get_whatsapp_transport() -> WhatsAppCloudTransport:
    """Get singleton WhatsAppCloudTransport."""
    global _transport
    if _transport is None:
        _transport = WhatsAppCloudTransport()
    return _transport

"""
WhatsApp webhook endpoints.

Transport layer only: payload parsing and verification happen here,
conversation and booking logic is delegated to the ConversationRouter.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from barberbot.api.dependencies import get_conversation_router
from barberbot.config import Settings, get_settings
from barberbot.core.conversation import ChatHandle, ConversationRouter, InboundMessage
from barberbot.infra.whatsapp import verify_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["Webhook"])


class WebhookAck(BaseModel):
    """Webhook delivery acknowledgment."""
    status: str
    processed: int


def extract_messages(payload: dict) -> list[InboundMessage]:
    """Collect text messages from a WhatsApp Cloud API webhook payload.

    Status callbacks, reactions, media and other non-text messages are
    skipped. Display names come from the ``contacts`` block of the same
    change, matched by wa_id.

    Args:
        payload: Decoded webhook body

    Returns:
        Inbound messages in payload order
    """
    inbound: list[InboundMessage] = []

    for entry in payload.get("entry") or []:
        for change in entry.get("changes") or []:
            value = change.get("value") or {}

            names = {
                contact.get("wa_id"): (contact.get("profile") or {}).get("name")
                for contact in value.get("contacts") or []
            }

            for message in value.get("messages") or []:
                if message.get("type") != "text":
                    logger.debug(f"Skipping {message.get('type')} message {message.get('id')}")
                    continue

                sender = message.get("from")
                body = (message.get("text") or {}).get("body")
                if not sender or body is None:
                    continue

                inbound.append(
                    InboundMessage(
                        sender_id=sender,
                        body=body,
                        chat=ChatHandle(
                            recipient=sender,
                            message_id=message.get("id"),
                            display_name=names.get(sender),
                        ),
                    )
                )

    return inbound


async def handle_messages(conversation: ConversationRouter, inbound: list[InboundMessage]) -> None:
    """Run the conversation turns of one delivery, in payload order."""
    for msg in inbound:
        logger.info(f"Incoming message from {msg.sender_id}: {msg.body!r}")
        await conversation.handle(msg)


@router.get(
    "",
    response_class=PlainTextResponse,
    summary="Webhook verification",
    description="Meta subscription handshake: echoes hub.challenge when the verify token matches.",
)
async def verify_webhook(
    mode: Optional[str] = Query(default=None, alias="hub.mode"),
    verify_token: Optional[str] = Query(default=None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(default=None, alias="hub.challenge"),
    settings: Settings = Depends(get_settings),
) -> PlainTextResponse:
    """Answer the webhook verification request."""
    if mode == "subscribe" and verify_token == settings.whatsapp_verify_token:
        logger.info("Webhook verified")
        return PlainTextResponse(challenge or "")

    logger.warning(f"Webhook verification rejected (mode={mode})")
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Verification failed")


@router.post(
    "",
    response_model=WebhookAck,
    status_code=status.HTTP_200_OK,
    summary="Receive WhatsApp messages",
    description="Acknowledges the delivery, then handles its text messages in order.",
)
async def receive_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(get_settings),
    conversation: ConversationRouter = Depends(get_conversation_router),
) -> WebhookAck:
    """
    Receive a WhatsApp webhook delivery.

    The 200 goes out before the turns run, so typing pauses and calendar
    calls never hold up the acknowledgment. Redeliveries that still arrive
    are dropped by message id in the router.
    """
    raw_body = await request.body()

    if settings.whatsapp_app_secret and not verify_signature(
        raw_body,
        request.headers.get("X-Hub-Signature-256"),
        settings.whatsapp_app_secret,
    ):
        logger.warning("Rejected webhook with invalid signature")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid signature")

    try:
        payload = json.loads(raw_body or b"{}")
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON")

    if not isinstance(payload, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid payload")

    inbound = extract_messages(payload)
    if inbound:
        background_tasks.add_task(handle_messages, conversation, inbound)

    return WebhookAck(status="ok", processed=len(inbound))

# src/models/schemas/webhook_schemas.py
"""
Webhook Schemas
==============

Pydantic schemas for inbound Messenger / Instagram webhook deliveries.
"""

from typing import Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, Field


class WebhookBaseSchema(BaseModel):
    """Lenient base: the platform adds fields over time."""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class Participant(WebhookBaseSchema):
    """Sender or recipient reference"""
    id: str = Field(..., min_length=1)


class Attachment(WebhookBaseSchema):
    """Attachment on an inbound message"""
    type: str
    payload: Optional[Dict[str, Any]] = None


class InboundMessage(WebhookBaseSchema):
    """Message body of a messaging event"""
    mid: Optional[str] = None
    text: Optional[str] = None
    attachments: Optional[List[Attachment]] = None
    quick_reply: Optional[Dict[str, Any]] = None
    is_echo: bool = False

    @property
    def attachment_types(self) -> List[str]:
        return [attachment.type for attachment in self.attachments or []]


class MessagingEvent(WebhookBaseSchema):
    """One entry of an entry's ``messaging`` list"""
    sender: Participant
    recipient: Optional[Participant] = None
    timestamp: Optional[int] = None
    message: Optional[InboundMessage] = None
    postback: Optional[Dict[str, Any]] = None


class WebhookEntry(WebhookBaseSchema):
    """
    Batch of events for one page / account.

    Events stay raw: only the first one is ever decoded, so later events
    of any shape are ignored.
    """
    id: Optional[str] = None
    time: Optional[int] = None
    messaging: List[Any]

    def first_event(self) -> Optional[MessagingEvent]:
        if not self.messaging:
            return None
        return MessagingEvent.model_validate(self.messaging[0])


class WebhookPayload(WebhookBaseSchema):
    """Top-level webhook delivery body; entries are decoded one at a time"""
    object: str
    entry: List[Any]

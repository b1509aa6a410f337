# src/models/schemas/__init__.py
"""
Schemas package for Messenger Relay.
Provides validation schemas for inbound webhook deliveries.
"""

from src.models.schemas.webhook_schemas import (
    Participant,
    Attachment,
    InboundMessage,
    MessagingEvent,
    WebhookEntry,
    WebhookPayload,
)

__all__ = [
    "Participant",
    "Attachment",
    "InboundMessage",
    "MessagingEvent",
    "WebhookEntry",
    "WebhookPayload",
]

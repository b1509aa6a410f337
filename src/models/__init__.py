"""
Data Models Package
==================

Outbound message variants, inbound webhook schemas and processing results.
"""

from .types import (
    # Building blocks
    QuickReply, Button, Element,

    # Outbound variants
    OutboundMessage, TextMessage, ImageMessage, QuickReplyMessage,
    ButtonTemplate, GenericTemplate, ListTemplate,
    InsightsReport, TaggedNotification, Reply,

    # Results
    IndicatorResult, EventOutcome,
)

from .schemas import (
    Participant, Attachment, InboundMessage, MessagingEvent,
    WebhookEntry, WebhookPayload,
)

__all__ = [
    "QuickReply", "Button", "Element",
    "OutboundMessage", "TextMessage", "ImageMessage", "QuickReplyMessage",
    "ButtonTemplate", "GenericTemplate", "ListTemplate",
    "InsightsReport", "TaggedNotification", "Reply",
    "IndicatorResult", "EventOutcome",
    "Participant", "Attachment", "InboundMessage", "MessagingEvent",
    "WebhookEntry", "WebhookPayload",
]

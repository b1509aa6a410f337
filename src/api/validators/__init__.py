"""
API Validators Package
Request models for the messaging endpoints.
"""

from .message_validators import (
    RecipientRequest,
    SendMessageRequest,
    SendImageRequest,
    SendQuickReplyRequest,
    SendButtonTemplateRequest,
    SendGenericTemplateRequest,
    SendListTemplateRequest,
    SendReactionRequest,
    SendNotificationRequest,
    MarkSeenRequest,
    TypingRequest,
)

__all__ = [
    "RecipientRequest",
    "SendMessageRequest",
    "SendImageRequest",
    "SendQuickReplyRequest",
    "SendButtonTemplateRequest",
    "SendGenericTemplateRequest",
    "SendListTemplateRequest",
    "SendReactionRequest",
    "SendNotificationRequest",
    "MarkSeenRequest",
    "TypingRequest",
]

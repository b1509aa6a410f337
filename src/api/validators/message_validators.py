"""
Message Validation Models
Pydantic models for request validation in the messaging endpoints.

Field names follow the camelCase wire format (``userId``, ``imageUrl``...);
the snake_case attribute names are accepted as well.
"""

from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field

from src.config.constants import (
    Platform,
    NotificationType,
    MessageTag,
    MAX_BUTTONS,
    MAX_QUICK_REPLIES,
    MAX_GENERIC_ELEMENTS,
    MIN_LIST_ELEMENTS,
    MAX_LIST_ELEMENTS,
)
from src.models.types import QuickReply, Button, Element


class RecipientRequest(BaseModel):
    """Base for requests addressed to one user"""
    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        json_schema_extra={"example": {"userId": "1234567890", "platform": "messenger"}}
    )

    user_id: str = Field(..., alias="userId", min_length=1, max_length=255)
    platform: Platform = Field(default=Platform.MESSENGER, description="Target platform")


class SendMessageRequest(RecipientRequest):
    """Plain text message"""
    message: str = Field(..., min_length=1, max_length=2000)


class SendImageRequest(RecipientRequest):
    """Image attachment by URL"""
    image_url: str = Field(..., alias="imageUrl", min_length=1)


class SendQuickReplyRequest(RecipientRequest):
    """Text with quick reply chips"""
    message: str = Field(..., min_length=1, max_length=2000)
    quick_replies: List[QuickReply] = Field(
        ..., alias="quickReplies", min_length=1, max_length=MAX_QUICK_REPLIES
    )


class SendButtonTemplateRequest(RecipientRequest):
    """Button template"""
    text: str = Field(..., min_length=1, max_length=640)
    buttons: List[Button] = Field(..., min_length=1, max_length=MAX_BUTTONS)


class SendGenericTemplateRequest(RecipientRequest):
    """Generic (carousel) template"""
    elements: List[Element] = Field(..., min_length=1, max_length=MAX_GENERIC_ELEMENTS)


class SendListTemplateRequest(RecipientRequest):
    """List template with an optional bottom button"""
    elements: List[Element] = Field(..., min_length=MIN_LIST_ELEMENTS, max_length=MAX_LIST_ELEMENTS)
    buttons: Optional[List[Button]] = Field(default=None, max_length=1)


class SendReactionRequest(RecipientRequest):
    """Reaction to a received message"""
    message_id: str = Field(..., alias="messageId", min_length=1)
    reaction: str = Field(..., min_length=1)


class SendNotificationRequest(RecipientRequest):
    """Tagged notification outside the response window"""
    message: str = Field(..., min_length=1, max_length=2000)
    notification_type: NotificationType = Field(
        default=NotificationType.REGULAR, alias="notificationType"
    )
    tag: MessageTag = Field(default=MessageTag.ACCOUNT_UPDATE)


class MarkSeenRequest(RecipientRequest):
    """Mark the conversation as seen"""


class TypingRequest(RecipientRequest):
    """Switch the typing indicator on or off"""
    typing: bool = Field(default=True)

"""
Common type definitions used across the application.

Outbound messages are modelled as one pydantic class per Send API message
kind. Each class validates its own required fields on construction and
renders the Graph ``message`` object through ``to_message()``.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.config.constants import (
    Platform,
    NotificationType,
    MessageTag,
    DEFAULT_INSIGHT_METRICS,
    MAX_BUTTONS,
    MAX_QUICK_REPLIES,
    MAX_GENERIC_ELEMENTS,
    MIN_LIST_ELEMENTS,
    MAX_LIST_ELEMENTS,
)


# ============================================================================
# BUILDING BLOCKS
# ============================================================================

class QuickReply(BaseModel):
    """Quick reply chip shown under a text message"""
    model_config = ConfigDict(frozen=True)

    content_type: str = Field(default="text")
    title: Optional[str] = Field(None, max_length=20)
    payload: Optional[str] = Field(None, max_length=1000)
    image_url: Optional[str] = None

    @model_validator(mode="after")
    def require_text_fields(self):
        if self.content_type == "text" and (not self.title or not self.payload):
            raise ValueError("text quick replies require title and payload")
        return self


class Button(BaseModel):
    """Template button"""
    model_config = ConfigDict(frozen=True)

    type: Literal["web_url", "postback", "phone_number", "account_link", "account_unlink"]
    title: Optional[str] = Field(None, max_length=20)
    url: Optional[str] = None
    payload: Optional[str] = Field(None, max_length=1000)
    webview_height_ratio: Optional[Literal["compact", "tall", "full"]] = None
    messenger_extensions: Optional[bool] = None
    fallback_url: Optional[str] = None

    @model_validator(mode="after")
    def require_target(self):
        if self.type in ("web_url", "account_link") and not self.url:
            raise ValueError(f"{self.type} buttons require url")
        if self.type in ("postback", "phone_number") and not self.payload:
            raise ValueError(f"{self.type} buttons require payload")
        if self.type not in ("account_link", "account_unlink") and not self.title:
            raise ValueError(f"{self.type} buttons require title")
        return self


class Element(BaseModel):
    """Card used by generic and list templates"""
    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1, max_length=80)
    subtitle: Optional[str] = Field(None, max_length=80)
    image_url: Optional[str] = None
    default_action: Optional[Dict[str, Any]] = None
    buttons: Optional[List[Button]] = Field(None, max_length=MAX_BUTTONS)


# ============================================================================
# OUTBOUND MESSAGE VARIANTS
# ============================================================================

class OutboundMessage(BaseModel):
    """Base for every outbound message kind"""
    model_config = ConfigDict(frozen=True)

    kind: str

    def to_message(self) -> Dict[str, Any]:
        """Render the Send API ``message`` object."""
        raise NotImplementedError


def _template(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {"attachment": {"type": "template", "payload": payload}}


class TextMessage(OutboundMessage):
    kind: Literal["text"] = "text"
    text: str = Field(..., min_length=1, max_length=2000)

    def to_message(self) -> Dict[str, Any]:
        return {"text": self.text}


class ImageMessage(OutboundMessage):
    kind: Literal["image"] = "image"
    url: str = Field(..., min_length=1)
    is_reusable: bool = False

    def to_message(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"url": self.url}
        if self.is_reusable:
            payload["is_reusable"] = True
        return {"attachment": {"type": "image", "payload": payload}}


class QuickReplyMessage(OutboundMessage):
    kind: Literal["quick_reply"] = "quick_reply"
    text: str = Field(..., min_length=1, max_length=2000)
    quick_replies: List[QuickReply] = Field(..., min_length=1, max_length=MAX_QUICK_REPLIES)

    def to_message(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "quick_replies": [qr.model_dump(exclude_none=True) for qr in self.quick_replies],
        }


class ButtonTemplate(OutboundMessage):
    kind: Literal["button"] = "button"
    text: str = Field(..., min_length=1, max_length=640)
    buttons: List[Button] = Field(..., min_length=1, max_length=MAX_BUTTONS)

    def to_message(self) -> Dict[str, Any]:
        return _template({
            "template_type": "button",
            "text": self.text,
            "buttons": [b.model_dump(exclude_none=True) for b in self.buttons],
        })


class GenericTemplate(OutboundMessage):
    kind: Literal["generic"] = "generic"
    elements: List[Element] = Field(..., min_length=1, max_length=MAX_GENERIC_ELEMENTS)

    def to_message(self) -> Dict[str, Any]:
        return _template({
            "template_type": "generic",
            "elements": [e.model_dump(exclude_none=True) for e in self.elements],
        })


class ListTemplate(OutboundMessage):
    kind: Literal["list"] = "list"
    elements: List[Element] = Field(..., min_length=MIN_LIST_ELEMENTS, max_length=MAX_LIST_ELEMENTS)
    buttons: Optional[List[Button]] = Field(None, max_length=1)
    top_element_style: Literal["compact", "large"] = "compact"

    def to_message(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "template_type": "list",
            "top_element_style": self.top_element_style,
            "elements": [e.model_dump(exclude_none=True) for e in self.elements],
        }
        if self.buttons:
            payload["buttons"] = [b.model_dump(exclude_none=True) for b in self.buttons]
        return _template(payload)


# ============================================================================
# REPLY ACTIONS NEEDING MORE THAN ONE SEND
# ============================================================================

class InsightsReport(OutboundMessage):
    """Fetch page insights and answer with a text summary"""
    kind: Literal["insights_report"] = "insights_report"
    metrics: Tuple[str, ...] = DEFAULT_INSIGHT_METRICS


class TaggedNotification(OutboundMessage):
    """Message sent with a policy tag outside the normal response window"""
    kind: Literal["tagged_notification"] = "tagged_notification"
    text: str = Field(..., min_length=1, max_length=2000)
    notification_type: NotificationType = NotificationType.REGULAR
    tag: MessageTag = MessageTag.ACCOUNT_UPDATE


Reply = Union[
    TextMessage,
    ImageMessage,
    QuickReplyMessage,
    ButtonTemplate,
    GenericTemplate,
    ListTemplate,
    InsightsReport,
    TaggedNotification,
]


# ============================================================================
# PROCESSING RESULTS
# ============================================================================

@dataclass(frozen=True)
class IndicatorResult:
    """Outcome of a best-effort sender action (seen / typing)."""
    action: str
    ok: bool
    error: Optional[Exception] = None


@dataclass
class EventOutcome:
    """What happened while handling one inbound messaging event."""
    platform: Platform
    sender_id: str
    rule: Optional[str] = None
    reply_kind: Optional[str] = None
    indicators: List[IndicatorResult] = field(default_factory=list)
    reply_error: Optional[Exception] = None
    fallback_sent: bool = False

    @property
    def replied(self) -> bool:
        return self.reply_kind is not None and self.reply_error is None

"""
Application constants and enumerations.

This module defines all constant values, enumerations, and
configuration defaults used throughout the Messenger Relay.
"""

from enum import Enum
from typing import Dict, Tuple

# Service Information
SERVICE_NAME = "messenger-relay"
SERVICE_VERSION = "2.0.0"
SERVICE_DESCRIPTION = "Webhook-driven relay for the Messenger and Instagram messaging APIs"

# Graph API Defaults
GRAPH_API_DOMAIN = "graph.facebook.com"
GRAPH_API_VERSION = "v18.0"
DEFAULT_TIMEOUT_SECONDS = 30.0

# Webhook Protocol
WEBHOOK_PATH = "/webhook"
WEBHOOK_SUBSCRIBE_MODE = "subscribe"
WEBHOOK_ACK_BODY = "EVENT_RECEIVED"
SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="


class Platform(str, Enum):
    """Messaging surfaces served by the relay."""
    MESSENGER = "messenger"
    INSTAGRAM = "instagram"


# Webhook "object" discriminator -> platform
WEBHOOK_OBJECTS: Dict[str, Platform] = {
    "page": Platform.MESSENGER,
    "instagram": Platform.INSTAGRAM,
}


class SenderAction(str, Enum):
    """Send API sender actions."""
    MARK_SEEN = "mark_seen"
    TYPING_ON = "typing_on"
    TYPING_OFF = "typing_off"
    REACT = "react"


class MessagingType(str, Enum):
    """Send API messaging types."""
    RESPONSE = "RESPONSE"
    UPDATE = "UPDATE"
    MESSAGE_TAG = "MESSAGE_TAG"


class NotificationType(str, Enum):
    """Push notification behaviour for outbound messages."""
    REGULAR = "REGULAR"
    SILENT_PUSH = "SILENT_PUSH"
    NO_PUSH = "NO_PUSH"


class MessageTag(str, Enum):
    """Policy tags allowing messages outside the standard response window."""
    ACCOUNT_UPDATE = "ACCOUNT_UPDATE"
    CONFIRMED_EVENT_UPDATE = "CONFIRMED_EVENT_UPDATE"
    POST_PURCHASE_UPDATE = "POST_PURCHASE_UPDATE"
    HUMAN_AGENT = "HUMAN_AGENT"


class AttachmentType(str, Enum):
    """Inbound attachment types recognised by the reply rules."""
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    FILE = "file"


# Default Graph field selections
USER_PROFILE_FIELDS = "id,name,first_name,last_name,profile_pic"
CONVERSATION_FIELDS = "id,participants,updated_time"
CONVERSATION_MESSAGE_FIELDS = "id,messages{id,from,to,message,created_time}"
MESSAGE_DETAIL_FIELDS = "id,to,from,message,created_time,attachments"
DEFAULT_INSIGHT_METRICS: Tuple[str, ...] = ("messages_received", "messages_sent")
INSIGHTS_PERIOD = "day"

# Template limits enforced by the Send API
MAX_BUTTONS = 3
MAX_QUICK_REPLIES = 13
MAX_GENERIC_ELEMENTS = 10
MIN_LIST_ELEMENTS = 2
MAX_LIST_ELEMENTS = 4


# Error Categories
class ErrorCategory(str, Enum):
    """Error categorization for monitoring."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    AUTHORIZATION = "authorization"
    INTERNAL = "internal"
    EXTERNAL = "external"
    NETWORK = "network"


# HTTP Status Code Mappings
HTTP_STATUS_CODES = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.AUTHORIZATION: 403,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.INTERNAL: 500,
    ErrorCategory.EXTERNAL: 500,
    ErrorCategory.NETWORK: 500,
}

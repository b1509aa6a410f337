"""
Processors package for inbound message handling.

This package selects automatic replies for inbound messages and sends them
through a platform channel.
"""

from src.core.processors.reply_rules import (
    ReplyRule,
    MESSENGER_RULES,
    INSTAGRAM_RULES,
    select_reply,
    select_text_reply,
    select_attachment_reply,
)
from src.core.processors.reply_dispatcher import (
    dispatch_reply,
    format_insights_summary,
)

__all__ = [
    # Reply selection
    "ReplyRule",
    "MESSENGER_RULES",
    "INSTAGRAM_RULES",
    "select_reply",
    "select_text_reply",
    "select_attachment_reply",

    # Reply delivery
    "dispatch_reply",
    "format_insights_summary",
]

"""
Delivery of selected replies through a platform channel.

Most replies map to a single Send API call. Insights reports fetch page
metrics first and answer with a text summary; tagged notifications go out
with a message tag. Both answer with an apology text when their primary
call fails.
"""

from typing import Any, Dict, Optional, Sequence

import structlog

from src.core.channels.messenger_channel import MessengerChannel
from src.core.processors.reply_rules import (
    INSIGHTS_UNAVAILABLE_TEXT,
    NOTIFICATION_UNAVAILABLE_TEXT,
)
from src.exceptions.channel_exceptions import ClientError
from src.models.types import (
    Reply,
    TextMessage,
    ImageMessage,
    QuickReplyMessage,
    ButtonTemplate,
    GenericTemplate,
    ListTemplate,
    InsightsReport,
    TaggedNotification,
)

logger = structlog.get_logger(__name__)

METRIC_LABELS = {
    "messages_received": "📨 Messages Received",
    "messages_sent": "📤 Messages Sent",
}
MISSING_VALUE = "N/A"


def _metric_value(insights: Dict[str, Any], metric: str, index: int) -> Any:
    data = insights.get("data") or []
    entry: Optional[Dict[str, Any]] = next(
        (item for item in data if isinstance(item, dict) and item.get("name") == metric),
        None
    )
    if entry is None and index < len(data) and isinstance(data[index], dict):
        entry = data[index]
    if entry is None:
        return MISSING_VALUE

    values = entry.get("values") or []
    if not values or not isinstance(values[0], dict) or values[0].get("value") is None:
        return MISSING_VALUE
    return values[0]["value"]


def format_insights_summary(insights: Dict[str, Any], metrics: Sequence[str]) -> str:
    """
    Render page insights as a chat message.

    Values are looked up by metric name, then by position; anything
    missing is shown as N/A.
    """
    lines = ["📊 Here are your page insights:", ""]
    for index, metric in enumerate(metrics):
        label = METRIC_LABELS.get(metric, metric.replace("_", " ").title())
        lines.append(f"{label}: {_metric_value(insights, metric, index)}")
    return "\n".join(lines)


async def dispatch_reply(
        channel: MessengerChannel,
        recipient_id: str,
        reply: Reply
) -> Dict[str, Any]:
    """
    Send ``reply`` to ``recipient_id``.

    Args:
        channel: Channel of the platform the message arrived on
        recipient_id: Sender of the inbound message
        reply: Reply chosen by the reply rules

    Returns:
        Graph API result of the last send

    Raises:
        ClientError: The reply (or its apology text) could not be sent
    """
    if isinstance(reply, InsightsReport):
        try:
            insights = await channel.get_page_insights(reply.metrics)
        except ClientError as e:
            logger.error(
                "Failed to get page insights",
                platform=channel.platform.value,
                error=str(e),
                error_type=e.error_type
            )
            return await channel.send_text_message(recipient_id, INSIGHTS_UNAVAILABLE_TEXT)

        summary = format_insights_summary(insights, reply.metrics)
        return await channel.send_text_message(recipient_id, summary)

    if isinstance(reply, TaggedNotification):
        try:
            return await channel.send_tagged_notification(
                recipient_id,
                reply.text,
                notification_type=reply.notification_type,
                tag=reply.tag
            )
        except ClientError as e:
            logger.error(
                "Failed to send tagged notification",
                platform=channel.platform.value,
                error=str(e),
                error_type=e.error_type
            )
            return await channel.send_text_message(recipient_id, NOTIFICATION_UNAVAILABLE_TEXT)

    if isinstance(reply, TextMessage):
        return await channel.send_text_message(recipient_id, reply.text)
    if isinstance(reply, ImageMessage):
        return await channel.send_image(recipient_id, reply.url)
    if isinstance(reply, QuickReplyMessage):
        return await channel.send_quick_replies(recipient_id, reply.text, reply.quick_replies)
    if isinstance(reply, ButtonTemplate):
        return await channel.send_button_template(recipient_id, reply.text, reply.buttons)
    if isinstance(reply, GenericTemplate):
        return await channel.send_generic_template(recipient_id, reply.elements)
    if isinstance(reply, ListTemplate):
        return await channel.send_list_template(recipient_id, reply.elements, reply.buttons)

    return await channel.send_message(recipient_id, reply)

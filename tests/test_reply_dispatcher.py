"""Reply dispatch tests."""

import pytest

from src.config.constants import MessageTag, NotificationType
from src.core.processors.reply_dispatcher import dispatch_reply, format_insights_summary
from src.core.processors.reply_rules import (
    INSIGHTS_UNAVAILABLE_TEXT,
    NOTIFICATION_UNAVAILABLE_TEXT,
)
from src.exceptions.channel_exceptions import RemoteApiError, TransportError
from src.models.types import (
    TextMessage,
    ImageMessage,
    ListTemplate,
    Element,
    InsightsReport,
    TaggedNotification,
)

INSIGHTS = {
    "data": [
        {"name": "messages_received", "values": [{"value": 12}]},
        {"name": "messages_sent", "values": [{"value": 7}]},
    ]
}


class TestInsightsSummary:
    """Text rendering of page insights."""

    def test_values_by_name(self):
        summary = format_insights_summary(INSIGHTS, ("messages_received", "messages_sent"))

        assert summary == (
            "📊 Here are your page insights:\n\n"
            "📨 Messages Received: 12\n"
            "📤 Messages Sent: 7"
        )

    def test_missing_values_shown_as_na(self):
        summary = format_insights_summary({"data": []}, ("messages_received", "messages_sent"))

        assert summary.endswith("📨 Messages Received: N/A\n📤 Messages Sent: N/A")

    def test_zero_is_a_value(self):
        insights = {"data": [{"name": "messages_received", "values": [{"value": 0}]}]}

        summary = format_insights_summary(insights, ("messages_received",))

        assert summary.endswith("Messages Received: 0")

    def test_unnamed_entries_fall_back_to_position(self):
        insights = {"data": [{"values": [{"value": 3}]}, {"values": [{"value": 4}]}]}

        summary = format_insights_summary(insights, ("messages_received", "messages_sent"))

        assert "Messages Received: 3" in summary
        assert "Messages Sent: 4" in summary


class TestDispatchReply:
    """Each reply kind maps onto its client operation."""

    @pytest.mark.asyncio
    async def test_text(self, messenger_channel):
        await dispatch_reply(messenger_channel, "42", TextMessage(text="Hi"))

        messenger_channel.send_text_message.assert_awaited_once_with("42", "Hi")

    @pytest.mark.asyncio
    async def test_image(self, messenger_channel):
        await dispatch_reply(messenger_channel, "42", ImageMessage(url="https://example.com/a.png"))

        messenger_channel.send_image.assert_awaited_once_with("42", "https://example.com/a.png")

    @pytest.mark.asyncio
    async def test_list(self, messenger_channel):
        reply = ListTemplate(elements=[Element(title="A"), Element(title="B")])

        await dispatch_reply(messenger_channel, "42", reply)

        messenger_channel.send_list_template.assert_awaited_once_with("42", reply.elements, None)

    @pytest.mark.asyncio
    async def test_insights_report(self, messenger_channel):
        messenger_channel.get_page_insights.return_value = INSIGHTS

        await dispatch_reply(messenger_channel, "42", InsightsReport())

        messenger_channel.get_page_insights.assert_awaited_once_with(("messages_received", "messages_sent"))
        text = messenger_channel.send_text_message.await_args.args[1]
        assert "Messages Received: 12" in text

    @pytest.mark.asyncio
    async def test_insights_failure_sends_apology(self, messenger_channel):
        messenger_channel.get_page_insights.side_effect = RemoteApiError({"message": "Unsupported metric"})

        await dispatch_reply(messenger_channel, "42", InsightsReport())

        messenger_channel.send_text_message.assert_awaited_once_with("42", INSIGHTS_UNAVAILABLE_TEXT)

    @pytest.mark.asyncio
    async def test_tagged_notification(self, messenger_channel):
        await dispatch_reply(messenger_channel, "42", TaggedNotification(text="Update"))

        messenger_channel.send_tagged_notification.assert_awaited_once_with(
            "42", "Update",
            notification_type=NotificationType.REGULAR,
            tag=MessageTag.ACCOUNT_UPDATE
        )

    @pytest.mark.asyncio
    async def test_notification_failure_sends_apology(self, messenger_channel):
        messenger_channel.send_tagged_notification.side_effect = TransportError("down")

        await dispatch_reply(messenger_channel, "42", TaggedNotification(text="Update"))

        messenger_channel.send_text_message.assert_awaited_once_with("42", NOTIFICATION_UNAVAILABLE_TEXT)

    @pytest.mark.asyncio
    async def test_send_failure_propagates(self, messenger_channel):
        messenger_channel.send_text_message.side_effect = TransportError("down")

        with pytest.raises(TransportError):
            await dispatch_reply(messenger_channel, "42", TextMessage(text="Hi"))

"""
Webhook Endpoint Tests

Covers the subscription handshake and delivery processing, with the Graph
API clients replaced by mocks.
"""

import hashlib
import hmac
import json
from unittest.mock import call

import pytest

from src.config.constants import Platform
from src.core.processors.reply_rules import (
    GREETING_TEXT,
    FALLBACK_TEXT,
    INSTAGRAM_GREETING_TEXT,
)
from src.exceptions.channel_exceptions import TransportError, HttpStatusError
from src.models.schemas.webhook_schemas import MessagingEvent
from src.services.webhook_service import WebhookService

VERIFY_TOKEN = "verify-me"
APP_SECRET = "app-secret"


def messaging_event(sender_id="42", text="hello", **message):
    message.setdefault("mid", "m_1")
    if text is not None:
        message["text"] = text
    return {
        "sender": {"id": sender_id},
        "recipient": {"id": "PAGE123"},
        "timestamp": 1700000000000,
        "message": message,
    }


def delivery(*events, obj="page"):
    return {
        "object": obj,
        "entry": [{"id": "PAGE123", "time": 1700000000000, "messaging": list(events)}],
    }


def sign(body: bytes, secret: str = APP_SECRET) -> str:
    return "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


class TestWebhookVerification:
    """GET /webhook subscription handshake."""

    def test_challenge_echoed(self, client):
        response = client.get("/webhook", params={
            "hub.mode": "subscribe",
            "hub.verify_token": VERIFY_TOKEN,
            "hub.challenge": "CHALLENGE_ACCEPTED",
        })

        assert response.status_code == 200
        assert response.text == "CHALLENGE_ACCEPTED"
        assert response.headers["content-type"].startswith("text/plain")

    def test_missing_challenge_returns_empty_body(self, client):
        response = client.get("/webhook", params={
            "hub.mode": "subscribe",
            "hub.verify_token": VERIFY_TOKEN,
        })

        assert response.status_code == 200
        assert response.text == ""

    def test_wrong_token_forbidden(self, client):
        response = client.get("/webhook", params={
            "hub.mode": "subscribe",
            "hub.verify_token": "wrong",
            "hub.challenge": "X",
        })

        assert response.status_code == 403
        assert response.text == "Forbidden"

    def test_wrong_mode_forbidden(self, client):
        response = client.get("/webhook", params={
            "hub.mode": "unsubscribe",
            "hub.verify_token": VERIFY_TOKEN,
        })

        assert response.status_code == 403

    def test_missing_parameters_bad_request(self, client):
        response = client.get("/webhook", params={"hub.challenge": "X"})

        assert response.status_code == 400
        assert response.text == "Bad Request"

    def test_unconfigured_verify_token_forbidden(self, client_factory):
        client = client_factory(VERIFY_TOKEN=None)

        response = client.get("/webhook", params={
            "hub.mode": "subscribe",
            "hub.verify_token": "anything",
        })

        assert response.status_code == 403


class TestWebhookDelivery:
    """POST /webhook event processing."""

    def test_greeting_reply_sequence(self, client, messenger_channel):
        """Seen, typing on, reply, typing off, in that order."""
        response = client.post("/webhook", json=delivery(messaging_event(text="hello")))

        assert response.status_code == 200
        assert response.text == "EVENT_RECEIVED"
        assert messenger_channel.mock_calls == [
            call.mark_seen("42"),
            call.send_typing_indicator("42", True),
            call.send_text_message("42", GREETING_TEXT),
            call.send_typing_indicator("42", False),
        ]

    def test_minimal_greeting_delivery(self, client, messenger_channel):
        body = {
            "object": "page",
            "entry": [{"id": "1", "time": 1, "messaging": [{"sender": {"id": "42"}, "message": {"text": "Hi"}}]}],
        }

        response = client.post("/webhook", json=body)

        assert response.status_code == 200
        assert response.text == "EVENT_RECEIVED"
        assert messenger_channel.mock_calls == [
            call.mark_seen("42"),
            call.send_typing_indicator("42", True),
            call.send_text_message("42", GREETING_TEXT),
            call.send_typing_indicator("42", False),
        ]

    def test_instagram_delivery_uses_instagram_channel(self, client, messenger_channel, instagram_channel):
        response = client.post("/webhook", json=delivery(messaging_event(text="hi"), obj="instagram"))

        assert response.status_code == 200
        instagram_channel.send_text_message.assert_awaited_once_with("42", INSTAGRAM_GREETING_TEXT)
        assert messenger_channel.mock_calls == []

    def test_only_first_event_per_entry(self, client, messenger_channel):
        body = delivery(messaging_event(sender_id="1"), messaging_event(sender_id="2"))

        client.post("/webhook", json=body)

        messenger_channel.send_text_message.assert_awaited_once_with("1", GREETING_TEXT)

    def test_every_entry_processed(self, client, messenger_channel):
        body = delivery(messaging_event(sender_id="1"))
        body["entry"].append({"id": "PAGE123", "messaging": [messaging_event(sender_id="2")]})

        client.post("/webhook", json=body)

        assert messenger_channel.send_text_message.await_count == 2

    def test_empty_messaging_skipped(self, client, messenger_channel):
        response = client.post("/webhook", json=delivery())

        assert response.status_code == 200
        assert response.text == "EVENT_RECEIVED"
        assert messenger_channel.mock_calls == []

    def test_echo_skipped(self, client, messenger_channel):
        response = client.post("/webhook", json=delivery(messaging_event(is_echo=True)))

        assert response.status_code == 200
        assert messenger_channel.mock_calls == []

    def test_attachment_reply(self, client, messenger_channel):
        event = messaging_event(text=None, attachments=[{"type": "image", "payload": {"url": "u"}}])

        client.post("/webhook", json=delivery(event))

        text = messenger_channel.send_text_message.await_args.args[1]
        assert "image" in text

    def test_unknown_object_not_found(self, client, messenger_channel):
        response = client.post("/webhook", json=delivery(messaging_event(), obj="user"))

        assert response.status_code == 404
        assert response.text == "Not Found"
        assert messenger_channel.mock_calls == []

    def test_non_json_body_not_found(self, client):
        response = client.post(
            "/webhook", content=b"not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 404

    def test_malformed_entry_is_server_error(self, client, messenger_channel):
        response = client.post("/webhook", json={"object": "page", "entry": [{"id": "PAGE123"}]})

        assert response.status_code == 500
        assert response.json()["errorType"] == "PayloadDecodeError"
        assert messenger_channel.mock_calls == []

    def test_malformed_later_event_ignored(self, client, messenger_channel):
        body = {
            "object": "page",
            "entry": [{"id": "1", "messaging": [
                {"sender": {"id": "42"}, "message": {"text": "hello"}},
                {"delivery": {"mids": ["x"]}},
            ]}],
        }

        response = client.post("/webhook", json=body)

        assert response.status_code == 200
        messenger_channel.send_text_message.assert_awaited_once_with("42", GREETING_TEXT)

    def test_entry_id_optional(self, client, messenger_channel):
        body = {"object": "page", "entry": [{"messaging": [messaging_event()]}]}

        response = client.post("/webhook", json=body)

        assert response.status_code == 200
        messenger_channel.send_text_message.assert_awaited_once_with("42", GREETING_TEXT)

    def test_earlier_entries_answered_before_malformed_entry(self, client, messenger_channel):
        body = delivery(messaging_event(sender_id="1"))
        body["entry"].append({"id": "PAGE123", "messaging": [{"message": {"text": "hi"}}]})

        response = client.post("/webhook", json=body)

        assert response.status_code == 500
        error = response.json()
        assert error["errorType"] == "PayloadDecodeError"
        assert error["details"]["decode_errors"][0]["loc"] == "entry.1.sender"
        messenger_channel.send_text_message.assert_awaited_once_with("1", GREETING_TEXT)

    def test_indicator_failures_ignored(self, client, messenger_channel):
        messenger_channel.mark_seen.side_effect = TransportError("down")
        messenger_channel.send_typing_indicator.side_effect = HttpStatusError(400)

        response = client.post("/webhook", json=delivery(messaging_event()))

        assert response.status_code == 200
        messenger_channel.send_text_message.assert_awaited_once_with("42", GREETING_TEXT)
        assert messenger_channel.send_typing_indicator.await_count == 2

    def test_reply_failure_sends_fallback(self, client, messenger_channel):
        messenger_channel.send_text_message.side_effect = [
            TransportError("down"),
            {"recipient_id": "42", "message_id": "mid.2"},
        ]

        response = client.post("/webhook", json=delivery(messaging_event()))

        assert response.status_code == 200
        assert messenger_channel.send_text_message.await_args_list == [
            call("42", GREETING_TEXT),
            call("42", FALLBACK_TEXT),
        ]
        assert messenger_channel.mock_calls[-1] == call.send_typing_indicator("42", False)

    def test_fallback_failure_still_acknowledged(self, client, messenger_channel):
        messenger_channel.send_text_message.side_effect = TransportError("down")

        response = client.post("/webhook", json=delivery(messaging_event()))

        assert response.status_code == 200
        assert response.text == "EVENT_RECEIVED"
        assert messenger_channel.send_text_message.await_count == 2


class TestWebhookSignature:
    """X-Hub-Signature-256 checks when an app secret is configured."""

    def test_valid_signature_accepted(self, client_factory, messenger_channel):
        client = client_factory(APP_SECRET=APP_SECRET)
        body = json.dumps(delivery(messaging_event())).encode()

        response = client.post("/webhook", content=body, headers={
            "Content-Type": "application/json",
            "X-Hub-Signature-256": sign(body),
        })

        assert response.status_code == 200
        messenger_channel.send_text_message.assert_awaited_once()

    def test_invalid_signature_forbidden(self, client_factory, messenger_channel):
        client = client_factory(APP_SECRET=APP_SECRET)
        body = json.dumps(delivery(messaging_event())).encode()

        response = client.post("/webhook", content=body, headers={
            "Content-Type": "application/json",
            "X-Hub-Signature-256": sign(body, secret="other"),
        })

        assert response.status_code == 403
        assert response.text == "Forbidden"
        assert messenger_channel.mock_calls == []

    def test_missing_header_accepted(self, client_factory):
        client = client_factory(APP_SECRET=APP_SECRET)

        response = client.post("/webhook", json=delivery())

        assert response.status_code == 200

    def test_header_ignored_without_secret(self, client):
        response = client.post(
            "/webhook", json=delivery(), headers={"X-Hub-Signature-256": "sha256=bogus"}
        )

        assert response.status_code == 200


class TestEventOutcome:
    """Per-event outcome returned by the webhook service."""

    @pytest.mark.asyncio
    async def test_indicator_failure_recorded(self, registry, settings, messenger_channel):
        messenger_channel.mark_seen.side_effect = TransportError("down")
        service = WebhookService(registry, settings)

        outcome = await service.process_event(
            Platform.MESSENGER, MessagingEvent.model_validate(messaging_event())
        )

        assert [(i.action, i.ok) for i in outcome.indicators] == [
            ("mark_seen", False), ("typing_on", True), ("typing_off", True)
        ]
        assert outcome.rule == "greeting"
        assert outcome.replied
        assert not outcome.fallback_sent

    @pytest.mark.asyncio
    async def test_fallback_recorded(self, registry, settings, messenger_channel):
        messenger_channel.send_quick_replies.side_effect = TransportError("down")
        service = WebhookService(registry, settings)

        outcome = await service.process_event(
            Platform.MESSENGER, MessagingEvent.model_validate(messaging_event(text="help"))
        )

        assert outcome.reply_kind == "quick_reply"
        assert isinstance(outcome.reply_error, TransportError)
        assert not outcome.replied
        assert outcome.fallback_sent
        messenger_channel.send_text_message.assert_awaited_once_with("42", FALLBACK_TEXT)

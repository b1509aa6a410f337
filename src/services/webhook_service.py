"""
Webhook Service Implementation
=============================

Handles the Messenger / Instagram webhook protocol: the subscription
handshake, delivery signature checks and processing of inbound messaging
events into automatic replies.
"""

from typing import Optional, Dict, Any, List, Tuple, Callable, Awaitable

from pydantic import ValidationError as PydanticValidationError

from src.config.constants import (
    Platform,
    SenderAction,
    WEBHOOK_OBJECTS,
    WEBHOOK_SUBSCRIBE_MODE,
)
from src.config.settings import Settings
from src.core.channels.channel_factory import ChannelRegistry
from src.core.channels.messenger_channel import MessengerChannel
from src.core.processors.reply_dispatcher import dispatch_reply
from src.core.processors.reply_rules import select_reply, FALLBACK_TEXT
from src.exceptions.base_exceptions import PayloadDecodeError
from src.models.schemas.webhook_schemas import WebhookPayload, WebhookEntry, MessagingEvent
from src.models.types import IndicatorResult, EventOutcome
from src.services.base_service import BaseService
from src.utils.security import verify_signature


class WebhookService(BaseService):
    """Service for webhook verification and delivery processing"""

    def __init__(self, registry: ChannelRegistry, settings: Settings):
        super().__init__()
        self.registry = registry
        self.settings = settings

    # ------------------------------------------------------------------
    # Subscription handshake
    # ------------------------------------------------------------------

    def verify_subscription(
            self,
            mode: Optional[str],
            token: Optional[str],
            challenge: Optional[str]
    ) -> Tuple[int, str]:
        """
        Answer the platform's subscription verification request.

        Args:
            mode: ``hub.mode`` query value
            token: ``hub.verify_token`` query value
            challenge: ``hub.challenge`` query value

        Returns:
            Tuple of (HTTP status, plain-text body)
        """
        if not mode or not token:
            self.logger.warning("Webhook verification missing parameters", mode=mode)
            return 400, "Bad Request"

        if (
                mode == WEBHOOK_SUBSCRIBE_MODE
                and self.settings.VERIFY_TOKEN
                and token == self.settings.VERIFY_TOKEN
        ):
            self.log_operation("webhook_verified")
            return 200, challenge or ""

        self.logger.warning("Webhook verification failed", mode=mode)
        return 403, "Forbidden"

    def check_signature(self, raw_body: bytes, signature: Optional[str]) -> bool:
        """
        Check the delivery signature header.

        Only enforced when an app secret is configured and the header is
        present; otherwise the delivery is accepted.
        """
        if not self.settings.APP_SECRET:
            if signature:
                self.logger.debug("Signature header present but APP_SECRET not configured")
            return True

        if not signature:
            self.logger.warning("Webhook delivery without signature header")
            return True

        if verify_signature(self.settings.APP_SECRET, raw_body, signature):
            return True

        self.logger.warning("Webhook signature mismatch")
        return False

    # ------------------------------------------------------------------
    # Deliveries
    # ------------------------------------------------------------------

    @staticmethod
    def resolve_platform(body: Any) -> Optional[Platform]:
        """Platform named by the delivery's ``object`` field, if supported."""
        if not isinstance(body, dict):
            return None
        obj = body.get("object")
        if not isinstance(obj, str):
            return None
        return WEBHOOK_OBJECTS.get(obj)

    def decode_payload(self, body: Dict[str, Any]) -> WebhookPayload:
        """
        Decode the delivery envelope. Entries are decoded later, one by one.

        Raises:
            PayloadDecodeError: ``object`` or ``entry`` is missing or malformed
        """
        try:
            return WebhookPayload.model_validate(body)
        except PydanticValidationError as e:
            raise PayloadDecodeError(errors=self._decode_errors(e)) from e

    def decode_event(self, index: int, raw_entry: Any) -> Optional[MessagingEvent]:
        """
        Decode the first messaging event of one entry.

        Returns:
            The event, or None when the entry has no events

        Raises:
            PayloadDecodeError: The entry or its first event is malformed
        """
        try:
            return WebhookEntry.model_validate(raw_entry).first_event()
        except PydanticValidationError as e:
            raise PayloadDecodeError(
                errors=self._decode_errors(e, prefix=f"entry.{index}")
            ) from e

    @staticmethod
    def _decode_errors(error: PydanticValidationError, prefix: str = "") -> List[Dict[str, str]]:
        errors = []
        for detail in error.errors():
            loc = ".".join(str(part) for part in detail["loc"])
            if prefix:
                loc = f"{prefix}.{loc}" if loc else prefix
            errors.append({"loc": loc, "msg": detail["msg"]})
        return errors

    async def handle_delivery(self, platform: Platform, body: Dict[str, Any]) -> List[EventOutcome]:
        """
        Process one webhook delivery.

        Only the first messaging event of every entry is handled. Entries
        without events and echoes of the page's own messages are skipped.
        Entries are handled in order, so a malformed entry fails the
        delivery only after every entry before it has been answered.

        Args:
            platform: Platform resolved from the delivery's ``object`` field
            body: Decoded JSON body

        Returns:
            Outcome of every processed event

        Raises:
            PayloadDecodeError: The envelope or an entry could not be decoded
        """
        payload = self.decode_payload(body)
        outcomes = []

        for index, raw_entry in enumerate(payload.entry):
            event = self.decode_event(index, raw_entry)
            if event is None:
                self.logger.debug("Skipping entry without messaging events", entry=index)
                continue
            if event.message is not None and event.message.is_echo:
                self.logger.debug("Skipping echo event", entry=index)
                continue

            outcomes.append(await self.process_event(platform, event))

        self.log_operation(
            "webhook_delivery",
            platform=platform,
            entries=len(payload.entry),
            processed=len(outcomes),
            replied=sum(1 for outcome in outcomes if outcome.replied)
        )
        return outcomes

    async def process_event(self, platform: Platform, event: MessagingEvent) -> EventOutcome:
        """
        Reply to a single messaging event.

        The sequence is mark seen, typing on, reply, typing off. Indicator
        failures are recorded and ignored. A failed reply is followed by one
        fallback text whose own failure is only logged.
        """
        channel = self.registry.get(platform)
        sender_id = event.sender.id
        outcome = EventOutcome(platform=platform, sender_id=sender_id)

        outcome.indicators.append(await self._best_effort(
            SenderAction.MARK_SEEN, platform, sender_id,
            lambda: channel.mark_seen(sender_id)
        ))
        outcome.indicators.append(await self._best_effort(
            SenderAction.TYPING_ON, platform, sender_id,
            lambda: channel.send_typing_indicator(sender_id, True)
        ))

        try:
            rule, reply = select_reply(event.message, platform)
            outcome.rule = rule
            outcome.reply_kind = reply.kind
            await dispatch_reply(channel, sender_id, reply)
            self.log_operation("reply_sent", platform=platform, user_id=sender_id, rule=rule)
        except Exception as e:
            outcome.reply_error = e
            self.log_failure(e, "reply", platform=platform, user_id=sender_id, rule=outcome.rule)
            outcome.fallback_sent = await self._send_fallback(channel, sender_id)

        outcome.indicators.append(await self._best_effort(
            SenderAction.TYPING_OFF, platform, sender_id,
            lambda: channel.send_typing_indicator(sender_id, False)
        ))
        return outcome

    async def _best_effort(
            self,
            action: SenderAction,
            platform: Platform,
            sender_id: str,
            call: Callable[[], Awaitable[Any]]
    ) -> IndicatorResult:
        try:
            await call()
            return IndicatorResult(action=action.value, ok=True)
        except Exception as e:
            self.logger.warning(
                "Sender action failed, continuing",
                action=action.value,
                platform=platform.value,
                user_id=sender_id,
                error=str(e),
                error_type=getattr(e, "error_type", type(e).__name__)
            )
            return IndicatorResult(action=action.value, ok=False, error=e)

    async def _send_fallback(self, channel: MessengerChannel, sender_id: str) -> bool:
        try:
            await channel.send_text_message(sender_id, FALLBACK_TEXT)
            return True
        except Exception as e:
            self.log_failure(e, "fallback_reply", platform=channel.platform, user_id=sender_id)
            return False

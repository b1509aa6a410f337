"""
Facebook Messenger / Instagram channel via the Graph API.

One instance serves one platform. Every operation issues exactly one HTTP
call against ``https://{domain}/{version}/{endpoint}`` with the page access
token attached, and either returns the decoded JSON body or raises one of
TransportError, HttpStatusError or RemoteApiError. There are no retries.
"""

import time
from typing import Dict, Any, Optional, Sequence, Union

import httpx

from src.core.channels.base_channel import ChannelConfig, ChannelObserver
from src.config.constants import (
    Platform,
    SenderAction,
    MessagingType,
    NotificationType,
    MessageTag,
    USER_PROFILE_FIELDS,
    CONVERSATION_FIELDS,
    CONVERSATION_MESSAGE_FIELDS,
    MESSAGE_DETAIL_FIELDS,
    DEFAULT_INSIGHT_METRICS,
    INSIGHTS_PERIOD,
)
from src.exceptions.base_exceptions import ConfigurationError
from src.exceptions.channel_exceptions import (
    TransportError,
    HttpStatusError,
    RemoteApiError,
)
from src.models.types import (
    OutboundMessage,
    TextMessage,
    ImageMessage,
    QuickReplyMessage,
    ButtonTemplate,
    GenericTemplate,
    ListTemplate,
    TaggedNotification,
    QuickReply,
    Button,
    Element,
)

JsonDict = Dict[str, Any]


class MessengerChannel:
    """Graph API client for one messaging platform."""

    def __init__(
            self,
            config: ChannelConfig,
            http_client: Optional[httpx.AsyncClient] = None,
            observer: Optional[ChannelObserver] = None
    ):
        self.config = config
        self.observer = observer or ChannelObserver()
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            timeout=config.timeout_seconds,
            headers={
                "Content-Type": "application/json",
                "User-Agent": f"MessengerRelay/2.0 {config.platform.value}"
            }
        )

    @property
    def platform(self) -> Platform:
        return self.config.platform

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _send_api_request(
            self,
            endpoint: str,
            parameters: JsonDict,
            method: str = "GET"
    ) -> JsonDict:
        """
        Issue one authenticated Graph API call.

        Args:
            endpoint: Path below the versioned base URL
            parameters: Query parameters (GET) or JSON body (POST)
            method: "GET" or "POST"

        Returns:
            Decoded JSON response body

        Raises:
            TransportError: The call could not complete or the body is not JSON
            HttpStatusError: Non-2xx HTTP status
            RemoteApiError: Body carries an ``error`` object
        """
        payload = dict(parameters)
        payload["access_token"] = self.config.access_token
        url = f"{self.config.api_base_url}/{endpoint}"

        self.observer.on_request(self.platform, method, endpoint)
        started = time.monotonic()

        try:
            if method == "GET":
                response = await self.http_client.get(url, params=payload)
            else:
                response = await self.http_client.post(url, json=payload)
        except httpx.HTTPError as e:
            error = TransportError(
                f"Graph API request failed: {e}" if str(e) else "Graph API request failed",
                platform=self.platform.value,
                endpoint=endpoint,
                caused_by=e
            )
            self.observer.on_error(self.platform, method, endpoint, error, self._elapsed_ms(started))
            raise error from e

        try:
            self._raise_for_response(response, endpoint)
        except (TransportError, HttpStatusError, RemoteApiError) as error:
            self.observer.on_error(self.platform, method, endpoint, error, self._elapsed_ms(started))
            raise

        self.observer.on_response(
            self.platform, method, endpoint, response.status_code, self._elapsed_ms(started)
        )
        return response.json()

    def _raise_for_response(self, response: httpx.Response, endpoint: str) -> None:
        try:
            body = response.json()
        except ValueError:
            body = None

        remote_error = body.get("error") if isinstance(body, dict) else None
        if remote_error is not None and not isinstance(remote_error, dict):
            remote_error = {"message": str(remote_error)}

        if not response.is_success:
            message = f"Graph API returned HTTP {response.status_code}"
            if remote_error and remote_error.get("message"):
                message = f"{message}: {remote_error['message']}"
            raise HttpStatusError(
                response.status_code,
                message=message,
                response_body=body if body is not None else response.text[:500],
                platform=self.platform.value,
                endpoint=endpoint
            )

        if body is None:
            raise TransportError(
                "Graph API returned a non-JSON response body",
                platform=self.platform.value,
                endpoint=endpoint
            )

        if remote_error:
            raise RemoteApiError(
                remote_error,
                platform=self.platform.value,
                endpoint=endpoint
            )

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.monotonic() - started) * 1000)

    def _page_endpoint(self, resource: str) -> str:
        if not self.config.page_id:
            raise ConfigurationError(
                f"PAGE_ID is not configured for {self.platform.value}",
                config_key="PAGE_ID"
            )
        return f"{self.config.page_id}/{resource}"

    # ------------------------------------------------------------------
    # Send API
    # ------------------------------------------------------------------

    async def send_message(
            self,
            user_id: str,
            message: OutboundMessage,
            messaging_type: MessagingType = MessagingType.RESPONSE
    ) -> JsonDict:
        """Send any outbound message variant."""
        return await self._send_api_request(self._page_endpoint("messages"), {
            "recipient": {"id": user_id},
            "messaging_type": messaging_type.value,
            "message": message.to_message(),
        }, "POST")

    async def send_text_message(self, user_id: str, text: str) -> JsonDict:
        return await self.send_message(user_id, TextMessage(text=text))

    async def send_image(self, user_id: str, image_url: str) -> JsonDict:
        return await self.send_message(user_id, ImageMessage(url=image_url))

    async def send_quick_replies(
            self,
            user_id: str,
            text: str,
            quick_replies: Sequence[Union[QuickReply, JsonDict]]
    ) -> JsonDict:
        return await self.send_message(
            user_id, QuickReplyMessage(text=text, quick_replies=list(quick_replies))
        )

    async def send_button_template(
            self,
            user_id: str,
            text: str,
            buttons: Sequence[Union[Button, JsonDict]]
    ) -> JsonDict:
        return await self.send_message(user_id, ButtonTemplate(text=text, buttons=list(buttons)))

    async def send_generic_template(
            self,
            user_id: str,
            elements: Sequence[Union[Element, JsonDict]]
    ) -> JsonDict:
        return await self.send_message(user_id, GenericTemplate(elements=list(elements)))

    async def send_list_template(
            self,
            user_id: str,
            elements: Sequence[Union[Element, JsonDict]],
            buttons: Optional[Sequence[Union[Button, JsonDict]]] = None
    ) -> JsonDict:
        return await self.send_message(
            user_id,
            ListTemplate(elements=list(elements), buttons=list(buttons) if buttons else None)
        )

    async def send_reaction(self, user_id: str, message_id: str, reaction: str) -> JsonDict:
        """React to a message previously received from the user."""
        return await self._send_api_request(self._page_endpoint("messages"), {
            "recipient": {"id": user_id},
            "sender_action": SenderAction.REACT.value,
            "payload": {
                "message_id": message_id,
                "reaction": reaction,
            },
        }, "POST")

    async def send_tagged_notification(
            self,
            user_id: str,
            text: str,
            notification_type: NotificationType = NotificationType.REGULAR,
            tag: MessageTag = MessageTag.ACCOUNT_UPDATE
    ) -> JsonDict:
        """Send a tagged message outside the standard response window."""
        notification = TaggedNotification(text=text, notification_type=notification_type, tag=tag)
        return await self._send_api_request(self._page_endpoint("messages"), {
            "recipient": {"id": user_id},
            "messaging_type": MessagingType.MESSAGE_TAG.value,
            "tag": notification.tag.value,
            "notification_type": notification.notification_type.value,
            "message": {"text": notification.text},
        }, "POST")

    async def _send_sender_action(self, user_id: str, action: SenderAction) -> JsonDict:
        return await self._send_api_request(self._page_endpoint("messages"), {
            "recipient": {"id": user_id},
            "sender_action": action.value,
        }, "POST")

    async def mark_seen(self, user_id: str) -> JsonDict:
        return await self._send_sender_action(user_id, SenderAction.MARK_SEEN)

    async def send_typing_indicator(self, user_id: str, typing: bool = True) -> JsonDict:
        action = SenderAction.TYPING_ON if typing else SenderAction.TYPING_OFF
        return await self._send_sender_action(user_id, action)

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    async def get_user_profile(self, user_id: str, fields: str = USER_PROFILE_FIELDS) -> JsonDict:
        return await self._send_api_request(user_id, {"fields": fields})

    async def get_conversations(self) -> JsonDict:
        return await self._send_api_request(self._page_endpoint("conversations"), {
            "platform": self.platform.value,
            "fields": CONVERSATION_FIELDS,
        })

    async def get_conversation_messages(self, conversation_id: str) -> JsonDict:
        return await self._send_api_request(conversation_id, {"fields": CONVERSATION_MESSAGE_FIELDS})

    async def get_message_details(self, message_id: str) -> JsonDict:
        return await self._send_api_request(message_id, {"fields": MESSAGE_DETAIL_FIELDS})

    async def get_page_insights(
            self,
            metrics: Sequence[str] = DEFAULT_INSIGHT_METRICS,
            period: str = INSIGHTS_PERIOD
    ) -> JsonDict:
        """Aggregate usage metrics for the page."""
        return await self._send_api_request(self._page_endpoint("insights"), {
            "metric": ",".join(metrics),
            "period": period,
        })

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Release the HTTP connection pool if this channel created it."""
        if self._owns_http_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> "MessengerChannel":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

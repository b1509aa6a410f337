"""
Messaging API Routes
REST endpoints sending messages and sender actions through the Graph API.

Client failures are not caught here; the exception handlers turn them into
the error envelope with status 500.
"""

from typing import Any, Dict

from fastapi import APIRouter, status
import structlog

from src.api.responses.api_response import APIResponse, create_success_response
from src.api.validators.message_validators import (
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
from src.dependencies import RegistryDep

logger = structlog.get_logger()
router = APIRouter(prefix="/api", tags=["messaging"])


@router.post(
    "/send-message",
    response_model=APIResponse,
    status_code=status.HTTP_200_OK,
    summary="Send a text message"
)
async def send_message(request: SendMessageRequest, registry: RegistryDep) -> Dict[str, Any]:
    """
    Send a plain text message

    Args:
        request: Recipient, text and platform
        registry: Channel registry

    Returns:
        Success envelope with the Graph API result

    Raises:
        400: Missing or invalid fields
        500: Graph API call failed
    """
    channel = registry.get(request.platform)
    result = await channel.send_text_message(request.user_id, request.message)

    logger.info("Message sent", platform=request.platform.value, user_id=request.user_id)
    return create_success_response(result)


@router.post("/send-image", response_model=APIResponse, summary="Send an image by URL")
async def send_image(request: SendImageRequest, registry: RegistryDep) -> Dict[str, Any]:
    channel = registry.get(request.platform)
    result = await channel.send_image(request.user_id, request.image_url)
    return create_success_response(result)


@router.post(
    "/send-quick-reply",
    response_model=APIResponse,
    summary="Send text with quick replies"
)
async def send_quick_reply(request: SendQuickReplyRequest, registry: RegistryDep) -> Dict[str, Any]:
    channel = registry.get(request.platform)
    result = await channel.send_quick_replies(request.user_id, request.message, request.quick_replies)
    return create_success_response(result)


@router.post(
    "/send-button-template",
    response_model=APIResponse,
    summary="Send a button template"
)
async def send_button_template(
        request: SendButtonTemplateRequest,
        registry: RegistryDep
) -> Dict[str, Any]:
    channel = registry.get(request.platform)
    result = await channel.send_button_template(request.user_id, request.text, request.buttons)
    return create_success_response(result)


@router.post(
    "/send-generic-template",
    response_model=APIResponse,
    summary="Send a generic template"
)
async def send_generic_template(
        request: SendGenericTemplateRequest,
        registry: RegistryDep
) -> Dict[str, Any]:
    channel = registry.get(request.platform)
    result = await channel.send_generic_template(request.user_id, request.elements)
    return create_success_response(result)


@router.post(
    "/send-list-template",
    response_model=APIResponse,
    summary="Send a list template"
)
async def send_list_template(
        request: SendListTemplateRequest,
        registry: RegistryDep
) -> Dict[str, Any]:
    """Send 2 to 4 list elements with an optional bottom button"""
    channel = registry.get(request.platform)
    result = await channel.send_list_template(request.user_id, request.elements, request.buttons)
    return create_success_response(result)


@router.post("/send-reaction", response_model=APIResponse, summary="React to a message")
async def send_reaction(request: SendReactionRequest, registry: RegistryDep) -> Dict[str, Any]:
    channel = registry.get(request.platform)
    result = await channel.send_reaction(request.user_id, request.message_id, request.reaction)
    return create_success_response(result)


@router.post(
    "/send-notification",
    response_model=APIResponse,
    summary="Send a tagged notification"
)
async def send_notification(
        request: SendNotificationRequest,
        registry: RegistryDep
) -> Dict[str, Any]:
    """
    Send a message tagged for delivery outside the standard response window

    Args:
        request: Recipient, text, notification type and tag
        registry: Channel registry

    Returns:
        Success envelope with the Graph API result
    """
    channel = registry.get(request.platform)
    result = await channel.send_tagged_notification(
        request.user_id,
        request.message,
        notification_type=request.notification_type,
        tag=request.tag
    )

    logger.info(
        "Notification sent",
        platform=request.platform.value,
        user_id=request.user_id,
        tag=request.tag.value
    )
    return create_success_response(result)


@router.post("/mark-seen", response_model=APIResponse, summary="Mark conversation as seen")
async def mark_seen(request: MarkSeenRequest, registry: RegistryDep) -> Dict[str, Any]:
    channel = registry.get(request.platform)
    result = await channel.mark_seen(request.user_id)
    return create_success_response(result)


@router.post("/typing", response_model=APIResponse, summary="Toggle the typing indicator")
async def typing(request: TypingRequest, registry: RegistryDep) -> Dict[str, Any]:
    channel = registry.get(request.platform)
    result = await channel.send_typing_indicator(request.user_id, request.typing)
    return create_success_response(result)

"""
Insights API Routes
Read-only REST endpoints for page insights, conversations, messages and user profiles.
"""

from typing import Any, Dict

from fastapi import APIRouter, Path, Query

from src.api.responses.api_response import APIResponse, create_success_response
from src.config.constants import DEFAULT_INSIGHT_METRICS
from src.dependencies import ChannelDep
from src.exceptions.base_exceptions import ValidationError

router = APIRouter(prefix="/api", tags=["insights"])


@router.get("/insights", response_model=APIResponse, summary="Get page insights")
async def get_insights(
        channel: ChannelDep,
        metrics: str = Query(
            default=",".join(DEFAULT_INSIGHT_METRICS),
            description="Comma separated metric names"
        ),
) -> Dict[str, Any]:
    """
    Get aggregate page metrics

    Args:
        channel: Channel selected by the ``platform`` query parameter
        metrics: Comma separated metric names

    Returns:
        Success envelope with the Graph API insights result

    Raises:
        400: No metric names given
        500: Graph API call failed
    """
    metric_names = [name.strip() for name in metrics.split(",") if name.strip()]
    if not metric_names:
        raise ValidationError("Missing metrics", missing_fields=["metrics"])

    result = await channel.get_page_insights(metric_names)
    return create_success_response(result)


@router.get("/conversations", response_model=APIResponse, summary="List conversations")
async def get_conversations(channel: ChannelDep) -> Dict[str, Any]:
    result = await channel.get_conversations()
    return create_success_response(result)


@router.get(
    "/conversations/{conversationId}/messages",
    response_model=APIResponse,
    summary="List messages of a conversation"
)
async def get_conversation_messages(
        channel: ChannelDep,
        conversation_id: str = Path(..., alias="conversationId", min_length=1),
) -> Dict[str, Any]:
    result = await channel.get_conversation_messages(conversation_id)
    return create_success_response(result)


@router.get("/messages/{messageId}", response_model=APIResponse, summary="Get message details")
async def get_message_details(
        channel: ChannelDep,
        message_id: str = Path(..., alias="messageId", min_length=1),
) -> Dict[str, Any]:
    result = await channel.get_message_details(message_id)
    return create_success_response(result)


@router.get("/user/{userId}", response_model=APIResponse, summary="Get a user profile")
async def get_user_profile(
        channel: ChannelDep,
        user_id: str = Path(..., alias="userId", min_length=1),
) -> Dict[str, Any]:
    """Public profile fields of a user who messaged the page"""
    result = await channel.get_user_profile(user_id)
    return create_success_response(result)

"""
Webhook API Routes
Endpoints receiving the Messenger / Instagram webhook handshake and event deliveries.
"""

from typing import Optional

from fastapi import APIRouter, Header, Request, Query
from fastapi.responses import PlainTextResponse
import structlog

from src.config.constants import WEBHOOK_PATH, WEBHOOK_ACK_BODY, SIGNATURE_HEADER
from src.dependencies import WebhookServiceDep

logger = structlog.get_logger()
router = APIRouter(tags=["webhook"])


@router.get(
    WEBHOOK_PATH,
    response_class=PlainTextResponse,
    summary="Webhook verification",
    description="Answer the platform's subscription verification challenge"
)
async def verify_webhook(
        webhook_service: WebhookServiceDep,
        hub_mode: Optional[str] = Query(default=None, alias="hub.mode"),
        hub_verify_token: Optional[str] = Query(default=None, alias="hub.verify_token"),
        hub_challenge: Optional[str] = Query(default=None, alias="hub.challenge"),
) -> PlainTextResponse:
    """
    Handle webhook verification

    Args:
        webhook_service: Webhook processing service
        hub_mode: Webhook mode from query params
        hub_verify_token: Verification token from query params
        hub_challenge: Challenge string to echo back

    Returns:
        Challenge on success, 403 on token mismatch, 400 on missing parameters
    """
    logger.info("Webhook verification attempt", hub_mode=hub_mode)

    status_code, body = webhook_service.verify_subscription(hub_mode, hub_verify_token, hub_challenge)
    return PlainTextResponse(body, status_code=status_code)


@router.post(
    WEBHOOK_PATH,
    response_class=PlainTextResponse,
    summary="Webhook handler",
    description="Handle incoming Messenger and Instagram messaging events"
)
async def receive_webhook(
        request: Request,
        webhook_service: WebhookServiceDep,
        x_hub_signature_256: Optional[str] = Header(default=None, alias=SIGNATURE_HEADER),
) -> PlainTextResponse:
    """
    Handle incoming webhook events

    Every event is answered before the acknowledgement is returned. Decode
    failures propagate to the exception handlers as a 500.
    """
    raw_body = await request.body()

    if not webhook_service.check_signature(raw_body, x_hub_signature_256):
        return PlainTextResponse("Forbidden", status_code=403)

    try:
        body = await request.json()
    except ValueError:
        body = None

    platform = webhook_service.resolve_platform(body)
    if platform is None:
        logger.warning(
            "Unsupported webhook object",
            object=body.get("object") if isinstance(body, dict) else None
        )
        return PlainTextResponse("Not Found", status_code=404)

    logger.info(
        "Webhook received",
        platform=platform.value,
        entries=len(body["entry"]) if isinstance(body.get("entry"), list) else None
    )

    await webhook_service.handle_delivery(platform, body)
    return PlainTextResponse(WEBHOOK_ACK_BODY, status_code=200)

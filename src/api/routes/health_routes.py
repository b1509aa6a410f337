"""
Health Check API Routes
Service health and service information endpoints.
"""

from datetime import datetime, UTC
from typing import Dict, List
import time

from fastapi import APIRouter
from pydantic import BaseModel

from src.config.constants import SERVICE_NAME, SERVICE_VERSION, SERVICE_DESCRIPTION, WEBHOOK_PATH
from src.dependencies import SettingsDep, RegistryDep

router = APIRouter(tags=["health"])

# Global startup time for uptime calculation
SERVICE_START_TIME = time.time()


class HealthStatus(BaseModel):
    """Health status response model"""
    status: str
    timestamp: datetime
    service: str
    version: str
    runtime_environment: str
    uptime_seconds: float
    environment: Dict[str, str]
    instances: Dict[str, str]


class ServiceInfo(BaseModel):
    """Service information with the endpoint map"""
    message: str
    service: str
    version: str
    api_version: str
    features: List[str]
    endpoints: Dict[str, str]


ENDPOINTS = {
    "webhook": WEBHOOK_PATH,
    "sendMessage": "/api/send-message",
    "sendImage": "/api/send-image",
    "sendQuickReply": "/api/send-quick-reply",
    "sendButtonTemplate": "/api/send-button-template",
    "sendGenericTemplate": "/api/send-generic-template",
    "sendListTemplate": "/api/send-list-template",
    "sendReaction": "/api/send-reaction",
    "sendNotification": "/api/send-notification",
    "markSeen": "/api/mark-seen",
    "typing": "/api/typing",
    "getInsights": "/api/insights",
    "conversations": "/api/conversations",
    "conversationMessages": "/api/conversations/{conversationId}/messages",
    "messageDetails": "/api/messages/{messageId}",
    "userProfile": "/api/user/{userId}",
    "health": "/health",
}

FEATURES = [
    "Keyword based automatic replies",
    "Generic, list and button templates",
    "Quick replies and reactions",
    "Tagged notifications",
    "Page insights",
]


@router.get(
    "/health",
    response_model=HealthStatus,
    summary="Health check",
    description="Static readiness of the platform clients and configuration presence"
)
async def health_check(settings: SettingsDep, registry: RegistryDep) -> HealthStatus:
    """
    Report readiness without calling the Graph API

    Secret values are never returned, only whether they are set.
    """
    return HealthStatus(
        status="OK",
        timestamp=datetime.now(UTC),
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        runtime_environment=settings.ENVIRONMENT.value,
        uptime_seconds=time.time() - SERVICE_START_TIME,
        environment=settings.credential_status(),
        instances=registry.readiness()
    )


@router.get("/", response_model=ServiceInfo, summary="Service information")
async def service_info(settings: SettingsDep) -> ServiceInfo:
    return ServiceInfo(
        message=SERVICE_DESCRIPTION,
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        api_version=settings.GRAPH_API_VERSION,
        features=FEATURES,
        endpoints=ENDPOINTS
    )

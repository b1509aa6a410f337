"""
Dependency injection for services and channels

Provides FastAPI dependency providers for settings, the channel registry,
per-platform channels and the webhook service. Everything is read from
``app.state``, where the application lifespan places it.
"""

from typing import Annotated

from fastapi import Depends, Query, Request

from src.config.constants import Platform
from src.config.settings import Settings
from src.core.channels.channel_factory import ChannelRegistry
from src.core.channels.messenger_channel import MessengerChannel
from src.exceptions.base_exceptions import ConfigurationError
from src.services.webhook_service import WebhookService


# =============================================================================
# Application State
# =============================================================================

def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with"""
    return request.app.state.settings


def get_channel_registry(request: Request) -> ChannelRegistry:
    """
    Channel registry created at startup

    Raises:
        ConfigurationError: If the application has not started
    """
    registry = getattr(request.app.state, "channel_registry", None)
    if registry is None:
        raise ConfigurationError(
            "Channel registry not initialized",
            config_key="channel_registry"
        )
    return registry


# =============================================================================
# Channels and Services
# =============================================================================

def get_channel(
        registry: Annotated[ChannelRegistry, Depends(get_channel_registry)],
        platform: Annotated[Platform, Query(description="Target platform")] = Platform.MESSENGER,
) -> MessengerChannel:
    """Channel for the ``platform`` query parameter"""
    return registry.get(platform)


def get_webhook_service(
        registry: Annotated[ChannelRegistry, Depends(get_channel_registry)],
        settings: Annotated[Settings, Depends(get_app_settings)],
) -> WebhookService:
    """Webhook service bound to the current registry and settings"""
    return WebhookService(registry, settings)


# =============================================================================
# Type Aliases for Common Dependencies
# =============================================================================

SettingsDep = Annotated[Settings, Depends(get_app_settings)]
RegistryDep = Annotated[ChannelRegistry, Depends(get_channel_registry)]
ChannelDep = Annotated[MessengerChannel, Depends(get_channel)]
WebhookServiceDep = Annotated[WebhookService, Depends(get_webhook_service)]

__all__ = [
    "get_app_settings",
    "get_channel_registry",
    "get_channel",
    "get_webhook_service",
    "SettingsDep",
    "RegistryDep",
    "ChannelDep",
    "WebhookServiceDep",
]

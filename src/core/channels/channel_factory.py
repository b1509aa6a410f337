"""
Channel registry for the configured messaging platforms.

This module builds one MessengerChannel per platform from application
settings and hands them out by platform.
"""

from typing import Dict, Optional, List
import structlog

import httpx

from src.config.constants import Platform
from src.config.settings import Settings
from src.core.channels.base_channel import ChannelConfig, ChannelObserver, LoggingObserver
from src.core.channels.messenger_channel import MessengerChannel
from src.exceptions.base_exceptions import ConfigurationError

logger = structlog.get_logger(__name__)


def build_channel_config(settings: Settings, platform: Platform) -> ChannelConfig:
    """Channel configuration for ``platform`` taken from settings."""
    return ChannelConfig(
        platform=platform,
        page_id=settings.PAGE_ID,
        access_token=settings.PAGE_ACCESS_TOKEN,
        api_domain=settings.GRAPH_API_DOMAIN,
        api_version=settings.GRAPH_API_VERSION,
        timeout_seconds=settings.GRAPH_API_TIMEOUT_SECONDS,
    )


class ChannelRegistry:
    """Holds the Graph API client of every platform."""

    def __init__(self, channels: Optional[Dict[Platform, MessengerChannel]] = None):
        self._channels: Dict[Platform, MessengerChannel] = dict(channels or {})

    @classmethod
    def from_settings(
            cls,
            settings: Settings,
            http_client: Optional[httpx.AsyncClient] = None,
            observer: Optional[ChannelObserver] = None
    ) -> "ChannelRegistry":
        """
        Create a client for each supported platform.

        Args:
            settings: Application settings
            http_client: Optional shared HTTP client (left open on close)
            observer: Traffic observer, structlog-backed by default

        Returns:
            Registry with one channel per Platform member
        """
        observer = observer or LoggingObserver()
        registry = cls()
        for platform in Platform:
            config = build_channel_config(settings, platform)
            logger.debug("Configuring channel", **config.describe())
            registry.register(platform, MessengerChannel(config, http_client=http_client, observer=observer))

        missing = settings.missing_credentials()
        if missing:
            logger.warning("Messaging credentials not configured", missing=missing)

        logger.info(
            "Channel registry initialized",
            platforms=[p.value for p in registry.platforms()],
            api_version=settings.GRAPH_API_VERSION
        )
        return registry

    def register(self, platform: Platform, channel: MessengerChannel) -> None:
        if platform in self._channels:
            logger.warning("Channel already registered, overriding", platform=platform.value)
        self._channels[platform] = channel

    def get(self, platform: Platform) -> MessengerChannel:
        """
        Channel for ``platform``.

        Raises:
            ConfigurationError: No channel is registered for the platform
        """
        channel = self._channels.get(Platform(platform))
        if channel is None:
            raise ConfigurationError(
                f"No channel registered for platform '{Platform(platform).value}'",
                config_key="platform"
            )
        return channel

    def platforms(self) -> List[Platform]:
        return list(self._channels.keys())

    def readiness(self) -> Dict[str, str]:
        """Per-platform status reported by the health endpoint."""
        return {platform.value: "Ready" for platform in self._channels}

    async def close(self) -> None:
        """Close every channel, continuing past individual failures."""
        for platform, channel in self._channels.items():
            try:
                await channel.close()
            except Exception as e:
                logger.error("Failed to close channel", platform=platform.value, error=str(e))
        logger.info("Channel registry closed")

"""
Channel configuration and request observation.

This module provides the immutable configuration every Graph API channel is
built from, and the observer interface channels report their traffic to.
Logging lives in an observer so the request path itself stays free of
logging calls.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, ConfigDict, Field
import structlog

from src.config.constants import (
    Platform,
    GRAPH_API_DOMAIN,
    GRAPH_API_VERSION,
    DEFAULT_TIMEOUT_SECONDS,
)
from src.utils.security import mask_secret


class ChannelConfig(BaseModel):
    """Immutable configuration for one platform's Graph API client."""
    model_config = ConfigDict(frozen=True, use_enum_values=False)

    platform: Platform
    page_id: Optional[str] = None
    access_token: Optional[str] = Field(default=None, repr=False)

    api_domain: str = GRAPH_API_DOMAIN
    api_version: str = GRAPH_API_VERSION
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def api_base_url(self) -> str:
        return f"https://{self.api_domain}/{self.api_version}"

    @property
    def is_complete(self) -> bool:
        """Both page id and access token are configured."""
        return bool(self.page_id and self.access_token)

    def describe(self) -> Dict[str, Any]:
        """Loggable summary that never includes the token itself."""
        return {
            "platform": self.platform.value,
            "api_base_url": self.api_base_url,
            "page_id": self.page_id or "NOT SET",
            "access_token": mask_secret(self.access_token),
        }


class ChannelObserver:
    """
    Receives notifications about outbound Graph API calls.

    The default implementation ignores everything; subclasses override the
    hooks they care about.
    """

    def on_request(self, platform: Platform, method: str, endpoint: str) -> None:
        pass

    def on_response(
            self,
            platform: Platform,
            method: str,
            endpoint: str,
            status_code: int,
            duration_ms: int
    ) -> None:
        pass

    def on_error(
            self,
            platform: Platform,
            method: str,
            endpoint: str,
            error: Exception,
            duration_ms: int
    ) -> None:
        pass


class LoggingObserver(ChannelObserver):
    """Writes Graph API traffic to structlog."""

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self.logger = logger or structlog.get_logger("GraphApi")

    def on_request(self, platform: Platform, method: str, endpoint: str) -> None:
        self.logger.debug(
            "Graph API request",
            platform=platform.value,
            method=method,
            endpoint=endpoint
        )

    def on_response(
            self,
            platform: Platform,
            method: str,
            endpoint: str,
            status_code: int,
            duration_ms: int
    ) -> None:
        self.logger.info(
            "Graph API response",
            platform=platform.value,
            method=method,
            endpoint=endpoint,
            status_code=status_code,
            duration_ms=duration_ms
        )

    def on_error(
            self,
            platform: Platform,
            method: str,
            endpoint: str,
            error: Exception,
            duration_ms: int
    ) -> None:
        self.logger.error(
            "Graph API request failed",
            platform=platform.value,
            method=method,
            endpoint=endpoint,
            error=str(error),
            error_type=type(error).__name__,
            duration_ms=duration_ms
        )

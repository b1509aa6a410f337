"""
Relay settings.

All configuration comes from environment variables (or a local ``.env``
file) and is read once per process. Messaging credentials are optional at
startup so the service can boot and report what is missing on ``/health``.
"""

from typing import List, Optional, Dict
from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.config.constants import (
    GRAPH_API_DOMAIN,
    GRAPH_API_VERSION,
    DEFAULT_TIMEOUT_SECONDS,
)


class Environment(str, Enum):
    """Deployment stage."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Environment-backed settings for the relay."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Runtime
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Deployment stage"
    )
    DEBUG: bool = Field(
        default=False,
        description="Auto-reload in development"
    )
    HOST: str = Field(
        default="0.0.0.0",
        description="Interface uvicorn binds to"
    )
    PORT: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Port uvicorn listens on"
    )

    # Logging
    LOG_LEVEL: LogLevel = Field(
        default=LogLevel.INFO,
        description="Minimum level written to stdout"
    )
    LOG_FORMAT: str = Field(
        default="json",
        pattern=r"^(json|text)$",
        description="json for log shippers, text for a terminal"
    )

    # Page / account credentials
    PAGE_ID: Optional[str] = Field(
        default=None,
        description="Facebook page (or Instagram account) identifier"
    )
    PAGE_ACCESS_TOKEN: Optional[str] = Field(
        default=None,
        description="Page access token sent with every Graph API call"
    )
    VERIFY_TOKEN: Optional[str] = Field(
        default=None,
        description="Secret expected in the webhook verification handshake"
    )
    APP_SECRET: Optional[str] = Field(
        default=None,
        description="App secret used to check X-Hub-Signature-256 on deliveries"
    )
    INSTAGRAM_USERNAME: Optional[str] = Field(
        default=None,
        description="Instagram account handle, informational only"
    )

    # Graph API
    GRAPH_API_DOMAIN: str = Field(
        default=GRAPH_API_DOMAIN,
        min_length=1,
        description="Graph API host"
    )
    GRAPH_API_VERSION: str = Field(
        default=GRAPH_API_VERSION,
        pattern=r"^v\d+\.\d+$",
        description="Graph API version path segment"
    )
    GRAPH_API_TIMEOUT_SECONDS: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        le=300,
        description="HTTP transport timeout for Graph API calls"
    )

    # CORS
    ALLOWED_ORIGINS: List[str] = Field(
        default=["*"],
        description="Origins allowed to call the REST endpoints from a browser"
    )

    @field_validator("GRAPH_API_DOMAIN")
    @classmethod
    def validate_graph_domain(cls, v):
        """Strip scheme and trailing slashes from the Graph host."""
        for prefix in ("https://", "http://"):
            if v.startswith(prefix):
                v = v[len(prefix):]
        return v.rstrip("/")

    @model_validator(mode="after")
    def reject_unsafe_production(self):
        """Production runs without debug reload and with explicit CORS origins."""
        if self.is_production():
            if self.DEBUG:
                raise ValueError("DEBUG must be false in production")
            if "*" in self.ALLOWED_ORIGINS:
                raise ValueError("ALLOWED_ORIGINS must list explicit origins in production")
        return self

    def missing_credentials(self) -> List[str]:
        """Names of the messaging settings that are not configured."""
        required = {
            "PAGE_ID": self.PAGE_ID,
            "PAGE_ACCESS_TOKEN": self.PAGE_ACCESS_TOKEN,
            "VERIFY_TOKEN": self.VERIFY_TOKEN,
        }
        return [name for name, value in required.items() if not value]

    def credential_status(self) -> Dict[str, str]:
        """Set / Not Set summary that is safe to expose."""
        values = {
            "pageId": self.PAGE_ID,
            "pageAccessToken": self.PAGE_ACCESS_TOKEN,
            "verifyToken": self.VERIFY_TOKEN,
            "appSecret": self.APP_SECRET,
        }
        return {key: "Set" if value else "Not Set" for key, value in values.items()}

    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings, parsed on first use."""
    return Settings()


def reload_settings() -> Settings:
    """Drop the cached settings and parse the environment again."""
    get_settings.cache_clear()
    return get_settings()

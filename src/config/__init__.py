"""
Configuration package for Messenger Relay.

This package provides centralized configuration management with
environment-based settings, validation, and constants.
"""

from src.config.settings import get_settings, reload_settings, Settings
from src.config.constants import (
    SERVICE_NAME,
    SERVICE_VERSION,
    GRAPH_API_DOMAIN,
    GRAPH_API_VERSION,
    WEBHOOK_ACK_BODY,
    Platform,
    ErrorCategory,
)

__all__ = [
    "get_settings",
    "reload_settings",
    "Settings",
    "SERVICE_NAME",
    "SERVICE_VERSION",
    "GRAPH_API_DOMAIN",
    "GRAPH_API_VERSION",
    "WEBHOOK_ACK_BODY",
    "Platform",
    "ErrorCategory",
]

"""
Services Package

This package contains the service layer of the Messenger Relay.

Service Architecture:
- BaseService: Abstract base with common logging helpers
- WebhookService: Webhook handshake, signature checks and event replies
"""

from .base_service import BaseService
from .webhook_service import WebhookService

__all__ = [
    "BaseService",
    "WebhookService",
]

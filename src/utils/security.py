"""
Webhook signature and secret-handling helpers.
"""

import hashlib
import hmac
from typing import Optional

from src.config.constants import SIGNATURE_PREFIX


def verify_signature(app_secret: str, payload: bytes, signature: Optional[str]) -> bool:
    """
    Check an X-Hub-Signature-256 header against the raw request body.

    Args:
        app_secret: App secret shared with the platform
        payload: Raw request body bytes
        signature: Header value, ``sha256=<hexdigest>``

    Returns:
        True if the signature matches
    """
    if not signature:
        return False

    if signature.startswith(SIGNATURE_PREFIX):
        signature = signature[len(SIGNATURE_PREFIX):]

    expected_signature = hmac.new(
        app_secret.encode("utf-8"),
        payload,
        hashlib.sha256
    ).hexdigest()

    return hmac.compare_digest(expected_signature.encode("utf-8"), signature.encode("utf-8"))


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    """Render a secret for logs without exposing it."""
    if not value:
        return "NOT SET"
    if len(value) <= visible:
        return "*" * len(value)
    return value[:visible] + "*" * 6

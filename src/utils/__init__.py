"""
Utilities package for Messenger Relay.

This package provides common utility functions and helpers
used throughout the application.
"""

from src.utils.logger import setup_logging, get_logger
from src.utils.security import verify_signature, mask_secret

__all__ = [
    # Logging utilities
    "setup_logging",
    "get_logger",

    # Security helpers
    "verify_signature",
    "mask_secret",
]

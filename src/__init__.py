"""
Messenger Relay - Webhook relay for the Messenger and Instagram messaging APIs.

This package receives platform webhook events, answers them with keyword
based automatic replies and exposes a REST façade over the Graph API
messaging operations.
"""

__version__ = "2.0.0"
__description__ = "Webhook relay for the Messenger and Instagram messaging APIs"

# Package metadata
__title__ = "messenger-relay"
__license__ = "MIT"

# Semantic version components
VERSION_INFO = (2, 0, 0)

__all__ = [
    "__version__",
    "__description__",
    "__title__",
    "VERSION_INFO",
]

"""
Channels package for Graph API messaging.

This package provides the Messenger / Instagram Graph API client and the
registry holding one client per platform.
"""

from src.core.channels.base_channel import (
    ChannelConfig,
    ChannelObserver,
    LoggingObserver,
)
from src.core.channels.messenger_channel import MessengerChannel
from src.core.channels.channel_factory import (
    ChannelRegistry,
    build_channel_config,
)

__all__ = [
    # Configuration and observation
    "ChannelConfig",
    "ChannelObserver",
    "LoggingObserver",

    # Client
    "MessengerChannel",

    # Registry
    "ChannelRegistry",
    "build_channel_config",
]

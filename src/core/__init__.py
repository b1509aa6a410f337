"""
Core messaging logic package for the Messenger Relay.

This package contains the Graph API channels, the automatic reply rules and
the reply dispatcher.
"""

from src.core import channels
from src.core import processors

__all__ = [
    "channels",
    "processors",
]

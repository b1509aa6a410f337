"""
Custom exceptions package for Messenger Relay.

This package provides custom exception classes and error handling
utilities for the application.
"""

from src.exceptions.base_exceptions import (
    RelayException,
    ValidationError,
    ConfigurationError,
    PayloadDecodeError,
    setup_exception_handlers,
)
from src.exceptions.channel_exceptions import (
    ClientError,
    TransportError,
    HttpStatusError,
    RemoteApiError,
)

__all__ = [
    # Base exception classes
    "RelayException",
    "ValidationError",
    "ConfigurationError",
    "PayloadDecodeError",

    # Graph API client failures
    "ClientError",
    "TransportError",
    "HttpStatusError",
    "RemoteApiError",

    # Exception handling setup
    "setup_exception_handlers",
]

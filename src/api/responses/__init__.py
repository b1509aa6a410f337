"""
API Response Package
Provides the success envelope used by the REST endpoints.
"""

from .api_response import (
    APIResponse,
    create_success_response,
)

__all__ = [
    "APIResponse",
    "create_success_response",
]

"""
API Middleware Package
"""

from .logging_middleware import RequestContextMiddleware, redact

__all__ = ["RequestContextMiddleware", "redact"]

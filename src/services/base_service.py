"""
Service base class.

Services log through two helpers so every entry carries the service name,
the operation and, where known, the platform and user. Keys that look like
credentials are redacted before anything is written.
"""

from abc import ABC
from typing import Dict, Any, Optional
import structlog

from src.config.constants import Platform

REDACTED = "[REDACTED]"


class BaseService(ABC):
    """Common logging for the service layer"""

    SENSITIVE_FIELDS = (
        "password", "token", "secret", "credential",
        "authorization", "signature", "access_key"
    )

    def __init__(self):
        self.service_name = type(self).__name__
        self.logger = structlog.get_logger(self.service_name)

    def _context(
            self,
            operation: str,
            platform: Optional[Platform],
            fields: Dict[str, Any]
    ) -> Dict[str, Any]:
        context = {"service": self.service_name, "operation": operation, **fields}
        if platform is not None:
            context["platform"] = Platform(platform).value
        return self._redact(context)

    def log_operation(
            self,
            operation: str,
            platform: Optional[Platform] = None,
            user_id: Optional[str] = None,
            **fields
    ) -> None:
        """Info-level record of a completed operation"""
        if user_id:
            fields["user_id"] = user_id
        self.logger.info("Service operation", **self._context(operation, platform, fields))

    def log_failure(
            self,
            error: Exception,
            operation: str,
            platform: Optional[Platform] = None,
            **fields
    ) -> None:
        """Error-level record carrying the error classification"""
        fields["error_type"] = getattr(error, "error_type", type(error).__name__)
        fields["error_message"] = str(error)
        self.logger.error("Service operation failed", **self._context(operation, platform, fields))

    def _redact(self, data: Dict[str, Any]) -> Dict[str, Any]:
        redacted = {}
        for key, value in data.items():
            if any(marker in key.lower() for marker in self.SENSITIVE_FIELDS):
                redacted[key] = REDACTED
            elif isinstance(value, dict):
                redacted[key] = self._redact(value)
            else:
                redacted[key] = value
        return redacted

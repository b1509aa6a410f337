"""
Graph API client exceptions for Messenger Relay.

Every failure of an outbound Graph API call is reported as exactly one of
these classes so callers can tell a dead network from a rejected request
from a business error returned inside a successful response.
"""

from typing import Optional, Dict, Any

from src.exceptions.base_exceptions import RelayException
from src.config.constants import ErrorCategory


class ClientError(RelayException):
    """Base exception for all Graph API client failures."""

    error_code = "CLIENT_ERROR"
    category = ErrorCategory.EXTERNAL

    def __init__(
            self,
            message: str,
            platform: Optional[str] = None,
            endpoint: Optional[str] = None,
            **kwargs
    ):
        details = kwargs.pop("details", {})
        if platform:
            details["platform"] = platform
        if endpoint:
            details["endpoint"] = endpoint

        super().__init__(message=message, details=details, **kwargs)
        self.platform = platform
        self.endpoint = endpoint


class TransportError(ClientError):
    """The HTTP call to the Graph API could not complete."""

    error_code = "TRANSPORT_ERROR"
    category = ErrorCategory.NETWORK


class HttpStatusError(ClientError):
    """The Graph API answered with a non-success HTTP status."""

    error_code = "HTTP_STATUS_ERROR"

    def __init__(
            self,
            status_code: int,
            message: Optional[str] = None,
            response_body: Optional[Any] = None,
            **kwargs
    ):
        details = kwargs.pop("details", {})
        details["remote_status"] = status_code
        if response_body is not None:
            details["response_body"] = response_body

        super().__init__(
            message=message or f"Graph API returned HTTP {status_code}",
            details=details,
            **kwargs
        )
        self.remote_status = status_code
        self.response_body = response_body


class RemoteApiError(ClientError):
    """The Graph API returned an error object despite HTTP success."""

    error_code = "REMOTE_API_ERROR"

    def __init__(
            self,
            error: Dict[str, Any],
            **kwargs
    ):
        details = kwargs.pop("details", {})
        for key in ("type", "code", "error_subcode", "fbtrace_id"):
            if error.get(key) is not None:
                details[f"remote_{key}"] = error[key]

        super().__init__(
            message=error.get("message") or "Graph API reported an error",
            details=details,
            **kwargs
        )
        self.remote_error = error
        self.remote_code = error.get("code")

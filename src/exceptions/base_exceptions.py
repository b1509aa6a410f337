"""
Relay exception hierarchy and FastAPI error handlers.

Every error a caller can see leaves the service as the same JSON envelope:
``{error, errorType, details, meta}``. Relay exceptions build it from their
own attributes; the handlers at the bottom of this module build it for
framework errors and anything unexpected.
"""

import traceback
import uuid
from typing import Any, Dict, Optional, List
from datetime import datetime, UTC

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from src.config.constants import ErrorCategory, HTTP_STATUS_CODES
from src.utils.logger import get_logger

logger = get_logger(__name__)


class RelayException(Exception):
    """
    Root of all errors raised deliberately by the relay.

    Subclasses set ``error_code`` and ``category``; the HTTP status follows
    from the category unless given explicitly.
    """

    error_code: str = "INTERNAL_ERROR"
    category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
            self,
            message: str,
            error_code: Optional[str] = None,
            status_code: Optional[int] = None,
            details: Optional[Dict[str, Any]] = None,
            category: Optional[ErrorCategory] = None,
            caused_by: Optional[Exception] = None
    ):
        """
        Args:
            message: Human readable message, returned to API callers unchanged
            error_code: Overrides the class error code
            status_code: Overrides the status derived from the category
            details: Extra fields for the ``details`` object
            category: Overrides the class category
            caused_by: Underlying exception, logged but never returned
        """
        super().__init__(message)

        self.message = message
        if error_code:
            self.error_code = error_code
        if category:
            self.category = category
        self.status_code = status_code or HTTP_STATUS_CODES.get(self.category, 500)
        self.details = details or {}
        self.caused_by = caused_by
        self.occurred_at = datetime.now(UTC)

    @property
    def error_type(self) -> str:
        """Classification reported to API callers."""
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        """Error envelope without request metadata."""
        return {
            "error": self.message,
            "errorType": self.error_type,
            "details": {
                "code": self.error_code,
                "category": self.category.value,
                **self.details,
            },
        }

    def log_error(self, logger: Optional[structlog.stdlib.BoundLogger] = None) -> None:
        """Log at error level for 5xx and warning level for everything else."""
        logger = logger or get_logger(__name__)

        context: Dict[str, Any] = {
            "error_code": self.error_code,
            "error_type": self.error_type,
            "error_category": self.category.value,
            "status_code": self.status_code,
        }
        if self.details:
            context["details"] = self.details
        if self.caused_by is not None:
            context["caused_by"] = repr(self.caused_by)

        log = logger.error if self.status_code >= 500 else logger.warning
        log(self.message, **context)


class ValidationError(RelayException):
    """Missing or malformed caller input."""

    error_code = "VALIDATION_ERROR"
    category = ErrorCategory.VALIDATION

    def __init__(
            self,
            message: str = "Request validation failed",
            missing_fields: Optional[List[str]] = None,
            validation_errors: Optional[List[Dict[str, Any]]] = None,
            **kwargs
    ):
        details = kwargs.pop("details", {})
        details["missing_fields"] = list(missing_fields or [])
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(message=message, details=details, **kwargs)
        self.missing_fields = details["missing_fields"]


class ConfigurationError(RelayException):
    """A setting or application state needed by the request is missing."""

    error_code = "CONFIGURATION_ERROR"
    category = ErrorCategory.INTERNAL

    def __init__(
            self,
            message: str = "Configuration error",
            config_key: Optional[str] = None,
            **kwargs
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key

        super().__init__(message=message, details=details, **kwargs)


class PayloadDecodeError(RelayException):
    """A webhook body whose entries or events do not have the expected shape."""

    error_code = "PAYLOAD_DECODE_ERROR"
    category = ErrorCategory.INTERNAL

    def __init__(
            self,
            message: str = "Webhook payload could not be decoded",
            errors: Optional[List[Dict[str, Any]]] = None,
            **kwargs
    ):
        details = kwargs.pop("details", {})
        if errors:
            details["decode_errors"] = errors

        super().__init__(message=message, details=details, **kwargs)


# ============================================================================
# HANDLERS
# ============================================================================

def _request_meta(request: Request) -> Dict[str, Any]:
    meta = {
        "timestamp": datetime.now(UTC).isoformat(),
        "path": request.url.path,
        "method": request.method,
    }
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        meta["request_id"] = request_id
    return meta


def _envelope(
        request: Request,
        status_code: int,
        body: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={**body, "meta": _request_meta(request)},
        headers=headers
    )


async def relay_exception_handler(request: Request, exc: RelayException) -> JSONResponse:
    """Relay exceptions carry their own status and envelope."""
    exc.log_error()
    return _envelope(request, exc.status_code, exc.to_dict())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Framework HTTP errors, most often unmatched routes.

    A 404 is reported as "Endpoint not found"; other statuses keep the
    framework's detail as the message.
    """
    not_found = exc.status_code == 404

    logger.warning(
        "HTTP error response",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method
    )

    return _envelope(
        request,
        exc.status_code,
        {
            "error": "Endpoint not found" if not_found else str(exc.detail),
            "errorType": "NotFoundError" if not_found else "HTTPException",
            "details": {"code": f"HTTP_{exc.status_code}", "detail": exc.detail},
        },
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Request body, query and path validation failures.

    Fields are named by their wire name. A field that is absent, or a
    top-level string that is empty, counts as missing and is listed in the
    message, e.g. ``Missing userId, message``.
    """
    validation_errors = []
    missing_fields = []
    for error in exc.errors():
        location = [str(part) for part in error["loc"] if part not in ("body", "query", "path")]
        field = ".".join(location) or "body"
        validation_errors.append({"field": field, "message": error["msg"], "type": error["type"]})

        empty_string = error["type"] == "string_too_short" and len(location) == 1
        if error["type"] == "missing" or empty_string:
            missing_fields.append(field)

    error = ValidationError(
        message=f"Missing {', '.join(missing_fields)}" if missing_fields else "Request validation failed",
        missing_fields=missing_fields,
        validation_errors=validation_errors,
    )
    error.log_error()

    return _envelope(request, 400, error.to_dict())


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected: logged with its traceback and an id callers can quote."""
    error_id = str(uuid.uuid4())

    logger.error(
        "Unhandled exception",
        error_id=error_id,
        error_type=type(exc).__name__,
        error_message=str(exc),
        path=request.url.path,
        method=request.method,
        traceback="".join(traceback.format_exception(exc))
    )

    return _envelope(request, 500, {
        "error": "Internal server error",
        "errorType": type(exc).__name__,
        "details": {
            "code": "INTERNAL_SERVER_ERROR",
            "error_id": error_id,
            "message": str(exc),
        },
    })


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the relay, HTTP, validation and catch-all handlers on ``app``."""
    app.add_exception_handler(RelayException, relay_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.debug("Exception handlers registered")


__all__ = [
    "RelayException",
    "ValidationError",
    "ConfigurationError",
    "PayloadDecodeError",
    "setup_exception_handlers",
    "relay_exception_handler",
    "http_exception_handler",
    "validation_exception_handler",
    "generic_exception_handler",
]

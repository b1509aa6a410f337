"""
Request context and access logging.

One middleware per request: assigns the request id, binds it to the
structlog context, times the call and writes one log line on the way in and
one on the way out. Webhook signatures, access tokens and the verify token
never reach the logs in clear text.
"""

import time
import uuid
from typing import Dict, Iterable, Optional, Set

from fastapi import Request, Response
import structlog

logger = structlog.get_logger("http")

REQUEST_ID_HEADER = "X-Request-ID"
PROCESS_TIME_HEADER = "X-Process-Time"
SLOW_REQUEST_SECONDS = 5.0

SENSITIVE_HEADERS = frozenset({
    "authorization", "cookie", "set-cookie",
    "x-hub-signature", "x-hub-signature-256",
})
SENSITIVE_PARAMS = frozenset({"access_token", "hub.verify_token", "appsecret_proof"})


def redact(values: Dict[str, str], sensitive: Iterable[str]) -> Dict[str, str]:
    """Copy of ``values`` with sensitive entries reduced to their outer characters."""
    sensitive = {name.lower() for name in sensitive}
    redacted = {}
    for key, value in values.items():
        if key.lower() not in sensitive:
            redacted[key] = value
        elif len(value) > 8:
            redacted[key] = f"{value[:4]}...{value[-4:]}"
        else:
            redacted[key] = "***"
    return redacted


class RequestContextMiddleware:
    """HTTP middleware adding request ids, timing headers and access logs."""

    def __init__(self, exclude_paths: Optional[Set[str]] = None, log_headers: bool = True):
        self.exclude_paths = exclude_paths if exclude_paths is not None else {"/docs", "/openapi.json"}
        self.log_headers = log_headers

    async def __call__(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        quiet = request.url.path in self.exclude_paths
        if not quiet:
            self._log_request(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request raised",
                method=request.method,
                path=request.url.path,
                error_type=type(e).__name__,
                error=str(e),
                duration_ms=self._elapsed_ms(started)
            )
            raise

        duration_ms = self._elapsed_ms(started)
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[PROCESS_TIME_HEADER] = str(duration_ms)

        if not quiet:
            self._log_response(request, response, duration_ms)
        return response

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)

    @staticmethod
    def _client_ip(request: Request) -> str:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _log_request(self, request: Request) -> None:
        fields = {
            "method": request.method,
            "path": request.url.path,
            "query_params": redact(dict(request.query_params), SENSITIVE_PARAMS),
            "client_ip": self._client_ip(request),
            "content_length": request.headers.get("content-length"),
        }
        if self.log_headers:
            fields["headers"] = redact(dict(request.headers), SENSITIVE_HEADERS)

        logger.info("Request received", **fields)

    def _log_response(self, request: Request, response: Response, duration_ms: float) -> None:
        fields = {
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }
        if duration_ms > SLOW_REQUEST_SECONDS * 1000:
            fields["slow"] = True

        if response.status_code >= 500:
            logger.error("Request failed", **fields)
        elif response.status_code >= 400:
            logger.warning("Request rejected", **fields)
        else:
            logger.info("Request completed", **fields)

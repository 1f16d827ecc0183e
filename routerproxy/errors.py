"""
Structured Error Taxonomy — Typed exceptions for the RouterProxy service.

Design principles:
  - Every error carries `error_code` + `http_status` for the API boundary
  - Three kinds: client input, upstream failure, structured-output parsing
  - Nothing is retried, so `retryable` is always False
  - Structured logging friendly: all errors serialize cleanly to JSON
"""

from __future__ import annotations

__all__ = [
    "RouterProxyError",
    "MessageRequiredError",
    "UpstreamError",
    "StructuredOutputParseError",
]


class RouterProxyError(Exception):
    """Root exception for the RouterProxy service.

    Attributes:
        retryable: If True, the caller should consider retrying the operation.
        error_code: Machine-readable code for dashboards and alerting.
        http_status: HTTP status code for API responses.
    """

    retryable: bool = False
    error_code: str = "ROUTERPROXY_ERROR"
    http_status: int = 500

    def __init__(self, message: str, *, detail: str | None = None):
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict:
        """Serialize for structured logging."""
        return {
            "error_code": self.error_code,
            "message": str(self),
            "detail": self.detail,
            "retryable": self.retryable,
            "http_status": self.http_status,
        }

    def to_response(self) -> dict:
        """Serialize for the HTTP body: `{error}` plus `details` when known."""
        body = {"error": str(self)}
        if self.detail is not None:
            body["details"] = self.detail
        return body


class MessageRequiredError(RouterProxyError):
    """The inbound request did not carry a non-empty `message`."""

    error_code = "MESSAGE_REQUIRED"
    http_status = 400

    def __init__(self, message: str = "Message is required", *, detail: str | None = None):
        super().__init__(message, detail=detail)


class UpstreamError(RouterProxyError):
    """OpenRouter returned nothing usable (status, transport, or missing field)."""

    error_code = "UPSTREAM_ERROR"
    http_status = 500


class StructuredOutputParseError(RouterProxyError):
    """The model replied, but no valid JSON could be extracted from the reply."""

    error_code = "STRUCTURED_OUTPUT_PARSE_ERROR"
    http_status = 500

    def __init__(
        self, message: str = "Failed to parse structured JSON", *, detail: str | None = None
    ):
        super().__init__(message, detail=detail)

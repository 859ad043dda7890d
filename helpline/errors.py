"""Error taxonomy for the alert relay and its mapping to HTTP status codes."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    INVALID_INPUT = "invalid_input"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    DELIVERY_FAILED = "delivery_failed"


_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.PAYLOAD_TOO_LARGE: 413,
    ErrorKind.DELIVERY_FAILED: 500,
}


def status_for(kind: ErrorKind) -> int:
    """Return the HTTP status code for an error kind."""
    return _STATUS_BY_KIND[kind]


class RelayError(Exception):
    """Base class for every error the request handlers turn into a response."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str, **extra: Any) -> None:
        self.message = message
        self.extra = extra
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return status_for(self.kind)

    def to_body(self) -> dict[str, Any]:
        return {"ok": False, "error": self.message, **self.extra}


class AuthorizationError(RelayError):
    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized request") -> None:
        super().__init__(message)


class RateLimitError(RelayError):
    kind = ErrorKind.RATE_LIMITED

    def __init__(self, retry_after_ms: int) -> None:
        self.retry_after_ms = retry_after_ms
        super().__init__(
            "Too many requests, please wait a few seconds.",
            retryAfterMs=retry_after_ms,
        )


class ValidationError(RelayError):
    """Malformed, missing, or out-of-range input."""

    kind = ErrorKind.INVALID_INPUT


class PayloadTooLargeError(ValidationError):
    kind = ErrorKind.PAYLOAD_TOO_LARGE


class DeliveryError(RelayError):
    """Raised by a notifier when the downstream channel rejects or is unreachable."""

    kind = ErrorKind.DELIVERY_FAILED

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.upstream_status = status_code
        super().__init__(message)

    def to_body(self) -> dict[str, Any]:
        return {
            "ok": False,
            "error": "Unexpected server error",
            "details": self.message[:300],
        }

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class ApiError(Exception):
    """A call to the inventory service that did not produce a usable response."""

    code: str
    message: str
    status_code: int
    details: object | None = None
    trace_id: str | None = None
    raw_payload: object | None = None

    # Worth offering the operator a plain "try again".
    transient: ClassVar[bool] = False

    def __str__(self) -> str:
        text = f"{self.code} (HTTP {self.status_code}): {self.message}"
        return f"{text} [trace {self.trace_id}]" if self.trace_id else text


class AuthError(ApiError):
    """401: the access token is missing, expired or revoked."""


class PermissionError(ApiError):
    """403: the user may not move stock for this store or location."""


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    """400/422 rejected by the inventory service."""


class ConflictError(ApiError):
    """409 from the inventory service."""


class InsufficientStockError(ConflictError):
    """The source location no longer holds the requested quantity."""


class RateLimitError(ApiError):
    transient = True


class ServerError(ApiError):
    transient = True


class TransportError(ApiError):
    """No HTTP response at all: DNS, refused connection, TLS or read timeout."""

    transient = True


class SubmissionTimeoutError(TimeoutError):
    """The create call did not complete within the workflow's submit timeout."""

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Transfer creation timed out after {timeout_seconds:g}s")

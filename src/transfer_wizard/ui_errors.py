from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ApiError

GENERIC_FAILURE_MESSAGE = "Failed to create transfer"


@dataclass(frozen=True)
class UserFacingError:
    message: str
    details: str | None = None
    trace_id: str | None = None

    def with_reference(self) -> str:
        if not self.trace_id:
            return self.message
        return f"{self.message} (ref {self.trace_id})"


def to_user_facing_error(exc: ApiError) -> UserFacingError:
    details = f"{exc.code} (HTTP {exc.status_code}): {exc.message}"
    if exc.details:
        details = f"{details} {exc.details}"
    return UserFacingError(
        message=exc.message.strip() or GENERIC_FAILURE_MESSAGE,
        details=details,
        trace_id=exc.trace_id,
    )


def submission_error_message(exc: BaseException) -> str:
    """Banner text for a failed create: the error's own message, never rewritten by subtype."""
    if isinstance(exc, ApiError):
        return to_user_facing_error(exc).message
    return str(exc).strip() or GENERIC_FAILURE_MESSAGE

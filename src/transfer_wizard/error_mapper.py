from __future__ import annotations

from typing import Mapping

from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    ServerError,
    ValidationError,
)

_BY_STATUS: dict[int, type[ApiError]] = {
    400: ValidationError,
    401: AuthError,
    403: PermissionError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: RateLimitError,
}

# Service error codes that deserve a narrower class than their status.
_BY_CODE: dict[str, type[ApiError]] = {
    "INSUFFICIENT_STOCK": InsufficientStockError,
    "STOCK_UNAVAILABLE": InsufficientStockError,
}


def map_error(status_code: int, payload: Mapping[str, object] | None, trace_id: str | None) -> ApiError:
    body = dict(payload or {})
    code = str(body.get("code") or "HTTP_ERROR")
    body_trace_id = body.get("trace_id")
    error_cls = _BY_CODE.get(code) or _class_for_status(status_code)
    return error_cls(
        code=code,
        message=_message(body),
        status_code=status_code,
        details=body.get("details"),
        trace_id=str(body_trace_id) if body_trace_id is not None else trace_id,
        raw_payload=body,
    )


def _class_for_status(status_code: int) -> type[ApiError]:
    if status_code >= 500:
        return ServerError
    return _BY_STATUS.get(status_code, ApiError)


def _message(body: Mapping[str, object]) -> str:
    # FastAPI services put the reason under "detail".
    for key in ("message", "detail", "error"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return "Request failed"

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from .models import Location, TransferRequest


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    reason: str
    row_index: int | None = None


class ClientValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.issues:
            return "Validation failed"
        issue = self.issues[0]
        location = f"item {issue.row_index}" if issue.row_index is not None else "transfer"
        return f"{location} {issue.field}: {issue.reason}"


def validate_destination(source: Location, destination: Location) -> Location:
    if destination.id == source.id:
        _raise_issue("destination", "destination must differ from the source location")
    if not destination.is_active:
        _raise_issue("destination", "destination location is inactive")
    return destination


def validate_transfer_request(payload: TransferRequest | Mapping[str, Any]) -> TransferRequest:
    request = _coerce_request(payload)
    if request.source_location_id == request.destination_location_id:
        _raise_issue("destination_location_id", "source and destination must differ")
    if not request.items:
        _raise_issue("items", "items must not be empty")
    seen: set[str] = set()
    for idx, item in enumerate(request.items):
        if item.product_id in seen:
            _raise_issue("product_id", "product appears more than once", idx)
        seen.add(item.product_id)
    return request


def _coerce_request(payload: TransferRequest | Mapping[str, Any]) -> TransferRequest:
    if isinstance(payload, TransferRequest):
        return payload
    try:
        return TransferRequest.model_validate(payload)
    except PydanticValidationError as exc:
        issue = exc.errors()[0] if exc.errors() else {"loc": ("request",), "msg": "Invalid request"}
        loc = tuple(issue.get("loc", ("request",)))
        row_index = loc[1] if len(loc) > 1 and loc[0] == "items" and isinstance(loc[1], int) else None
        field = ".".join(str(part) for part in loc if not isinstance(part, int))
        _raise_issue(field, issue.get("msg", "Invalid request"), row_index)
        raise


def _raise_issue(field: str, reason: str, row_index: int | None = None) -> None:
    raise ClientValidationError([ValidationIssue(field=field, reason=reason, row_index=row_index)])

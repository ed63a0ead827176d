from __future__ import annotations

from typing import Iterable

from .models import Location, TransferItem, TransferRequest
from .selection import SelectionSet
from .transfer_validation import (
    ClientValidationError,
    ValidationIssue,
    validate_destination,
    validate_transfer_request,
)


class TransferRequestBuilder:
    """Assembles a transfer request from the source, a destination and a selection."""

    def __init__(
        self,
        source_location: Location,
        selection: SelectionSet | None = None,
        *,
        store_id: str | None = None,
        created_by_user_id: str | None = None,
    ) -> None:
        self.source_location = source_location
        self.selection = selection if selection is not None else SelectionSet()
        self.store_id = store_id
        self.created_by_user_id = created_by_user_id
        self.notes: str | None = None
        self._destination: Location | None = None

    @property
    def destination(self) -> Location | None:
        return self._destination

    def set_destination(self, location: Location) -> None:
        self._destination = validate_destination(self.source_location, location)

    def try_set_destination(self, location: Location) -> bool:
        try:
            self.set_destination(location)
        except ClientValidationError:
            return False
        return True

    def reset(self) -> None:
        self._destination = None
        self.notes = None
        self.selection.clear()

    def candidate_destinations(self, all_locations: Iterable[Location]) -> list[Location]:
        return [
            location
            for location in all_locations
            if location.id != self.source_location.id and location.is_active
        ]

    def missing_requirements(self) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        if self._destination is None:
            issues.append(ValidationIssue(field="destination", reason="destination is required"))
        if self.selection.total_quantity() <= 0:
            issues.append(ValidationIssue(field="items", reason="select at least one product"))
        return issues

    def can_build(self) -> bool:
        return not self.missing_requirements()

    def build(self) -> TransferRequest:
        issues = self.missing_requirements()
        if issues or self._destination is None:
            raise ClientValidationError(issues)
        notes = (self.notes or "").strip() or None
        request = TransferRequest(
            source_location_id=self.source_location.id,
            destination_location_id=self._destination.id,
            items=tuple(
                TransferItem(product_id=entry.product_id, quantity=entry.quantity)
                for entry in self.selection.items()
            ),
            notes=notes,
            store_id=self.store_id,
            created_by_user_id=self.created_by_user_id,
        )
        return validate_transfer_request(request)

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..idempotency import IdempotencyKeys, idempotency_headers, new_idempotency_keys
from ..models import Location, Product, TransferRequest, TransferResult
from ..transfer_validation import validate_transfer_request
from .base import BaseClient

logger = logging.getLogger(__name__)


@dataclass
class TransfersClient(BaseClient):
    """HTTP implementation of the transfer submission contract plus the catalog reads it relies on."""

    def create(
        self,
        request: TransferRequest,
        *,
        idempotency_keys: IdempotencyKeys | None = None,
    ) -> TransferResult:
        validated = validate_transfer_request(request)
        keys = idempotency_keys or new_idempotency_keys()
        logger.info(
            "transfer_create_request",
            extra={
                "transaction_id": keys.transaction_id,
                "source_location_id": validated.source_location_id,
                "destination_location_id": validated.destination_location_id,
                "item_count": len(validated.items),
            },
        )
        data = self._post(
            "/transfers",
            build_create_payload(validated, keys.transaction_id),
            headers=idempotency_headers(keys),
        )
        if not isinstance(data, dict):
            raise ValueError("Expected create transfer response to be a JSON object")
        result = TransferResult.from_api_payload(data)
        if result.item_count is None:
            result = result.model_copy(
                update={"item_count": len(validated.items), "total_quantity": float(validated.total_quantity)}
            )
        return result

    def get_transfer(self, transfer_id: str) -> TransferResult:
        data = self._get(f"/transfers/{transfer_id}")
        if not isinstance(data, dict):
            raise ValueError("Expected transfer response to be a JSON object")
        return TransferResult.from_api_payload(data)

    def list_locations(self) -> list[Location]:
        params = {"store_id": self.store_id} if self.store_id else None
        rows = _rows(self._get("/locations", params=params), "locations")
        return [Location.model_validate(row) for row in rows]

    def list_products(self, location_id: str) -> list[Product]:
        rows = _rows(self._get(f"/locations/{location_id}/products"), "products")
        return [Product.model_validate(row) for row in rows]


def build_create_payload(request: TransferRequest, transaction_id: str) -> dict[str, Any]:
    payload = request.model_dump(mode="json", exclude_none=True)
    payload["transaction_id"] = transaction_id
    return payload


def _rows(payload: Any, key: str) -> list[dict[str, Any]]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for candidate in (key, "rows", "items"):
            rows = payload.get(candidate)
            if isinstance(rows, list):
                return rows
    raise ValueError(f"Expected {key} response to contain a list")

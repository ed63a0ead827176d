from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Location(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)

    id: str
    name: str
    is_active: bool = True
    type: str | None = None
    address_line1: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None

    @property
    def display_address(self) -> str | None:
        parts = [part for part in (self.address_line1, self.city, self.state, self.zip) if part]
        return ", ".join(parts) if parts else None


class Product(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)

    id: str
    name: str
    sku: str | None = None
    available_stock: int = 0
    image_url: str | None = None

    @field_validator("available_stock", mode="before")
    @classmethod
    def _floor_stock(cls, value: Any) -> Any:
        # Oversold locations report negative stock; the workflow treats that as empty.
        if isinstance(value, (int, float)) and value < 0:
            return 0
        return value


class SelectionEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    product_name: str
    product_sku: str | None = None
    product_image: str | None = None
    quantity: int = Field(default=1, ge=1)
    product: Product

    @classmethod
    def for_product(cls, product: Product, quantity: int = 1) -> "SelectionEntry":
        return cls(
            product_id=product.id,
            product_name=product.name,
            product_sku=product.sku,
            product_image=product.image_url,
            quantity=quantity,
            product=product,
        )


class TransferItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    quantity: int = Field(ge=1)


class TransferRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_location_id: str
    destination_location_id: str
    items: tuple[TransferItem, ...]
    notes: str | None = None
    store_id: str | None = None
    created_by_user_id: str | None = None

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)


class TransferStatus(str, Enum):
    DRAFT = "draft"
    APPROVED = "approved"
    IN_TRANSIT = "in_transit"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


class TransferResult(BaseModel):
    """Record of a created transfer as returned by the inventory service."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    display_number: str
    qr_code: str
    status: TransferStatus = TransferStatus.IN_TRANSIT
    transfer_number: str | None = None
    source_location_id: str | None = None
    destination_location_id: str | None = None
    item_count: int | None = None
    total_quantity: float | None = None

    @model_validator(mode="before")
    @classmethod
    def _derive_display_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        derived = dict(data)
        transfer_number = derived.get("transfer_number")
        if not derived.get("display_number") and transfer_number:
            derived["display_number"] = f"#{transfer_number}"
        record_id = derived.get("id")
        if not derived.get("qr_code") and record_id:
            derived["qr_code"] = f"P{str(record_id).lower()}"
        return derived

    @classmethod
    def from_api_payload(cls, payload: dict[str, Any]) -> "TransferResult":
        body = payload.get("transfer") if isinstance(payload.get("transfer"), dict) else payload
        return cls.model_validate(body)

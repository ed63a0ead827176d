from __future__ import annotations

from typing import Iterable, Sequence, Union

from .models import Product, SelectionEntry
from .stock_constraint import clamp_quantity

# Product ids are stored as strings; numeric ids from callers are normalised.
ProductId = Union[str, int]


class SelectionSet:
    """Products chosen for a transfer, unique by product id, in insertion order.

    Quantity bounds come from the product snapshot captured when the product
    was added; they are not re-read from live stock afterwards.
    """

    def __init__(self) -> None:
        self._entries: dict[str, SelectionEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def toggle(self, product: Product) -> bool:
        """Add ``product`` with quantity 1, or remove it if already selected.

        Returns whether the product is selected after the call.
        """
        if product.id in self._entries:
            del self._entries[product.id]
            return False
        self._entries[product.id] = SelectionEntry.for_product(product)
        return True

    def set_quantity(self, product_id: ProductId, value: int | float) -> None:
        key = str(product_id)
        entry = self._entries.get(key)
        if entry is None:
            return
        quantity = clamp_quantity(entry.product, value)
        self._entries[key] = entry.model_copy(update={"quantity": quantity})

    def increment(self, product_id: ProductId) -> None:
        entry = self._entries.get(str(product_id))
        if entry is not None:
            self.set_quantity(product_id, entry.quantity + 1)

    def decrement(self, product_id: ProductId) -> None:
        # Never drops below one; removal goes through remove() or toggle().
        entry = self._entries.get(str(product_id))
        if entry is not None:
            self.set_quantity(product_id, entry.quantity - 1)

    def remove(self, product_id: ProductId) -> None:
        self._entries.pop(str(product_id), None)

    def clear(self) -> None:
        self._entries.clear()

    def items(self) -> tuple[SelectionEntry, ...]:
        return tuple(self._entries.values())

    def contains(self, product_id: ProductId) -> bool:
        return str(product_id) in self._entries

    def quantity_of(self, product_id: ProductId) -> int | None:
        entry = self._entries.get(str(product_id))
        return entry.quantity if entry else None

    def total_quantity(self) -> int:
        return sum(entry.quantity for entry in self._entries.values())


def filter_products(products: Iterable[Product], search_text: str | None) -> Sequence[Product]:
    """Case-insensitive match on product name or SKU; blank search keeps everything."""
    catalog = list(products)
    needle = (search_text or "").strip().lower()
    if not needle:
        return catalog
    return [
        product
        for product in catalog
        if needle in product.name.lower() or (product.sku is not None and needle in product.sku.lower())
    ]

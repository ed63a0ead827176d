"""Quantity bounds for products placed in a transfer.

The locally cached stock figure can be stale, and the inventory service
re-checks availability when the transfer is created. The client only
keeps selections inside a plausible range: at least one unit is always
selectable, and no more than the last known available stock otherwise.
"""

from __future__ import annotations

import math

from .models import Product

MIN_QUANTITY = 1


def max_quantity(product: Product) -> int:
    return max(MIN_QUANTITY, product.available_stock)


def clamp_quantity(product: Product, requested: int | float) -> int:
    if isinstance(requested, float):
        if math.isnan(requested):
            return MIN_QUANTITY
        if math.isinf(requested):
            return max_quantity(product) if requested > 0 else MIN_QUANTITY
        requested = int(requested)
    return min(max(int(requested), MIN_QUANTITY), max_quantity(product))

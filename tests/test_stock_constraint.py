from __future__ import annotations

import pytest

from transfer_wizard.models import Product
from transfer_wizard.stock_constraint import clamp_quantity, max_quantity


def test_max_quantity_never_below_one_for_empty_stock() -> None:
    assert max_quantity(Product(id="p", name="Empty", available_stock=0)) == 1


def test_negative_stock_reads_as_empty() -> None:
    product = Product(id="p", name="Oversold", available_stock=-4)
    assert product.available_stock == 0
    assert max_quantity(product) == 1


def test_max_quantity_uses_available_stock() -> None:
    assert max_quantity(Product(id="p", name="Stocked", available_stock=12)) == 12


@pytest.mark.parametrize(
    ("requested", "expected"),
    [
        (-10, 1),
        (0, 1),
        (1, 1),
        (3, 3),
        (5, 5),
        (6, 5),
        (10_000, 5),
        (2.9, 2),
        (float("inf"), 5),
        (float("-inf"), 1),
        (float("nan"), 1),
    ],
)
def test_clamp_quantity_bounds(requested: float, expected: int) -> None:
    product = Product(id="p", name="Five", available_stock=5)
    assert clamp_quantity(product, requested) == expected

from __future__ import annotations

import threading
import time

import pytest

from transfer_wizard.idempotency import IdempotencyKeys
from transfer_wizard.models import Location, Product, TransferRequest, TransferResult


class FakeSubmissionClient:
    def __init__(
        self,
        result: TransferResult | None = None,
        error: BaseException | None = None,
        delay_seconds: float = 0.0,
    ) -> None:
        self.result = result
        self.error = error
        self.delay_seconds = delay_seconds
        self.calls: list[tuple[TransferRequest, IdempotencyKeys | None]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def create(self, request: TransferRequest, *, idempotency_keys: IdempotencyKeys | None = None) -> TransferResult:
        with self._lock:
            self.calls.append((request, idempotency_keys))
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay_seconds:
                time.sleep(self.delay_seconds)
        finally:
            with self._lock:
                self.in_flight -= 1
        if self.error is not None:
            raise self.error
        if self.result is None:
            raise AssertionError("FakeSubmissionClient has no result configured")
        return self.result


@pytest.fixture
def warehouse() -> Location:
    return Location(id="loc-warehouse", name="Warehouse", type="warehouse")


@pytest.fixture
def downtown() -> Location:
    return Location(id="loc-downtown", name="Downtown", address_line1="1 Main St", city="Springfield")


@pytest.fixture
def uptown() -> Location:
    return Location(id="loc-uptown", name="Uptown")


@pytest.fixture
def closed_store() -> Location:
    return Location(id="loc-closed", name="Old Mall", is_active=False)


@pytest.fixture
def product_one() -> Product:
    return Product(id="1", name="Blue Dream 3.5g", sku="BD-35", available_stock=5)


@pytest.fixture
def product_two() -> Product:
    return Product(id="2", name="Gummies 10pk", sku="GUM-10", available_stock=3)


@pytest.fixture
def created_transfer() -> TransferResult:
    return TransferResult(id="tr-1", display_number="TRF-001", qr_code="Ptr-1", status="in_transit")


@pytest.fixture
def fake_client_factory():
    return FakeSubmissionClient

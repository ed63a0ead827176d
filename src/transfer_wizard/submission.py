from __future__ import annotations

from typing import Protocol, runtime_checkable

from .idempotency import IdempotencyKeys
from .models import TransferRequest, TransferResult


@runtime_checkable
class TransferSubmissionClient(Protocol):
    """Write boundary to the inventory service.

    ``create`` is a single blocking attempt with no retries of its own; the
    workflow runs it off the event loop. Any exception is a failed submission.
    """

    def create(
        self,
        request: TransferRequest,
        *,
        idempotency_keys: IdempotencyKeys | None = None,
    ) -> TransferResult: ...

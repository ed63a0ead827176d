from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from .models import TransferRequest


@dataclass(frozen=True)
class IdempotencyKeys:
    transaction_id: str
    idempotency_key: str


def new_idempotency_keys() -> IdempotencyKeys:
    return IdempotencyKeys(transaction_id=str(uuid.uuid4()), idempotency_key=str(uuid.uuid4()))


def idempotency_headers(keys: IdempotencyKeys) -> dict[str, str]:
    return {"Idempotency-Key": keys.idempotency_key}


@dataclass
class SubmissionKeys:
    """Hands out the same keys while an identical request is resubmitted.

    A create call that failed on the client side (timeout, dropped
    connection) may still have succeeded on the server; replaying it with
    the same key lets the service return the existing transfer instead of
    creating a second one. Any change to the request gets fresh keys.
    """

    _request: TransferRequest | None = field(default=None, repr=False)
    _keys: IdempotencyKeys | None = None

    def keys_for(self, request: TransferRequest) -> IdempotencyKeys:
        if self._keys is None or self._request != request:
            self._request = request
            self._keys = new_idempotency_keys()
        return self._keys

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import requests

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import TransportError

logger = logging.getLogger(__name__)

TRACE_HEADER = "X-Trace-ID"
_INBOUND_TRACE_HEADERS = (TRACE_HEADER, "X-Request-ID")
_IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})
_RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})

JsonBody = dict[str, Any] | list[Any] | None


@dataclass
class TraceContext:
    """Correlates one wizard session's requests with server-side logs."""

    trace_id: str | None = None

    def ensure(self) -> str:
        if not self.trace_id:
            self.trace_id = str(uuid.uuid4())
        return self.trace_id

    def absorb(self, headers: Mapping[str, str], payload: object = None) -> None:
        candidates: list[object] = []
        if isinstance(payload, Mapping):
            candidates.append(payload.get("trace_id"))
        candidates.extend(headers.get(name) for name in _INBOUND_TRACE_HEADERS)
        for candidate in candidates:
            if isinstance(candidate, str) and candidate:
                self.trace_id = candidate
                return


@dataclass
class HttpClient:
    """JSON over ``requests`` against the inventory service base URL.

    Idempotent reads are retried on transport failures and on 429/5xx with
    exponential backoff. Writes go out exactly once unless the caller passes
    ``retry_mutation=True``.
    """

    config: ClientConfig
    trace: TraceContext = field(default_factory=TraceContext)
    session: requests.Session = field(default_factory=requests.Session)

    def url_for(self, path: str) -> str:
        return f"{self.config.api_base_url.rstrip('/')}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
        retry_mutation: bool = False,
    ) -> JsonBody:
        verb = method.upper()
        outgoing = {"Accept": "application/json", **(headers or {}), TRACE_HEADER: self.trace.ensure()}
        retryable = verb in _IDEMPOTENT_METHODS or retry_mutation
        attempts = 1 + (self.config.retries if retryable else 0)

        started = time.monotonic()
        response = self._send(verb, path, attempts, headers=outgoing, json=json_body, params=params)
        logger.debug(
            "http_response",
            extra={
                "method": verb,
                "path": path,
                "status": response.status_code,
                "elapsed_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return self._decode(response)

    def _send(self, verb: str, path: str, attempts: int, **kwargs: Any) -> requests.Response:
        url = self.url_for(path)
        timeout = (self.config.connect_timeout_seconds, self.config.read_timeout_seconds)
        attempt = 0
        while True:
            attempt += 1
            try:
                response = self.session.request(
                    verb, url, timeout=timeout, verify=self.config.verify_ssl, **kwargs
                )
            except requests.RequestException as exc:
                if attempt >= attempts:
                    raise self._transport_error(verb, path, exc) from exc
            else:
                if response.status_code not in _RETRY_STATUSES or attempt >= attempts:
                    return response
            delay = self.config.retry_backoff_seconds * (2 ** (attempt - 1))
            logger.info(
                "http_retry",
                extra={"method": verb, "path": path, "attempt": attempt, "attempts": attempts, "delay": delay},
            )
            time.sleep(delay)

    def _transport_error(self, verb: str, path: str, exc: requests.RequestException) -> TransportError:
        logger.warning("http_transport_error", extra={"method": verb, "path": path, "error": type(exc).__name__})
        return TransportError(
            code="TRANSPORT_ERROR",
            message=str(exc) or type(exc).__name__,
            status_code=0,
            details={"type": type(exc).__name__},
            trace_id=self.trace.trace_id,
        )

    def _decode(self, response: requests.Response) -> JsonBody:
        if response.ok:
            self.trace.absorb(response.headers)
            return response.json() if response.content else None
        try:
            payload = response.json()
        except ValueError:
            payload = {"message": response.text}
        self.trace.absorb(response.headers, payload)
        raise map_error(
            response.status_code,
            payload if isinstance(payload, Mapping) else None,
            self.trace.trace_id,
        )

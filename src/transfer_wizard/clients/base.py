from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..http_client import HttpClient, JsonBody


@dataclass
class BaseClient:
    """Credentials for calls made on behalf of one store device."""

    http: HttpClient
    access_token: str | None = None
    store_id: str | None = None
    device_id: str | None = None

    def _headers(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        credentials = {
            "Authorization": f"Bearer {self.access_token}" if self.access_token else None,
            "X-Store-ID": self.store_id,
            "X-Device-ID": self.device_id,
        }
        headers = {name: value for name, value in credentials.items() if value}
        headers.update(extra or {})
        return headers

    def _get(self, path: str, *, params: Mapping[str, Any] | None = None) -> JsonBody:
        return self.http.request("GET", path, headers=self._headers(), params=params)

    def _post(self, path: str, body: dict[str, Any], *, headers: Mapping[str, str] | None = None) -> JsonBody:
        return self.http.request("POST", path, headers=self._headers(headers), json_body=body)

from __future__ import annotations

import pytest
import requests
import responses

from transfer_wizard.config import ClientConfig
from transfer_wizard.exceptions import ServerError, TransportError, ValidationError
from transfer_wizard.http_client import HttpClient, TraceContext

BASE_URL = "https://api.example.com"


def _http(retries: int = 2) -> HttpClient:
    cfg = ClientConfig(env_name="test", api_base_url=BASE_URL, retries=retries, retry_backoff_seconds=0)
    return HttpClient(cfg, trace=TraceContext())


@responses.activate
def test_get_retries_server_errors() -> None:
    responses.add(responses.GET, f"{BASE_URL}/locations", json={"message": "busy"}, status=503)
    responses.add(responses.GET, f"{BASE_URL}/locations", json=[{"id": "a", "name": "A"}], status=200)

    data = _http().request("GET", "/locations")

    assert data == [{"id": "a", "name": "A"}]
    assert len(responses.calls) == 2


@responses.activate
def test_get_gives_up_after_configured_retries() -> None:
    responses.add(responses.GET, f"{BASE_URL}/locations", json={"message": "down"}, status=502)

    with pytest.raises(ServerError, match="down"):
        _http(retries=1).request("GET", "/locations")

    assert len(responses.calls) == 2


@responses.activate
def test_post_is_not_retried() -> None:
    responses.add(responses.POST, f"{BASE_URL}/transfers", json={"message": "boom"}, status=500)

    with pytest.raises(ServerError):
        _http(retries=3).request("POST", "/transfers", json_body={})

    assert len(responses.calls) == 1


@responses.activate
def test_transport_error_carries_trace_id() -> None:
    http = _http(retries=0)
    with pytest.raises(TransportError) as excinfo:
        http.request("GET", "/locations")
    assert excinfo.value.status_code == 0
    assert excinfo.value.code == "TRANSPORT_ERROR"
    assert excinfo.value.trace_id == http.trace.trace_id


@responses.activate
def test_empty_body_and_non_json_error() -> None:
    responses.add(responses.GET, f"{BASE_URL}/ping", body="", status=204)
    responses.add(responses.GET, f"{BASE_URL}/broken", body="<html>gateway</html>", status=400)

    http = _http(retries=0)
    assert http.request("GET", "/ping") is None
    with pytest.raises(ValidationError) as excinfo:
        http.request("GET", "/broken")
    assert excinfo.value.message == "<html>gateway</html>"


@responses.activate
def test_trace_header_sent_and_refreshed_from_response() -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/locations",
        json=[],
        headers={"X-Request-ID": "server-trace"},
    )
    trace = TraceContext(trace_id="client-trace")
    cfg = ClientConfig(env_name="test", api_base_url=BASE_URL)
    HttpClient(cfg, trace=trace).request("GET", "/locations")

    assert responses.calls[0].request.headers["X-Trace-ID"] == "client-trace"
    assert trace.trace_id == "server-trace"


def test_trace_context_prefers_payload_id() -> None:
    trace = TraceContext()
    trace.absorb({"X-Trace-ID": "header"}, {"trace_id": "payload"})
    assert trace.trace_id == "payload"
    trace.absorb({}, None)
    assert trace.trace_id == "payload"
    assert trace.ensure() == "payload"


def test_defaults_give_each_client_its_own_session_and_trace() -> None:
    cfg = ClientConfig(env_name="test", api_base_url=BASE_URL)
    first = HttpClient(cfg)
    second = HttpClient(cfg)
    assert isinstance(first.session, requests.Session)
    assert isinstance(first.trace, TraceContext)
    assert first.session is not second.session
    assert first.trace is not second.trace

from __future__ import annotations

import asyncio

import pytest
import responses

from transfer_wizard import ApiSession, TransfersClient, TransferWorkflow, WizardScreen, load_config
from transfer_wizard.models import Location, Product
from transfer_wizard.telemetry import TelemetryLogger


@pytest.fixture
def session(monkeypatch: pytest.MonkeyPatch) -> ApiSession:
    monkeypatch.delenv("TRANSFER_WIZARD_ENV", raising=False)
    monkeypatch.delenv("TRANSFER_WIZARD_API_BASE_URL_DEV", raising=False)
    monkeypatch.setenv("TRANSFER_WIZARD_API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv("TRANSFER_WIZARD_SUBMIT_TIMEOUT_SECONDS", "5")
    return ApiSession(config=load_config(), access_token="token", store_id="store-1", user_id="user-9")


def test_session_builds_clients(session: ApiSession) -> None:
    client = session.transfers_client()
    assert isinstance(client, TransfersClient)
    assert client.store_id == "store-1"
    assert client.http.trace is session.trace


def test_session_shares_trace_with_telemetry(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("TRANSFER_WIZARD_API_BASE_URL", "https://api.example.com")
    telemetry = TelemetryLogger(enabled=False, log_file=tmp_path / "t.jsonl")
    session = ApiSession(config=load_config(), telemetry=telemetry)
    assert session.trace is not None
    assert telemetry.default_trace_id == session.trace.trace_id


@responses.activate
def test_session_workflow_submits_over_http(session: ApiSession) -> None:
    responses.add(
        responses.POST,
        "https://api.example.com/transfers",
        json={"id": "t-1", "transfer_number": "TRF-001"},
        status=201,
    )
    created = []
    workflow = session.new_transfer_workflow(
        Location(id="loc-warehouse", name="Warehouse"),
        on_transfer_created=created.append,
    )
    assert isinstance(workflow, TransferWorkflow)

    workflow.choose_destination(Location(id="loc-downtown", name="Downtown"))
    workflow.continue_to_products()
    workflow.toggle_product(Product(id="1", name="Blue Dream", available_stock=5))
    workflow.review()

    assert asyncio.run(workflow.submit()) is True
    assert workflow.screen is WizardScreen.SUCCESS
    sent = responses.calls[0].request
    assert b'"store_id": "store-1"' in sent.body or b'"store_id":"store-1"' in sent.body
    assert b"user-9" in sent.body
    workflow.acknowledge()
    assert [result.display_number for result in created] == ["#TRF-001"]

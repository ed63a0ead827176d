from __future__ import annotations

from transfer_wizard.exceptions import AuthError, InsufficientStockError, SubmissionTimeoutError, TransportError
from transfer_wizard.transfer_validation import ClientValidationError, ValidationIssue
from transfer_wizard.ui_errors import submission_error_message, to_user_facing_error


def test_stock_conflict_uses_server_message_and_keeps_details() -> None:
    exc = InsufficientStockError(
        code="INSUFFICIENT_STOCK",
        message="Only 2 units left at Warehouse",
        status_code=409,
        details={"product_id": "1"},
        trace_id="trace-1",
    )
    facing = to_user_facing_error(exc)
    assert facing.message == "Only 2 units left at Warehouse"
    assert facing.trace_id == "trace-1"
    assert facing.details is not None
    assert facing.details.startswith("INSUFFICIENT_STOCK (HTTP 409)")
    assert facing.with_reference() == "Only 2 units left at Warehouse (ref trace-1)"
    assert submission_error_message(exc) == "Only 2 units left at Warehouse"


def test_transport_and_auth_failures_show_their_own_message() -> None:
    transport = TransportError(code="TRANSPORT_ERROR", message="network timeout", status_code=0)
    facing = to_user_facing_error(transport)
    assert facing.message == "network timeout"
    assert facing.details == "TRANSPORT_ERROR (HTTP 0): network timeout"
    assert facing.with_reference() == "network timeout"
    assert submission_error_message(transport) == "network timeout"

    expired = AuthError(code="TOKEN_EXPIRED", message="jwt expired", status_code=401)
    assert submission_error_message(expired) == "jwt expired"


def test_blank_api_message_falls_back_to_generic() -> None:
    blank = TransportError(code="TRANSPORT_ERROR", message="  ", status_code=0)
    assert submission_error_message(blank) == "Failed to create transfer"


def test_submission_message_for_non_api_failures() -> None:
    assert submission_error_message(SubmissionTimeoutError(30)) == "Transfer creation timed out after 30s"
    invalid = ClientValidationError([ValidationIssue(field="items", reason="items must not be empty")])
    assert submission_error_message(invalid) == "transfer items: items must not be empty"
    assert submission_error_message(RuntimeError("network timeout")) == "network timeout"
    assert submission_error_message(RuntimeError("   ")) == "Failed to create transfer"

from __future__ import annotations

from dataclasses import dataclass

from .clients.transfers_client import TransfersClient
from .config import ClientConfig
from .http_client import HttpClient, TraceContext
from .models import Location
from .telemetry import TelemetryLogger
from .transfer_state import DismissCallback, TransferCreatedCallback, TransferWorkflow


@dataclass
class ApiSession:
    """Explicit wiring of config, credentials and the store the operator works in."""

    config: ClientConfig
    access_token: str | None = None
    store_id: str | None = None
    user_id: str | None = None
    device_id: str | None = None
    trace: TraceContext | None = None
    telemetry: TelemetryLogger | None = None

    def __post_init__(self) -> None:
        self.trace = self.trace or TraceContext()
        if self.telemetry is not None and self.telemetry.default_trace_id is None:
            self.telemetry.default_trace_id = self.trace.ensure()

    def _http(self) -> HttpClient:
        return HttpClient(config=self.config, trace=self.trace)

    def transfers_client(self) -> TransfersClient:
        return TransfersClient(
            http=self._http(),
            access_token=self.access_token,
            store_id=self.store_id,
            device_id=self.device_id,
        )

    def new_transfer_workflow(
        self,
        source_location: Location,
        *,
        on_transfer_created: TransferCreatedCallback | None = None,
        on_dismiss: DismissCallback | None = None,
    ) -> TransferWorkflow:
        return TransferWorkflow(
            source_location,
            self.transfers_client(),
            on_transfer_created=on_transfer_created,
            on_dismiss=on_dismiss,
            submit_timeout_seconds=self.config.submit_timeout_seconds,
            store_id=self.store_id,
            created_by_user_id=self.user_id,
            telemetry=self.telemetry,
        )

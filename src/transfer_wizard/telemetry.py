from __future__ import annotations

import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Literal, TextIO

from pydantic import BaseModel, ConfigDict, Field, field_validator

TELEMETRY_MODULE = "transfers"
TELEMETRY_ENABLED_ENV = "TRANSFER_WIZARD_TELEMETRY_ENABLED"

# Notes are free text typed by staff and can carry names or phone numbers.
_PII_CONTEXT_KEYS = frozenset({"email", "phone", "full_name", "address", "token", "authorization", "notes"})


class TelemetryEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: Literal["navigation", "api_call_result", "error"]
    name: str
    action: str
    module: str = TELEMETRY_MODULE
    timestamp_utc: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    trace_id: str | None = None
    duration_ms: int | None = Field(default=None, ge=0)
    success: bool | None = None
    error_code: str | None = None
    context: dict[str, Any] | None = None

    @field_validator("context")
    @classmethod
    def _reject_pii(cls, context: dict[str, Any] | None) -> dict[str, Any] | None:
        rejected = sorted(key for key in context or {} if key.lower() in _PII_CONTEXT_KEYS)
        if rejected:
            raise ValueError(f"PII-like keys are forbidden in telemetry context: {rejected}")
        return context

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


def build_event(*, now: datetime | None = None, **fields: Any) -> TelemetryEvent:
    """Validate and stamp an event; raises ``ValueError`` on unknown categories or PII context."""
    if now is not None:
        fields["timestamp_utc"] = now
    return TelemetryEvent(**fields)


class TelemetryLogger:
    """JSON-lines sink for wizard events.

    Off unless ``enabled`` is passed or TRANSFER_WIZARD_TELEMETRY_ENABLED is
    truthy. Events without a trace id pick up ``default_trace_id`` so that a
    whole wizard session can be joined with the HTTP trace header.
    """

    def __init__(
        self,
        *,
        app_name: str = "transfer_wizard",
        enabled: bool | None = None,
        log_file: str | Path | None = None,
        stdout_sink: bool = False,
        stdout_stream: TextIO | None = None,
        default_trace_id: str | None = None,
    ) -> None:
        self.app_name = app_name
        self.enabled = _telemetry_enabled_from_env() if enabled is None else enabled
        self.log_file = Path(log_file) if log_file else Path("artifacts") / "telemetry" / f"{app_name}.jsonl"
        self.stdout_sink = stdout_sink
        self.stdout_stream = stdout_stream
        self.default_trace_id = default_trace_id

    def emit(self, event: TelemetryEvent) -> bool:
        if not self.enabled:
            return False
        if event.trace_id is None and self.default_trace_id:
            event = event.model_copy(update={"trace_id": self.default_trace_id})

        line = json.dumps({**event.to_dict(), "app_name": self.app_name}, sort_keys=True) + "\n"
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        with self.log_file.open("a", encoding="utf-8") as fp:
            fp.write(line)
        if self.stdout_sink:
            stream = self.stdout_stream or sys.stdout
            stream.write(line)
            stream.flush()
        return True


def _telemetry_enabled_from_env() -> bool:
    return os.getenv(TELEMETRY_ENABLED_ENV, "0").strip().lower() in {"1", "true", "yes", "on"}

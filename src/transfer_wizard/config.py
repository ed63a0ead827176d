from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable

from dotenv import load_dotenv

ENV_PREFIX = "TRANSFER_WIZARD"
_TRUTHY = {"1", "true", "yes", "on"}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    api_base_url: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    retries: int = 3
    retry_backoff_seconds: float = 0.3
    submit_timeout_seconds: float = 30.0
    verify_ssl: bool = True

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()


def _var(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _raw(suffix: str) -> str | None:
    value = os.getenv(_var(suffix))
    if value is None or not value.strip():
        return None
    return value.strip()


def _number(
    suffix: str,
    default: float,
    *,
    cast: Callable[[str], float] = float,
    allow_zero: bool = False,
) -> float:
    raw = _raw(suffix)
    if raw is None:
        value = default
    else:
        try:
            value = cast(raw)
        except ValueError as exc:
            kind = "an integer" if cast is int else "a number"
            raise ConfigError(f"Invalid {_var(suffix)}: expected {kind}, got {raw!r}") from exc
    if value < 0 or (value == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise ConfigError(f"Invalid {_var(suffix)}: expected {bound}, got {value}")
    return value


def load_config(env_file: str | None = None) -> ClientConfig:
    """Read TRANSFER_WIZARD_* settings, letting a .env file fill in unset ones.

    ``TRANSFER_WIZARD_ENV`` picks a profile; ``TRANSFER_WIZARD_API_BASE_URL_<ENV>``
    wins over the plain ``TRANSFER_WIZARD_API_BASE_URL``.
    """
    load_dotenv(env_file)

    env_name = _raw("ENV") or "dev"
    api_base_url = _raw(f"API_BASE_URL_{env_name.upper()}") or _raw("API_BASE_URL")
    if not api_base_url:
        raise ConfigError(f"Missing required config values: {_var('API_BASE_URL')}")

    timeout = _number("TIMEOUT_SECONDS", 10.0)
    connect_timeout = _number("CONNECT_TIMEOUT_SECONDS", min(timeout, 5.0))
    read_timeout = _number("READ_TIMEOUT_SECONDS", max(timeout, connect_timeout))
    raw_ssl = _raw("VERIFY_SSL")

    return ClientConfig(
        env_name=env_name,
        api_base_url=api_base_url.rstrip("/"),
        connect_timeout_seconds=connect_timeout,
        read_timeout_seconds=read_timeout,
        retries=int(_number("RETRIES", 3, cast=int, allow_zero=True)),
        retry_backoff_seconds=_number("RETRY_BACKOFF_SECONDS", 0.3, allow_zero=True),
        # Bounds the whole create call as seen by the workflow.
        submit_timeout_seconds=_number("SUBMIT_TIMEOUT_SECONDS", 30.0),
        verify_ssl=True if raw_ssl is None else raw_ssl.lower() in _TRUTHY,
    )

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    api_base_url: str
    account_name: str | None = None
    account_key: str | None = None
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 30.0
    retries: int = 2
    retry_backoff_seconds: float = 0.3
    verify_ssl: bool = True


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load client settings from NOVA_* environment variables, with optional .env file."""
    load_dotenv(env_file)

    api_base_url = (os.getenv("NOVA_API_BASE_URL") or "").strip()
    _validate(bool(api_base_url), "Missing required config values: NOVA_API_BASE_URL")

    connect_timeout_seconds = _read_float("NOVA_CONNECT_TIMEOUT_SECONDS", "5")
    _validate(
        connect_timeout_seconds > 0,
        f"Invalid NOVA_CONNECT_TIMEOUT_SECONDS: expected > 0, got {connect_timeout_seconds}",
    )
    read_timeout_seconds = _read_float("NOVA_READ_TIMEOUT_SECONDS", "30")
    _validate(
        read_timeout_seconds > 0,
        f"Invalid NOVA_READ_TIMEOUT_SECONDS: expected > 0, got {read_timeout_seconds}",
    )
    retries = _read_int("NOVA_RETRIES", "2")
    _validate(retries >= 0, f"Invalid NOVA_RETRIES: expected >= 0, got {retries}")
    retry_backoff_seconds = _read_float("NOVA_RETRY_BACKOFF_SECONDS", "0.3")
    _validate(
        retry_backoff_seconds >= 0,
        f"Invalid NOVA_RETRY_BACKOFF_SECONDS: expected >= 0, got {retry_backoff_seconds}",
    )

    return ClientConfig(
        api_base_url=api_base_url.rstrip("/"),
        account_name=(os.getenv("NOVA_ACCOUNT_NAME") or "").strip() or None,
        account_key=os.getenv("NOVA_ACCOUNT_KEY") or None,
        connect_timeout_seconds=connect_timeout_seconds,
        read_timeout_seconds=read_timeout_seconds,
        retries=retries,
        retry_backoff_seconds=retry_backoff_seconds,
        verify_ssl=_coerce_bool(os.getenv("NOVA_VERIFY_SSL"), True),
    )

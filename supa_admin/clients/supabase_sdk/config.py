from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable

from dotenv import load_dotenv


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    anon_key: str
    service_role_key: str | None = None
    timeout_seconds: float = 15.0
    verify_ssl: bool = True
    users_table: str = "users"

    @property
    def rest_prefix(self) -> str:
        return "/rest/v1"

    @property
    def auth_prefix(self) -> str:
        return "/auth/v1"


def _require(values: dict[str, str | None], required: Iterable[str]) -> None:
    missing = [key for key in required if not values.get(key)]
    if missing:
        raise ConfigError(f"Missing required config values: {', '.join(missing)}")


def parse_bool(value: str | bool | None, default: bool = True) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default

    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load backend connection settings from the environment with optional .env override."""
    load_dotenv(env_file)

    base_url = (os.getenv("SUPA_ADMIN_URL") or "").strip()
    anon_key = (os.getenv("SUPA_ADMIN_ANON_KEY") or "").strip()
    _require({"SUPA_ADMIN_URL": base_url, "SUPA_ADMIN_ANON_KEY": anon_key}, ["SUPA_ADMIN_URL", "SUPA_ADMIN_ANON_KEY"])

    timeout_seconds = _read_float("SUPA_ADMIN_TIMEOUT_SECONDS", "15")
    if timeout_seconds <= 0:
        raise ConfigError(f"Invalid SUPA_ADMIN_TIMEOUT_SECONDS: expected > 0, got {timeout_seconds}")

    users_table = (os.getenv("SUPA_ADMIN_USERS_TABLE") or "users").strip()
    if not users_table.replace("_", "").isalnum():
        raise ConfigError(f"Invalid SUPA_ADMIN_USERS_TABLE: {users_table!r}")

    return ClientConfig(
        base_url=base_url.rstrip("/"),
        anon_key=anon_key,
        service_role_key=(os.getenv("SUPA_ADMIN_SERVICE_ROLE_KEY") or "").strip() or None,
        timeout_seconds=timeout_seconds,
        verify_ssl=parse_bool(os.getenv("SUPA_ADMIN_VERIFY_SSL"), default=True),
        users_table=users_table,
    )

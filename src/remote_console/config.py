"""
Settings loader for the remote console client.

Purpose:
- Centralize how client settings are assembled before the console starts.
- Keep tracing simple: YAML -> environment overrides -> ConsoleSettings ->
  ConsoleClient.

Sources:
- console.yaml (optional local file): a top-level "console" mapping.
- environment variables (.env is supported): override any YAML value.

Logic flow (high level):
1) load_settings() reads the YAML mapping if a path is given.
2) REMOTE_CONSOLE_* environment variables override individual keys.
3) The endpoint is normalized with resolve_endpoint().
4) build_console_client() turns ConsoleSettings into a ConsoleClient.

Tracing notes:
- Invalid values raise ValueError here, at setup time. Nothing on the logging
  path raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import os

import yaml

from .client import ConsoleClient
from .endpoint import DEFAULT_ENDPOINT, resolve_endpoint
from .models import ClientInfo
from .transport import Transport

ENV_ENDPOINT = "REMOTE_CONSOLE_ENDPOINT"
ENV_ENABLED = "REMOTE_CONSOLE_ENABLED"
ENV_CONNECT_TIMEOUT = "REMOTE_CONSOLE_CONNECT_TIMEOUT_SECONDS"
ENV_RESET_ON_SEND_ERROR = "REMOTE_CONSOLE_RESET_ON_SEND_ERROR"
ENV_DEBUG_LOGGING = "REMOTE_CONSOLE_DEBUG_LOGGING"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_ENV_LOADED = False


@dataclass(frozen=True)
class ConsoleSettings:
    """
    Resolved client settings.
    """

    endpoint: str = DEFAULT_ENDPOINT
    enabled: bool = True
    connect_timeout_seconds: float = 10.0
    reset_on_send_error: bool = False
    debug_logging: bool = False


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"'{name}' must be a boolean, got '{value}'.")


def _parse_timeout(name: str, value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{name}' must be a number, got '{value}'.") from exc
    if timeout <= 0:
        raise ValueError(f"'{name}' must be > 0.")
    return timeout


def _parse_env_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    if line.startswith("export "):
        line = line[len("export "):]
    key, value = (part.strip() for part in line.split("=", 1))
    value = value.strip("'\"")
    if not key or not value:
        return None
    return key, value


def _load_env_file(path: str = ".env") -> list[str]:
    """
    Apply a .env file once per process; variables already set win.

    Returns the names that were applied.
    """

    global _ENV_LOADED
    if _ENV_LOADED:
        return []
    _ENV_LOADED = True
    if not os.path.exists(path):
        return []

    applied: list[str] = []
    with open(path, "r", encoding="utf-8") as handle:
        for raw_line in handle:
            parsed = _parse_env_line(raw_line)
            if parsed is None or parsed[0] in os.environ:
                continue
            key, value = parsed
            os.environ[key] = value
            applied.append(key)
    return applied


def _read_yaml(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping.")
    section = raw.get("console", {})
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"'console' in {path} must be a mapping.")
    unknown = set(section) - set(ConsoleSettings.__dataclass_fields__)
    if unknown:
        raise ValueError(f"Unknown console settings: {sorted(unknown)}.")
    return section


def _env_overrides() -> dict[str, str]:
    mapping = {
        ENV_ENDPOINT: "endpoint",
        ENV_ENABLED: "enabled",
        ENV_CONNECT_TIMEOUT: "connect_timeout_seconds",
        ENV_RESET_ON_SEND_ERROR: "reset_on_send_error",
        ENV_DEBUG_LOGGING: "debug_logging",
    }
    overrides: dict[str, str] = {}
    for env_name, key in mapping.items():
        value = os.getenv(env_name)
        if value is None or value == "":
            continue
        overrides[key] = value
    return overrides


def load_settings(path: str | None = None, *, env_file: str = ".env") -> ConsoleSettings:
    """
    Load client settings from YAML and the environment.

    Inputs:
    - path: optional console.yaml path. Missing keys use defaults.
    - env_file: .env file read once per process.

    Outputs:
    - ConsoleSettings with a resolved endpoint.

    Next:
    - Pass to build_console_client() or console.init_console().
    """

    _load_env_file(env_file)

    values: dict[str, Any] = _read_yaml(path) if path else {}
    values.update(_env_overrides())

    endpoint = values.get("endpoint")
    defaults = ConsoleSettings()
    return ConsoleSettings(
        endpoint=resolve_endpoint(None if endpoint is None else str(endpoint)),
        enabled=_parse_bool("enabled", values.get("enabled", defaults.enabled)),
        connect_timeout_seconds=_parse_timeout(
            "connect_timeout_seconds",
            values.get("connect_timeout_seconds", defaults.connect_timeout_seconds),
        ),
        reset_on_send_error=_parse_bool(
            "reset_on_send_error",
            values.get("reset_on_send_error", defaults.reset_on_send_error),
        ),
        debug_logging=_parse_bool(
            "debug_logging", values.get("debug_logging", defaults.debug_logging)
        ),
    )


def build_console_client(
    settings: ConsoleSettings,
    *,
    transport: Transport | None = None,
    client_info: ClientInfo | None = None,
) -> ConsoleClient:
    """
    Create a ConsoleClient for resolved settings.
    """

    return ConsoleClient(
        endpoint=settings.endpoint,
        enabled=settings.enabled,
        connect_timeout_seconds=settings.connect_timeout_seconds,
        reset_on_send_error=settings.reset_on_send_error,
        debug_logging=settings.debug_logging,
        client_info=client_info,
        transport=transport,
    )

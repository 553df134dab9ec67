"""
Wire models for the remote console protocol.

Purpose:
- Provide typed views of log arguments and client metadata.
- Build the exact envelope the collector parses.

Notes:
- payload.data is JSON text embedded as a string (double encoded). Collectors
  depend on this shape, do not flatten it into a nested object.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable
import json
import math
import time

CLIENT_LANGUAGE = "python"

LOG = "log"
INFO = "info"
WARN = "warn"
ERROR = "error"
GROUP = "group"
GROUP_COLLAPSED = "groupCollapsed"
GROUP_END = "groupEnd"
LOG_TYPES = frozenset({LOG, INFO, WARN, ERROR, GROUP, GROUP_COLLAPSED, GROUP_END})


@dataclass(frozen=True)
class ClientInfo:
    """
    Static description of the running process, attached to every envelope.
    """

    id: str
    name: str
    platform: str
    version: str
    os: str
    os_version: str
    language: str
    time_zone: str
    user_agent: str

    def to_wire(self) -> dict[str, str]:
        # Keys are the field names as declared (snake_case).
        return {
            "id": self.id,
            "name": self.name,
            "platform": self.platform,
            "version": self.version,
            "os": self.os,
            "os_version": self.os_version,
            "language": self.language,
            "time_zone": self.time_zone,
            "user_agent": self.user_agent,
        }


@dataclass(frozen=True)
class LogArg:
    """
    Base class for a single log argument.
    """

    def to_wire(self) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class TextArg(LogArg):
    value: str

    def to_wire(self) -> str:
        return self.value


@dataclass(frozen=True)
class NumberArg(LogArg):
    value: float | int

    def to_wire(self) -> float | int | None:
        # NaN/inf have no JSON form.
        if isinstance(self.value, float) and not math.isfinite(self.value):
            return None
        return self.value


@dataclass(frozen=True)
class BoolArg(LogArg):
    value: bool

    def to_wire(self) -> bool:
        return self.value


@dataclass(frozen=True)
class JsonArg(LogArg):
    """
    Arbitrary JSON structure. Use from_value() to normalize Python objects.
    """

    value: Any

    @classmethod
    def from_value(cls, value: Any) -> "JsonArg":
        # Round-trip through JSON text so only plain JSON types remain.
        return cls(json.loads(json.dumps(value, default=str)))

    def to_wire(self) -> Any:
        return self.value


def to_log_arg(value: Any) -> LogArg:
    """
    Coerce a plain Python value into a LogArg.
    """

    if isinstance(value, LogArg):
        return value
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return BoolArg(value)
    if isinstance(value, (int, float)):
        return NumberArg(value)
    if isinstance(value, str):
        return TextArg(value)
    if value is None or isinstance(value, (dict, list, tuple)):
        return JsonArg.from_value(value)
    return TextArg(str(value))


def build_envelope(
    log_type: str,
    args: Iterable[Any],
    client_info: ClientInfo,
    *,
    timestamp: int | None = None,
) -> dict[str, Any]:
    """
    Build the envelope dict for one logging call.

    Inputs:
    - log_type: one of LOG_TYPES.
    - args: log arguments (plain values or LogArg instances).
    - client_info: metadata embedded in payload.data.
    - timestamp: epoch seconds, defaults to now.

    Outputs:
    - Dict ready for encode_envelope().
    """

    if log_type not in LOG_TYPES:
        raise ValueError(f"Unsupported log type '{log_type}'.")
    inner = {
        "clientInfo": client_info.to_wire(),
        "data": [to_log_arg(arg).to_wire() for arg in args],
    }
    return {
        "timestamp": int(time.time()) if timestamp is None else timestamp,
        "logType": log_type,
        "language": CLIENT_LANGUAGE,
        "secure": False,
        "payload": {"data": _dumps(inner)},
    }


def encode_envelope(envelope: dict[str, Any]) -> str:
    return _dumps(envelope)


def decode_payload_data(envelope: dict[str, Any]) -> dict[str, Any]:
    """
    Decode the double encoded payload.data back into a dict.
    """

    return json.loads(envelope["payload"]["data"])


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)

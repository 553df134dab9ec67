"""
Remote console client.

Sends console-style log events (log/info/warn/error and nested groups) as
JSON frames over a WebSocket to a remote log collector. The public surface is
re-exported here; each concern lives in its own small module.
"""

from .endpoint import DEFAULT_ENDPOINT, DEFAULT_PORT, resolve_endpoint
from .models import (
    ClientInfo,
    LogArg,
    TextArg,
    NumberArg,
    BoolArg,
    JsonArg,
    to_log_arg,
    build_envelope,
    encode_envelope,
    decode_payload_data,
)
from .environment import current_client_info, collect_client_info
from .transport import (
    RemoteConsoleError,
    ConnectError,
    SendError,
    WebSocketTransport,
    WebSocketConnection,
)
from .stats import DispatchStats, DispatchStatsSnapshot
from .client import ConsoleClient
from .async_client import AsyncConsoleClient
from .config import ConsoleSettings, load_settings, build_console_client
from .console import init_console, get_console, shutdown_console
from .handler import RemoteConsoleHandler
from .logging_config import setup_logging

__all__ = [
    "DEFAULT_ENDPOINT",
    "DEFAULT_PORT",
    "resolve_endpoint",
    "ClientInfo",
    "LogArg",
    "TextArg",
    "NumberArg",
    "BoolArg",
    "JsonArg",
    "to_log_arg",
    "build_envelope",
    "encode_envelope",
    "decode_payload_data",
    "current_client_info",
    "collect_client_info",
    "RemoteConsoleError",
    "ConnectError",
    "SendError",
    "WebSocketTransport",
    "WebSocketConnection",
    "DispatchStats",
    "DispatchStatsSnapshot",
    "ConsoleClient",
    "AsyncConsoleClient",
    "ConsoleSettings",
    "load_settings",
    "build_console_client",
    "init_console",
    "get_console",
    "shutdown_console",
    "RemoteConsoleHandler",
    "setup_logging",
]

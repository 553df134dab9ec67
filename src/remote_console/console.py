"""
Process-wide console.

Purpose:
- Hold the single ConsoleClient shared by the whole process.
- Offer console-style module functions so call sites stay short:
  console.log("ready"), console.group("request"), ...

Lifecycle:
1) init_console(settings) creates the client once (explicit setup).
2) get_console() returns it, creating a default client on first use when
   init_console() was never called.
3) shutdown_console() closes the connection and forgets the client; a later
   call starts over.
"""

from __future__ import annotations

from typing import Any
import threading

from .client import ConsoleClient
from .config import ConsoleSettings, build_console_client
from .models import ClientInfo
from .transport import Transport

_console: ConsoleClient | None = None
_console_lock = threading.Lock()


def init_console(
    settings: ConsoleSettings | None = None,
    *,
    transport: Transport | None = None,
    client_info: ClientInfo | None = None,
) -> ConsoleClient:
    """
    Create the process console.

    Raises RuntimeError if it already exists; call shutdown_console() first to
    replace it.
    """

    global _console
    with _console_lock:
        if _console is not None:
            raise RuntimeError("Remote console already initialized.")
        _console = build_console_client(
            settings or ConsoleSettings(), transport=transport, client_info=client_info
        )
        return _console


def get_console() -> ConsoleClient:
    global _console
    with _console_lock:
        if _console is None:
            _console = build_console_client(ConsoleSettings())
        return _console


def shutdown_console() -> None:
    global _console
    with _console_lock:
        console, _console = _console, None
    if console is not None:
        console.close()


def set_endpoint(raw: str | None) -> None:
    get_console().set_endpoint(raw)


def set_enabled(enabled: bool) -> None:
    get_console().set_enabled(enabled)


def log(*args: Any) -> None:
    get_console().log(*args)


def info(*args: Any) -> None:
    get_console().info(*args)


def warn(*args: Any) -> None:
    get_console().warn(*args)


def error(*args: Any) -> None:
    get_console().error(*args)


def group(label: str) -> None:
    get_console().group(label)


def group_collapsed(label: str) -> None:
    get_console().group_collapsed(label)


def group_end() -> None:
    get_console().group_end()

"""
Bridge from the standard logging module to the remote console.

Attach RemoteConsoleHandler to any logger to mirror its records remotely:

    logging.getLogger().addHandler(RemoteConsoleHandler())

Records raised while a forward is already running on the same thread (for
example websockets' own DEBUG output during connect or send) are dropped;
forwarding them would re-enter the client lock held by that thread.
"""

from __future__ import annotations

import logging
import threading

from .client import ConsoleClient
from .console import get_console
from .models import ERROR, INFO, LOG, WARN

# Loggers whose records are never forwarded: the client's own diagnostics
# and the transport libraries it calls into.
SKIPPED_LOGGERS = ("remote_console", "websockets", "aiohttp")


def log_type_for_level(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return ERROR
    if levelno >= logging.WARNING:
        return WARN
    if levelno >= logging.INFO:
        return INFO
    return LOG


def _is_skipped(name: str) -> bool:
    return any(name == prefix or name.startswith(prefix + ".") for prefix in SKIPPED_LOGGERS)


class RemoteConsoleHandler(logging.Handler):
    """
    Logging handler that sends each formatted record as one log argument.

    With no client given, the process console (console.get_console()) is used
    at emit time.
    """

    def __init__(self, client: ConsoleClient | None = None, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._client = client
        self._forwarding = threading.local()

    def _target(self) -> ConsoleClient:
        if self._client is not None:
            return self._client
        return get_console()

    def emit(self, record: logging.LogRecord) -> None:
        if _is_skipped(record.name):
            return
        if getattr(self._forwarding, "active", False):
            return
        self._forwarding.active = True
        try:
            message = self.format(record)
            client = self._target()
            method = getattr(client, log_type_for_level(record.levelno))
            method(message)
        except Exception:
            self.handleError(record)
        finally:
            self._forwarding.active = False

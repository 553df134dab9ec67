"""
Synchronous remote console client.

Purpose:
- Own the endpoint, the (lazy) connection and the group stack.
- Expose console-style calls (log/info/warn/error/group...) that never raise.

Sources:
- endpoint: resolve_endpoint() (default ws://localhost:9090).
- client_info: environment.current_client_info(), collected once per process.

Logic flow:
1) A logging call takes the client lock.
2) Group calls push/pop the stack; disabled clients stop here.
3) If no connection exists, transport.connect() is attempted (bounded by
   connect_timeout_seconds). A ConnectError is logged and the call returns.
4) The envelope is built and encoded while still holding the lock.
5) The lock is released and the frame is sent on the captured connection.
   A SendError is logged and the message dropped.

Tracing notes:
- Diagnostics go to this module's logger at WARNING; callers never see them
  as exceptions.
- A failed send keeps the connection unless reset_on_send_error is set, so a
  dead socket keeps failing until set_endpoint() is called.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable
import logging
import threading

from .endpoint import DEFAULT_ENDPOINT, resolve_endpoint
from .environment import current_client_info
from .models import (
    ERROR,
    GROUP,
    GROUP_COLLAPSED,
    GROUP_END,
    INFO,
    LOG,
    WARN,
    ClientInfo,
    build_envelope,
    encode_envelope,
)
from .stats import DispatchStats
from .transport import Connection, ConnectError, SendError, Transport, WebSocketTransport

logger = logging.getLogger(__name__)


@dataclass
class ConsoleClient:
    """
    Remote console client. Safe to share between threads.
    """

    endpoint: str = DEFAULT_ENDPOINT
    enabled: bool = True
    connect_timeout_seconds: float = 10.0
    reset_on_send_error: bool = False
    debug_logging: bool = False
    client_info: ClientInfo | None = None
    transport: Transport | None = None
    stats: DispatchStats = field(default_factory=DispatchStats)

    def __post_init__(self) -> None:
        self.endpoint = resolve_endpoint(self.endpoint)
        if self.client_info is None:
            self.client_info = current_client_info()
        if self.transport is None:
            self.transport = WebSocketTransport(
                connect_timeout_seconds=self.connect_timeout_seconds
            )
        self._lock = threading.Lock()
        self._connection: Connection | None = None
        self._group_stack: list[str] = []

    def __enter__(self) -> "ConsoleClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @property
    def group_stack(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._group_stack)

    @property
    def group_depth(self) -> int:
        return len(self._group_stack)

    def set_endpoint(self, raw: str | None) -> None:
        """
        Point the client at a new collector.

        The current connection is dropped; the next logging call reconnects.
        """

        with self._lock:
            self.endpoint = resolve_endpoint(raw)
            stale, self._connection = self._connection, None
        if stale is not None:
            stale.close()

    def set_enabled(self, enabled: bool) -> None:
        with self._lock:
            self.enabled = enabled

    def close(self) -> None:
        with self._lock:
            stale, self._connection = self._connection, None
        if stale is not None:
            stale.close()

    def log(self, *args: Any) -> None:
        self._emit(LOG, args)

    def info(self, *args: Any) -> None:
        self._emit(INFO, args)

    def warn(self, *args: Any) -> None:
        self._emit(WARN, args)

    def error(self, *args: Any) -> None:
        self._emit(ERROR, args)

    def group(self, label: str) -> None:
        with self._lock:
            self._group_stack.append(label)
            prepared = self._prepare(GROUP, [label])
        self._deliver(prepared, GROUP)

    def group_collapsed(self, label: str) -> None:
        with self._lock:
            self._group_stack.append(label)
            prepared = self._prepare(GROUP_COLLAPSED, [label])
        self._deliver(prepared, GROUP_COLLAPSED)

    def group_end(self) -> None:
        with self._lock:
            if not self._group_stack:
                return
            self._group_stack.pop()
            prepared = self._prepare(GROUP_END, [""])
        self._deliver(prepared, GROUP_END)

    def _emit(self, log_type: str, args: Iterable[Any]) -> None:
        with self._lock:
            prepared = self._prepare(log_type, args)
        self._deliver(prepared, log_type)

    def _prepare(
        self, log_type: str, args: Iterable[Any]
    ) -> tuple[Connection, str] | None:
        # Caller holds self._lock.
        if not self.enabled:
            return None

        if self._connection is None:
            try:
                self._connection = self.transport.connect(self.endpoint)
            except ConnectError as exc:
                logger.warning(
                    "Failed to connect to WebSocket server: %s",
                    exc,
                    extra={"endpoint": self.endpoint, "log_type": log_type},
                )
                self.stats.record_connect_error(str(exc))
                return None

        try:
            envelope = build_envelope(log_type, args, self.client_info)
            frame = encode_envelope(envelope)
        except (TypeError, ValueError) as exc:
            logger.warning(
                "Dropping %s message that cannot be encoded: %s",
                log_type,
                exc,
                extra={"endpoint": self.endpoint, "log_type": log_type},
            )
            return None
        return self._connection, frame

    def _deliver(self, prepared: tuple[Connection, str] | None, log_type: str) -> None:
        if prepared is None:
            return
        connection, frame = prepared
        try:
            connection.send(frame)
        except SendError as exc:
            logger.warning(
                "Failed to send log message: %s",
                exc,
                extra={"endpoint": connection.endpoint, "log_type": log_type},
            )
            self.stats.record_send_error(str(exc))
            if self.reset_on_send_error:
                self._discard(connection)
            return

        self.stats.record_sent()
        if self.debug_logging:
            logger.info("WS %s %s", log_type, connection.endpoint)

    def _discard(self, connection: Connection) -> None:
        with self._lock:
            if self._connection is not connection:
                # Already replaced by set_endpoint() or another caller.
                return
            self._connection = None
        connection.close()

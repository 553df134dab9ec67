"""
Async remote console client.

Purpose:
- Same console calls as ConsoleClient for code that runs on an event loop.
- Uses aiohttp's WebSocket client instead of a blocking socket.

Logic flow:
1) The caller instantiates AsyncConsoleClient (optionally as a context
   manager so the aiohttp session is closed).
2) Each call awaits the client lock, connects lazily with ws_connect()
   bounded by connect_timeout_seconds, and sends one text frame.
3) Connect/send failures are logged and the message dropped.

Notes:
- The lock is held through the send, so frames leave in call order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable
import asyncio
import logging

import aiohttp

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

logger = logging.getLogger(__name__)


@dataclass
class AsyncConsoleClient:
    """
    Async remote console client backed by aiohttp.
    """

    endpoint: str = DEFAULT_ENDPOINT
    enabled: bool = True
    connect_timeout_seconds: float = 10.0
    reset_on_send_error: bool = False
    debug_logging: bool = False
    client_info: ClientInfo | None = None
    stats: DispatchStats = field(default_factory=DispatchStats)
    _session: aiohttp.ClientSession | None = None
    _ws: aiohttp.ClientWebSocketResponse | None = None

    def __post_init__(self) -> None:
        self.endpoint = resolve_endpoint(self.endpoint)
        if self.client_info is None:
            self.client_info = current_client_info()
        self._lock = asyncio.Lock()
        self._group_stack: list[str] = []

    async def __aenter__(self) -> "AsyncConsoleClient":
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def connected(self) -> bool:
        return self._ws is not None

    @property
    def group_depth(self) -> int:
        return len(self._group_stack)

    async def close(self) -> None:
        async with self._lock:
            await self._close_ws()
            if self._session is not None:
                await self._session.close()
                self._session = None

    async def set_endpoint(self, raw: str | None) -> None:
        async with self._lock:
            self.endpoint = resolve_endpoint(raw)
            await self._close_ws()

    async def set_enabled(self, enabled: bool) -> None:
        async with self._lock:
            self.enabled = enabled

    async def log(self, *args: Any) -> None:
        await self._emit(LOG, args)

    async def info(self, *args: Any) -> None:
        await self._emit(INFO, args)

    async def warn(self, *args: Any) -> None:
        await self._emit(WARN, args)

    async def error(self, *args: Any) -> None:
        await self._emit(ERROR, args)

    async def group(self, label: str) -> None:
        async with self._lock:
            self._group_stack.append(label)
            await self._dispatch(GROUP, [label])

    async def group_collapsed(self, label: str) -> None:
        async with self._lock:
            self._group_stack.append(label)
            await self._dispatch(GROUP_COLLAPSED, [label])

    async def group_end(self) -> None:
        async with self._lock:
            if not self._group_stack:
                return
            self._group_stack.pop()
            await self._dispatch(GROUP_END, [""])

    async def _emit(self, log_type: str, args: Iterable[Any]) -> None:
        async with self._lock:
            await self._dispatch(log_type, args)

    async def _dispatch(self, log_type: str, args: Iterable[Any]) -> None:
        # Caller holds self._lock.
        if not self.enabled:
            return
        if self._ws is None and not await self._connect(log_type):
            return

        try:
            frame = encode_envelope(build_envelope(log_type, args, self.client_info))
        except (TypeError, ValueError) as exc:
            logger.warning(
                "Dropping %s message that cannot be encoded: %s",
                log_type,
                exc,
                extra={"endpoint": self.endpoint, "log_type": log_type},
            )
            return

        try:
            await self._ws.send_str(frame)
        except (aiohttp.ClientError, OSError, RuntimeError) as exc:
            logger.warning(
                "Failed to send log message to %s: %s",
                self.endpoint,
                exc,
                extra={"endpoint": self.endpoint, "log_type": log_type},
            )
            self.stats.record_send_error(str(exc))
            if self.reset_on_send_error:
                await self._close_ws()
            return

        self.stats.record_sent()
        if self.debug_logging:
            logger.info("WS %s %s", log_type, self.endpoint)

    async def _connect(self, log_type: str) -> bool:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        try:
            self._ws = await asyncio.wait_for(
                self._session.ws_connect(self.endpoint),
                timeout=self.connect_timeout_seconds,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as exc:
            logger.warning(
                "Failed to connect to WebSocket server %s: %s",
                self.endpoint,
                exc,
                extra={"endpoint": self.endpoint, "log_type": log_type},
            )
            self.stats.record_connect_error(str(exc))
            return False
        return True

    async def _close_ws(self) -> None:
        ws, self._ws = self._ws, None
        if ws is None:
            return
        try:
            await ws.close()
        except (aiohttp.ClientError, OSError):
            pass

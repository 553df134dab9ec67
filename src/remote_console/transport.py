"""
WebSocket transport for the remote console.

Purpose:
- Hide the websockets library behind a connect/send/close boundary.
- Translate library and socket failures into ConnectError / SendError so the
  client has exactly two error paths to handle.

Logic flow:
1) ConsoleClient calls transport.connect(endpoint) when it has no connection.
2) The returned WebSocketConnection sends one text frame per log call.
3) Any failure is re-raised as a RemoteConsoleError subclass with the
   original exception chained.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from websockets.exceptions import WebSocketException
from websockets.sync.client import ClientConnection, connect


class RemoteConsoleError(Exception):
    """
    Base error for transport failures.
    """

    def __init__(self, message: str, *, endpoint: str) -> None:
        super().__init__(message)
        self.endpoint = endpoint


class ConnectError(RemoteConsoleError):
    """
    Connection to the collector could not be established.
    """


class SendError(RemoteConsoleError):
    """
    A frame could not be delivered on an existing connection.
    """


class Connection(Protocol):
    endpoint: str

    def send(self, text: str) -> None: ...

    def close(self) -> None: ...


class Transport(Protocol):
    def connect(self, endpoint: str) -> Connection: ...


@dataclass
class WebSocketConnection:
    """
    Live WebSocket connection that sends text frames.
    """

    endpoint: str
    socket: ClientConnection

    def send(self, text: str) -> None:
        try:
            self.socket.send(text)
        except (WebSocketException, OSError) as exc:
            raise SendError(
                f"Failed to send frame to {self.endpoint}: {exc}", endpoint=self.endpoint
            ) from exc

    def close(self) -> None:
        try:
            self.socket.close()
        except (WebSocketException, OSError):
            # Closing a broken socket has nothing left to report.
            pass


@dataclass
class WebSocketTransport:
    """
    Synchronous transport built on websockets.sync.client.
    """

    connect_timeout_seconds: float = 10.0

    def connect(self, endpoint: str) -> WebSocketConnection:
        try:
            socket = connect(endpoint, open_timeout=self.connect_timeout_seconds)
        except (WebSocketException, OSError, ValueError) as exc:
            raise ConnectError(
                f"Failed to connect to {endpoint}: {exc}", endpoint=endpoint
            ) from exc
        return WebSocketConnection(endpoint=endpoint, socket=socket)

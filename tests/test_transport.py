from __future__ import annotations

import pytest
from websockets.exceptions import WebSocketException

from remote_console import transport as transport_module
from remote_console.transport import ConnectError, SendError, WebSocketTransport


class DummySocket:
    def __init__(self, error: Exception | None = None):
        self.sent = []
        self.closed = False
        self._error = error

    def send(self, text):
        if self._error is not None:
            raise self._error
        self.sent.append(text)

    def close(self):
        self.closed = True


def test_connect_passes_open_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []

    def fake_connect(uri, *, open_timeout):
        calls.append((uri, open_timeout))
        return DummySocket()

    monkeypatch.setattr(transport_module, "connect", fake_connect)
    connection = WebSocketTransport(connect_timeout_seconds=2.5).connect("ws://10.0.0.1:9090")
    assert calls == [("ws://10.0.0.1:9090", 2.5)]
    connection.send("frame")
    assert connection.socket.sent == ["frame"]


@pytest.mark.parametrize(
    "error",
    [ConnectionRefusedError("refused"), TimeoutError("timed out"), WebSocketException("bad handshake")],
)
def test_connect_failures_become_connect_error(monkeypatch: pytest.MonkeyPatch, error) -> None:
    def fake_connect(uri, *, open_timeout):
        raise error

    monkeypatch.setattr(transport_module, "connect", fake_connect)
    with pytest.raises(ConnectError) as excinfo:
        WebSocketTransport().connect("ws://localhost:9090")
    assert excinfo.value.endpoint == "ws://localhost:9090"
    assert excinfo.value.__cause__ is error


def test_send_failure_becomes_send_error() -> None:
    socket = DummySocket(error=BrokenPipeError("pipe"))
    connection = transport_module.WebSocketConnection(endpoint="ws://h:1", socket=socket)
    with pytest.raises(SendError) as excinfo:
        connection.send("frame")
    assert isinstance(excinfo.value.__cause__, BrokenPipeError)


def test_close_closes_socket() -> None:
    socket = DummySocket()
    connection = transport_module.WebSocketConnection(endpoint="ws://h:1", socket=socket)
    connection.close()
    assert socket.closed is True

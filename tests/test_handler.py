from __future__ import annotations

import json
import logging
import threading
import time

import pytest
from websockets.sync.server import serve

from remote_console import console
from remote_console.client import ConsoleClient
from remote_console.handler import RemoteConsoleHandler, log_type_for_level


@pytest.fixture
def app_logger():
    logger = logging.getLogger("tests.app")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    yield logger
    logger.handlers.clear()
    logger.propagate = True


def test_level_mapping() -> None:
    assert log_type_for_level(logging.CRITICAL) == "error"
    assert log_type_for_level(logging.ERROR) == "error"
    assert log_type_for_level(logging.WARNING) == "warn"
    assert log_type_for_level(logging.INFO) == "info"
    assert log_type_for_level(logging.DEBUG) == "log"


def test_records_are_forwarded(app_logger, transport, client_info) -> None:
    client = ConsoleClient(transport=transport, client_info=client_info)
    handler = RemoteConsoleHandler(client)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    app_logger.addHandler(handler)

    app_logger.debug("starting")
    app_logger.warning("disk at %d%%", 91)

    envelopes = transport.envelopes()
    assert [e["logType"] for e in envelopes] == ["log", "warn"]
    assert json.loads(envelopes[1]["payload"]["data"])["data"] == ["tests.app: disk at 91%"]


def test_own_diagnostics_are_skipped(transport, client_info) -> None:
    client = ConsoleClient(transport=transport, client_info=client_info)
    handler = RemoteConsoleHandler(client)
    record = logging.LogRecord("remote_console.client", logging.WARNING, __file__, 1, "loop", None, None)
    handler.emit(record)
    assert transport.connect_calls == []


def test_defaults_to_process_console(app_logger, transport, client_info) -> None:
    console.init_console(transport=transport, client_info=client_info)
    app_logger.addHandler(RemoteConsoleHandler())
    app_logger.error("boom")
    assert [e["logType"] for e in transport.envelopes()] == ["error"]


def test_transport_library_records_are_skipped(transport, client_info) -> None:
    client = ConsoleClient(transport=transport, client_info=client_info)
    handler = RemoteConsoleHandler(client)
    for name in ("websockets.client", "websockets", "aiohttp.client"):
        record = logging.LogRecord(name, logging.DEBUG, __file__, 1, "> TEXT", None, None)
        handler.emit(record)
    assert transport.connect_calls == []


class ChattyTransport:
    """Transport that logs while the client holds its lock, like websockets does."""

    def __init__(self, inner) -> None:
        self.inner = inner
        self.chatter = logging.getLogger("tests.transport")

    def connect(self, endpoint):
        self.chatter.debug("= connection is CONNECTING")
        return self.inner.connect(endpoint)


def run_with_timeout(target, seconds: float = 10.0) -> bool:
    worker = threading.Thread(target=target, daemon=True)
    worker.start()
    worker.join(timeout=seconds)
    return not worker.is_alive()


@pytest.fixture
def root_debug():
    root = logging.getLogger()
    saved_level = root.level
    root.setLevel(logging.DEBUG)
    added = []
    yield added
    for handler in added:
        root.removeHandler(handler)
    root.setLevel(saved_level)


def test_records_logged_during_forward_are_dropped(root_debug, transport, client_info) -> None:
    client = ConsoleClient(transport=ChattyTransport(transport), client_info=client_info)
    handler = RemoteConsoleHandler(client)
    logging.getLogger().addHandler(handler)
    root_debug.append(handler)

    assert run_with_timeout(lambda: logging.getLogger("tests.app").info("hello"))
    envelopes = transport.envelopes()
    assert [e["logType"] for e in envelopes] == ["info"]
    assert json.loads(envelopes[0]["payload"]["data"])["data"] == ["hello"]

    # The guard is per forward, later records still go out.
    assert run_with_timeout(lambda: logging.getLogger("tests.app").warning("again"))
    assert [e["logType"] for e in transport.envelopes()] == ["info", "warn"]


def test_root_handler_with_real_websocket_server(root_debug, client_info) -> None:
    received = []

    def collect(websocket) -> None:
        for message in websocket:
            received.append(message)

    with serve(collect, "127.0.0.1", 0) as server:
        port = server.socket.getsockname()[1]
        threading.Thread(target=server.serve_forever, daemon=True).start()

        client = ConsoleClient(
            endpoint=f"ws://127.0.0.1:{port}",
            client_info=client_info,
            connect_timeout_seconds=5,
        )
        handler = RemoteConsoleHandler(client)
        logging.getLogger().addHandler(handler)
        root_debug.append(handler)
        try:
            assert run_with_timeout(lambda: logging.getLogger("tests.app").info("hello"))
            deadline = time.monotonic() + 5
            while not received and time.monotonic() < deadline:
                time.sleep(0.02)
        finally:
            logging.getLogger().removeHandler(handler)
            client.close()

    assert len(received) == 1
    envelope = json.loads(received[0])
    assert envelope["logType"] == "info"
    assert json.loads(envelope["payload"]["data"])["data"] == ["hello"]

import json
import os

import pytest

from remote_console import config, console
from remote_console.models import ClientInfo
from remote_console.transport import ConnectError, SendError


class FakeConnection:
    def __init__(self, transport, endpoint):
        self._transport = transport
        self.endpoint = endpoint
        self.frames = []
        self.closed = False

    def send(self, text):
        if self._transport.fail_send:
            raise SendError(f"send failed on {self.endpoint}", endpoint=self.endpoint)
        self.frames.append(text)

    def close(self):
        self.closed = True


class FakeTransport:
    def __init__(self):
        self.connect_calls = []
        self.connections = []
        self.fail_connect = False
        self.fail_send = False

    def connect(self, endpoint):
        self.connect_calls.append(endpoint)
        if self.fail_connect:
            raise ConnectError(f"refused: {endpoint}", endpoint=endpoint)
        connection = FakeConnection(self, endpoint)
        self.connections.append(connection)
        return connection

    def envelopes(self):
        return [json.loads(frame) for conn in self.connections for frame in conn.frames]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client_info():
    return ClientInfo(
        id="Python/3.12.0 (linux)",
        name="Python Client",
        platform="python",
        version="0.1.0",
        os="linux",
        os_version="6.1.0",
        language="en-US",
        time_zone="+00:00",
        user_agent="Python/3.12.0 (linux)",
    )


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    keys = [
        config.ENV_ENDPOINT,
        config.ENV_ENABLED,
        config.ENV_CONNECT_TIMEOUT,
        config.ENV_RESET_ON_SEND_ERROR,
        config.ENV_DEBUG_LOGGING,
    ]
    original = {key: os.getenv(key) for key in keys}
    for key in keys:
        if key in os.environ:
            del os.environ[key]
    # Never pick up a developer's local .env.
    monkeypatch.setattr(config, "_ENV_LOADED", True)
    yield
    for key, value in original.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


@pytest.fixture(autouse=True)
def reset_console():
    console.shutdown_console()
    yield
    console.shutdown_console()

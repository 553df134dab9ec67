"""
Dispatch statistics.

Purpose:
- Track frames sent and transport failures per client.
- Provide a quick snapshot for monitoring or logging.
"""

from __future__ import annotations

from dataclasses import dataclass
import threading
import time


@dataclass
class DispatchStatsSnapshot:
    frames_sent: int
    connect_errors: int
    send_errors: int
    dropped: int
    last_error: str | None
    last_success_ts: float | None
    last_error_ts: float | None


class DispatchStats:
    """
    In-memory counters shared by all callers of one client.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.frames_sent = 0
        self.connect_errors = 0
        self.send_errors = 0
        self.dropped = 0
        self.last_error: str | None = None
        self.last_success_ts: float | None = None
        self.last_error_ts: float | None = None

    def record_sent(self) -> None:
        with self._lock:
            self.frames_sent += 1
            self.last_success_ts = time.time()

    def record_connect_error(self, error: str) -> None:
        # The message is dropped together with the failed connect.
        with self._lock:
            self.connect_errors += 1
            self.dropped += 1
            self._set_error(error)

    def record_send_error(self, error: str) -> None:
        with self._lock:
            self.send_errors += 1
            self.dropped += 1
            self._set_error(error)

    def _set_error(self, error: str) -> None:
        self.last_error = error
        self.last_error_ts = time.time()

    def snapshot(self) -> DispatchStatsSnapshot:
        with self._lock:
            return DispatchStatsSnapshot(
                frames_sent=self.frames_sent,
                connect_errors=self.connect_errors,
                send_errors=self.send_errors,
                dropped=self.dropped,
                last_error=self.last_error,
                last_success_ts=self.last_success_ts,
                last_error_ts=self.last_error_ts,
            )

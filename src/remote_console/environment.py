"""
Runtime metadata for the client.

Collection runs once per process; the resulting ClientInfo is attached
unchanged to every envelope.
"""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from importlib import metadata
import os
import platform

from .models import ClientInfo

DISTRIBUTION_NAME = "remote-console"
# platform.system() names that collectors know under another name.
_OS_NAMES = {"darwin": "macos"}


def _package_version() -> str:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


def _utc_offset(now: datetime | None = None) -> str:
    # "+0530" -> "+05:30"
    raw = (now or datetime.now().astimezone()).strftime("%z")
    if len(raw) < 5:
        return "+00:00"
    return f"{raw[:3]}:{raw[3:5]}"


def os_name_for(system: str) -> str:
    name = system.lower() or "unknown"
    return _OS_NAMES.get(name, name)


def collect_client_info() -> ClientInfo:
    """
    Collect runtime metadata without caching.
    """

    os_name = os_name_for(platform.system())
    runtime = f"Python/{platform.python_version()} ({os_name})"
    return ClientInfo(
        id=runtime,
        name="Python Client",
        platform="python",
        version=_package_version(),
        os=os_name,
        os_version=platform.release(),
        language=os.getenv("LANG") or "en-US",
        time_zone=_utc_offset(),
        user_agent=runtime,
    )


@lru_cache(maxsize=1)
def current_client_info() -> ClientInfo:
    return collect_client_info()

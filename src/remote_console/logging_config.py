"""
Local logging helpers.

Purpose:
- Give client diagnostics (connect/send failures) a consistent local format.
- Support JSONL output so failures can be collected alongside other logs.
"""

from __future__ import annotations

from typing import Iterable
import json
import logging
import time

CLIENT_EXTRA_FIELDS = ("endpoint", "log_type")
PLAIN_FORMAT = "%(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """
    JSONL formatter that copies selected record extras into each line.
    """

    def __init__(self, extra_fields: Iterable[str] = CLIENT_EXTRA_FIELDS) -> None:
        super().__init__()
        self.extra_fields = tuple(extra_fields)

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for key in self.extra_fields:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(
    level: str = "INFO",
    *,
    json_output: bool = False,
    client_level: str | None = None,
    extra_fields: Iterable[str] = CLIENT_EXTRA_FIELDS,
) -> logging.Handler:
    """
    Configure root logging for an application using the remote console.

    Inputs:
    - level: root level.
    - json_output: JSONL lines instead of the plain format.
    - client_level: separate level for the remote_console loggers, e.g.
      "ERROR" to silence connect/send warnings in noisy environments.
    - extra_fields: record extras copied into JSONL lines.

    Outputs:
    - The installed stream handler.
    """

    handler = logging.StreamHandler()
    if json_output:
        handler.setFormatter(JsonFormatter(extra_fields))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    logging.basicConfig(level=level.upper(), handlers=[handler])
    if client_level is not None:
        logging.getLogger("remote_console").setLevel(client_level.upper())
    return handler

"""
Send a sample log sequence to a remote console collector.

Outputs:
- One frame per call: log/info/warn/error, a group, and a collapsed group
  with a styled message and a JSON object.
- Dispatch counters (frames sent, errors) on stdout.
"""

from __future__ import annotations

import argparse
import os
import sys
import time

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from remote_console.config import build_console_client, load_settings
from remote_console.logging_config import setup_logging


def parse_args():
    parser = argparse.ArgumentParser()
    parser.add_argument("--endpoint", default=None, help="collector address, e.g. 10.10.30.40")
    parser.add_argument("--config", default=None, help="optional console.yaml")
    parser.add_argument("--json-logs", action="store_true")
    parser.add_argument("--debug", action="store_true")
    return parser.parse_args()


def run(args) -> int:
    setup_logging("DEBUG" if args.debug else "INFO", json_output=args.json_logs)
    settings = load_settings(args.config)
    client = build_console_client(settings)
    if args.endpoint:
        client.set_endpoint(args.endpoint)

    with client:
        client.log("Hello, World!")
        client.info("Server started")
        client.warn("Memory usage high")
        client.error("Connection failed")

        client.group("Test Group")
        client.log("Inside group")
        client.group_end()

        client.group_collapsed("Collapsed Group")
        client.log(
            "%cInside collapsed group",
            "color: green; font-size: 20px; font-weight: bold",
            {"name": "name", "age": 18},
        )
        client.group_end()

        # Give the collector a moment before the socket closes.
        time.sleep(1)

    snapshot = client.stats.snapshot()
    print(f"endpoint\t{client.endpoint}")
    print(f"frames_sent\t{snapshot.frames_sent}")
    print(f"connect_errors\t{snapshot.connect_errors}")
    print(f"send_errors\t{snapshot.send_errors}")
    if snapshot.last_error:
        print(f"last_error\t{snapshot.last_error}")
    return 0 if snapshot.frames_sent else 1


def main():
    sys.exit(run(parse_args()))


if __name__ == "__main__":
    main()

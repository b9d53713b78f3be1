"""Time helpers and the clock seam used for deterministic tests."""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt

Clock = cabc.Callable[[], dt.datetime]


def utcnow() -> dt.datetime:
    """Return the current instant as an aware UTC timestamp."""
    return dt.datetime.now(dt.UTC)


def ensure_utc(value: dt.datetime, *, field: str) -> dt.datetime:
    """Return ``value`` converted to UTC, rejecting naive timestamps."""
    if value.tzinfo is None:
        msg = f"{field} must be timezone-aware"
        raise ValueError(msg)
    return value.astimezone(dt.UTC)

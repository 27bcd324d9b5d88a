"""
Time source for the registry.

Every request takes a single snapshot from a clock; guards never re-read it.
Timestamps are timezone-aware UTC truncated to whole seconds.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def normalize(ts: datetime) -> datetime:
    """Coerce to aware UTC with whole-second precision."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).replace(microsecond=0)


class SystemClock:
    def now(self) -> datetime:
        return utc_now()


class FixedClock:
    """Manually driven clock for tests and replays."""

    def __init__(self, start: Optional[datetime] = None):
        self._now = normalize(start) if start else utc_now()

    def now(self) -> datetime:
        return self._now

    def set(self, ts: datetime) -> None:
        ts = normalize(ts)
        if ts < self._now:
            raise ValueError("clock cannot move backwards")
        self._now = ts

    def advance(self, seconds: int) -> datetime:
        if seconds < 0:
            raise ValueError("clock cannot move backwards")
        self._now = self._now + timedelta(seconds=seconds)
        return self._now

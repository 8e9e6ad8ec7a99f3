"""
Wall clock access for the engine.

Timestamps are integer epoch milliseconds. Calendar dates are local
``YYYY-MM-DD`` strings, which is what daily limits and login streaks
compare against.
"""

import time
from datetime import date, datetime, timedelta

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * MS_PER_SECOND)


def resolve(now: int | None) -> int:
    """Return ``now`` or sample the clock when it was omitted."""
    return now_ms() if now is None else now


def local_date(timestamp: int) -> str:
    """Local calendar date of a timestamp as YYYY-MM-DD."""
    return datetime.fromtimestamp(timestamp / MS_PER_SECOND).strftime("%Y-%m-%d")


def previous_date(day: str) -> str:
    """The calendar day before ``day`` (both YYYY-MM-DD)."""
    return (date.fromisoformat(day) - timedelta(days=1)).isoformat()


def local_hour(timestamp: int) -> int:
    """Local hour of day (0-23) of a timestamp."""
    return datetime.fromtimestamp(timestamp / MS_PER_SECOND).hour


def timestamp_for(moment: datetime) -> int:
    """Epoch milliseconds for a (naive local) datetime."""
    return int(moment.timestamp() * MS_PER_SECOND)

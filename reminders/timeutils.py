"""Time-of-day helpers shared by the scheduler and the quiet-hours resolver."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from .models import TimeOfDay

MINUTES_PER_DAY = 24 * 60


def parse_time(value: Any) -> TimeOfDay:
    """Parse an ``HH:mm`` string, raising InvalidTimeInput when it is malformed."""
    return TimeOfDay.parse(value)


def format_time(time: TimeOfDay) -> str:
    return str(time)


def at_time(moment: datetime, time: TimeOfDay) -> datetime:
    """Return ``moment``'s date at ``time``, seconds cleared."""
    return moment.replace(hour=time.hour, minute=time.minute, second=0, microsecond=0)


def next_occurrence(time: TimeOfDay, now: datetime) -> datetime:
    """Today's ``time`` if it is still ahead of ``now``, otherwise tomorrow's."""
    candidate = at_time(now, time)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


def is_within(candidate: TimeOfDay, start: TimeOfDay, end: TimeOfDay) -> bool:
    """Inclusive window test; a window with ``start > end`` wraps past midnight."""
    offset = (candidate.minutes - start.minutes) % MINUTES_PER_DAY
    span = (end.minutes - start.minutes) % MINUTES_PER_DAY
    return offset <= span

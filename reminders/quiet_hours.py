from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from .models import TimeOfDay
from .timeutils import at_time, is_within

LOGGER = logging.getLogger(__name__)


def resolve(
    candidate: datetime,
    quiet_start: Optional[TimeOfDay],
    quiet_end: Optional[TimeOfDay],
    now: datetime,
) -> datetime:
    """Push ``candidate`` to the end of the quiet window when it falls inside it.

    Only the incoming candidate is tested. The rewritten instant is not checked
    against the window again.
    """
    if quiet_start is None or quiet_end is None:
        return candidate
    if not is_within(TimeOfDay.of(candidate), quiet_start, quiet_end):
        return candidate

    adjusted = at_time(candidate, quiet_end)
    if adjusted <= now:
        adjusted += timedelta(days=1)
    LOGGER.debug(
        "Deferred %s to %s (quiet hours %s-%s)",
        candidate.isoformat(),
        adjusted.isoformat(),
        quiet_start,
        quiet_end,
    )
    return adjusted

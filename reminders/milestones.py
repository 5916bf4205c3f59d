"""Streak milestone and goal progress checks that decide when one-shots fire."""
from __future__ import annotations

from typing import Iterable, List, Optional

from .config import GOAL_FINAL_STRETCH_DAYS, GOAL_PROGRESS_BAND, GOAL_PROGRESS_MARKERS, STREAK_MILESTONES


def milestone_reached(current_streak: int, previous_streak: int) -> Optional[int]:
    """The milestone crossed between ``previous_streak`` and ``current_streak``, if any."""
    for milestone in STREAK_MILESTONES:
        if current_streak >= milestone > previous_streak:
            return milestone
    return None


def new_milestones(current_streak: int, achieved: Iterable[int]) -> List[int]:
    done = set(achieved)
    return [m for m in STREAK_MILESTONES if current_streak >= m and m not in done]


def goal_needs_reminder(progress: float, days_remaining: int) -> bool:
    at_marker = any(marker <= progress < marker + GOAL_PROGRESS_BAND for marker in GOAL_PROGRESS_MARKERS)
    final_stretch = 0 < days_remaining <= GOAL_FINAL_STRETCH_DAYS
    return at_marker or final_stretch

from datetime import datetime

from reminders.models import TimeOfDay
from reminders.quiet_hours import resolve

QUIET_START = TimeOfDay(22, 0)
QUIET_END = TimeOfDay(7, 0)


def test_candidate_inside_window_moves_to_tomorrow_when_end_has_passed():
    now = datetime(2024, 1, 10, 12, 0)
    candidate = datetime(2024, 1, 10, 23, 0)
    assert resolve(candidate, QUIET_START, QUIET_END, now) == datetime(2024, 1, 11, 7, 0)


def test_candidate_inside_window_moves_to_today_when_end_is_ahead():
    now = datetime(2024, 1, 10, 6, 0)
    candidate = datetime(2024, 1, 10, 23, 0)
    assert resolve(candidate, QUIET_START, QUIET_END, now) == datetime(2024, 1, 10, 7, 0)


def test_candidate_outside_window_is_unchanged():
    now = datetime(2024, 1, 10, 6, 0)
    candidate = datetime(2024, 1, 10, 8, 15)
    assert resolve(candidate, QUIET_START, QUIET_END, now) is candidate


def test_missing_bounds_leave_candidate_alone():
    now = datetime(2024, 1, 10, 12, 0)
    candidate = datetime(2024, 1, 10, 23, 0)
    assert resolve(candidate, None, None, now) == candidate
    assert resolve(candidate, QUIET_START, None, now) == candidate


def test_early_morning_candidate_after_midnight():
    now = datetime(2024, 1, 10, 21, 0)
    candidate = datetime(2024, 1, 11, 5, 30)
    assert resolve(candidate, QUIET_START, QUIET_END, now) == datetime(2024, 1, 11, 7, 0)


def test_rewritten_time_is_not_rechecked():
    # 14:00 is itself inside the inclusive window and is returned as is
    now = datetime(2024, 1, 10, 12, 0)
    candidate = datetime(2024, 1, 10, 13, 30)
    start, end = TimeOfDay(13, 0), TimeOfDay(14, 0)
    result = resolve(candidate, start, end, now)
    assert result == datetime(2024, 1, 10, 14, 0)

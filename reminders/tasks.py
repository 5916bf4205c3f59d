from __future__ import annotations

import logging
from typing import Dict, List

from celery import shared_task

from app import get_dispatcher, get_service

from .milestones import goal_needs_reminder, milestone_reached

LOGGER = logging.getLogger(__name__)


@shared_task(name="reminders.tasks.sync_reminders")
def sync_reminders() -> str:
    report = get_service().sync()
    if not report.permission_granted:
        LOGGER.info("Reminder sync skipped: notification permission denied")
        return "0"
    LOGGER.info("Re-armed %d reminders", len(report.scheduled))
    return str(len(report.scheduled))


@shared_task(name="reminders.tasks.notify_streak")
def notify_streak(current_streak: int, previous_streak: int) -> str:
    milestone = milestone_reached(current_streak, previous_streak)
    if milestone is None:
        return "0"
    settings = get_service().get_settings()
    sent = get_dispatcher().send_milestone(milestone, settings=settings)
    return "1" if sent else "0"


@shared_task(name="reminders.tasks.notify_goal_progress")
def notify_goal_progress(goals: List[Dict]) -> str:
    """Send completion and reminder one-shots for a batch of goal progress rows."""
    settings = get_service().get_settings()
    dispatcher = get_dispatcher()
    sent = 0
    for goal in goals:
        title = goal.get("title") or "Goal"
        if goal.get("completed"):
            sent += dispatcher.send_goal_completion(title, settings=settings)
            continue
        days_remaining = int(goal.get("days_remaining", 0))
        if goal_needs_reminder(float(goal.get("progress", 0)), days_remaining) and days_remaining > 0:
            sent += dispatcher.send_goal_reminder(title, days_remaining, settings=settings)
    LOGGER.info("Sent %d goal notifications for %d goals", sent, len(goals))
    return str(sent)

from __future__ import annotations

import logging
from typing import Optional

from .exceptions import GatewayError
from .gateway import NotificationGateway
from .models import NotificationSettings

LOGGER = logging.getLogger(__name__)


class OneShotDispatcher:
    """Immediate notifications that never touch the recurring schedule or quiet hours."""

    def __init__(self, gateway: NotificationGateway) -> None:
        self.gateway = gateway

    def _send(self, title: str, body: str, *, category: str) -> bool:
        if not self.gateway.request_permission():
            LOGGER.info("Skipping %s notification: permission denied", category)
            return False
        try:
            notification_id = self.gateway.schedule_once_immediate(title, body)
        except GatewayError as exc:
            LOGGER.warning("Error sending %s notification: %s", category, exc)
            return False
        LOGGER.info("Sent %s notification '%s' (%s)", category, title, notification_id)
        return True

    def send_milestone(self, days_count: int, settings: Optional[NotificationSettings] = None) -> bool:
        if settings is not None and not settings.milestone_notifications:
            return False
        return self._send(
            f"\U0001F389 {days_count} Day Milestone!",
            f"Congratulations! You've reached {days_count} days. Keep up the amazing work!",
            category="milestone",
        )

    def send_goal_reminder(
        self,
        goal_title: str,
        days_remaining: int,
        settings: Optional[NotificationSettings] = None,
    ) -> bool:
        if settings is not None and not settings.goal_reminders:
            return False
        return self._send(
            f"\U0001F3AF Goal Reminder: {goal_title}",
            f"You're {days_remaining} days away from reaching your goal! Keep going! \U0001F4AA",
            category="goal",
        )

    def send_goal_completion(self, goal_title: str, settings: Optional[NotificationSettings] = None) -> bool:
        if settings is not None and not settings.goal_reminders:
            return False
        return self._send(
            "\U0001F389 Goal Achieved!",
            f"Congratulations! You've completed your goal: {goal_title}. Amazing work! \U0001F3C6",
            category="goal",
        )

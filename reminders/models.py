from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .config import CUSTOM_REMINDER_PREFIX, DEFAULT_NOTIFICATION_SETTINGS
from .exceptions import InvalidReminderInput, InvalidTimeInput

LOGGER = logging.getLogger(__name__)

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


@dataclass(frozen=True, slots=True, order=True)
class TimeOfDay:
    """An hour/minute pair, serialized as zero-padded ``HH:mm``."""

    hour: int
    minute: int

    def __post_init__(self) -> None:
        for name, value, upper in (("hour", self.hour, 23), ("minute", self.minute, 59)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidTimeInput(f"{name} must be an integer, got {value!r}")
            if not 0 <= value <= upper:
                raise InvalidTimeInput(f"{name} {value} outside 0..{upper}")

    @classmethod
    def parse(cls, value: Any) -> "TimeOfDay":
        if isinstance(value, TimeOfDay):
            return value
        if not isinstance(value, str):
            raise InvalidTimeInput(f"expected HH:mm string, got {value!r}")
        match = _TIME_PATTERN.match(value)
        if not match:
            raise InvalidTimeInput(f"expected HH:mm, got {value!r}")
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def of(cls, moment: datetime) -> "TimeOfDay":
        return cls(moment.hour, moment.minute)

    @property
    def minutes(self) -> int:
        """Minutes since midnight."""
        return self.hour * 60 + self.minute

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


def _optional_time(value: Any) -> Optional[TimeOfDay]:
    if value is None or value == "":
        return None
    return TimeOfDay.parse(value)


def generate_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True, slots=True)
class CustomNotification:
    """A user-created daily reminder."""

    id: str
    title: str
    body: str
    time: TimeOfDay
    enabled: bool = True
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if not self.id:
            raise InvalidReminderInput("custom reminder id is required")
        title = (self.title or "").strip()
        body = (self.body or "").strip()
        if not title or not body:
            raise InvalidReminderInput("custom reminder title and body are required")
        object.__setattr__(self, "title", title)
        object.__setattr__(self, "body", body)
        object.__setattr__(self, "time", TimeOfDay.parse(self.time))

    @classmethod
    def create(cls, title: str, body: str, time: Any) -> "CustomNotification":
        return cls(id=generate_id(), title=title, body=body, time=TimeOfDay.parse(time))

    @property
    def identifier(self) -> str:
        return f"{CUSTOM_REMINDER_PREFIX}{self.id}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomNotification":
        created_raw = data.get("created_at")
        try:
            created_at = datetime.fromisoformat(created_raw) if created_raw else datetime.now()
        except (TypeError, ValueError):
            created_at = datetime.now()
        return cls(
            id=str(data.get("id") or ""),
            title=str(data.get("title") or ""),
            body=str(data.get("body") or ""),
            time=TimeOfDay.parse(data.get("time")),
            enabled=bool(data.get("enabled", True)),
            created_at=created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "time": str(self.time),
            "enabled": self.enabled,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(slots=True)
class NotificationSettings:
    """User notification preferences, persisted as a whole."""

    morning_reminder: bool = True
    morning_time: TimeOfDay = TimeOfDay(8, 0)
    midday_reminder: bool = True
    midday_time: TimeOfDay = TimeOfDay(13, 0)
    evening_reminder: bool = True
    evening_time: TimeOfDay = TimeOfDay(20, 0)
    milestone_notifications: bool = True
    motivational_quotes: bool = True
    motivational_quotes_time: TimeOfDay = TimeOfDay(10, 0)
    goal_reminders: bool = True
    quiet_hours_start: Optional[TimeOfDay] = TimeOfDay(22, 0)
    quiet_hours_end: Optional[TimeOfDay] = TimeOfDay(7, 0)
    custom_notifications: List[CustomNotification] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "NotificationSettings":
        """Build settings from stored data, filling missing fields from the defaults."""
        merged = {**DEFAULT_NOTIFICATION_SETTINGS, **(data or {})}
        customs: List[CustomNotification] = []
        for raw in merged.get("custom_notifications") or []:
            try:
                customs.append(CustomNotification.from_dict(raw))
            except (InvalidTimeInput, InvalidReminderInput, AttributeError) as exc:
                LOGGER.warning("Dropping invalid custom notification %r: %s", raw, exc)
        return cls(
            morning_reminder=bool(merged["morning_reminder"]),
            morning_time=TimeOfDay.parse(merged["morning_time"]),
            midday_reminder=bool(merged["midday_reminder"]),
            midday_time=TimeOfDay.parse(merged["midday_time"]),
            evening_reminder=bool(merged["evening_reminder"]),
            evening_time=TimeOfDay.parse(merged["evening_time"]),
            milestone_notifications=bool(merged["milestone_notifications"]),
            motivational_quotes=bool(merged["motivational_quotes"]),
            motivational_quotes_time=TimeOfDay.parse(merged["motivational_quotes_time"]),
            goal_reminders=bool(merged["goal_reminders"]),
            quiet_hours_start=_optional_time(merged.get("quiet_hours_start")),
            quiet_hours_end=_optional_time(merged.get("quiet_hours_end")),
            custom_notifications=customs,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "morning_reminder": self.morning_reminder,
            "morning_time": str(self.morning_time),
            "midday_reminder": self.midday_reminder,
            "midday_time": str(self.midday_time),
            "evening_reminder": self.evening_reminder,
            "evening_time": str(self.evening_time),
            "milestone_notifications": self.milestone_notifications,
            "motivational_quotes": self.motivational_quotes,
            "motivational_quotes_time": str(self.motivational_quotes_time),
            "goal_reminders": self.goal_reminders,
            "quiet_hours_start": str(self.quiet_hours_start) if self.quiet_hours_start else None,
            "quiet_hours_end": str(self.quiet_hours_end) if self.quiet_hours_end else None,
            "custom_notifications": [item.to_dict() for item in self.custom_notifications],
        }

    def find_custom(self, custom_id: str) -> Optional[CustomNotification]:
        for item in self.custom_notifications:
            if item.id == custom_id:
                return item
        return None


@dataclass(frozen=True, slots=True)
class ReminderSlot:
    """A named daily reminder derived from the settings."""

    identifier: str
    enabled: bool
    title: str
    body: str
    time: TimeOfDay


@dataclass(slots=True)
class ScheduledNotification:
    """A daily trigger held by a gateway."""

    identifier: str
    title: str
    body: str
    hour: int
    minute: int
    repeats_daily: bool = True
    scheduled_at: datetime = field(default_factory=datetime.now)


@dataclass(slots=True)
class DeliveredNotification:
    """An immediate notification handed to a gateway."""

    identifier: str
    title: str
    body: str
    delivered_at: datetime = field(default_factory=datetime.now)


@dataclass(slots=True)
class ReconcileReport:
    """Outcome of one reconciliation pass."""

    permission_granted: bool
    scheduled: Dict[str, datetime] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "permission_granted": self.permission_granted,
            "scheduled": {key: value.isoformat() for key, value in self.scheduled.items()},
            "skipped": list(self.skipped),
            "failed": dict(self.failed),
        }

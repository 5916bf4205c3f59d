from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Any, Dict, Optional, Protocol, Tuple

from .config import OPTIONAL_TIME_FIELDS, TIME_FIELDS, TOGGLE_FIELDS
from .exceptions import InvalidReminderInput, ReminderNotFound
from .models import CustomNotification, NotificationSettings, ReconcileReport, TimeOfDay
from .orchestrator import ReminderScheduler

LOGGER = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class SettingsStore(Protocol):
    def load_settings(self) -> NotificationSettings: ...

    def save_settings(self, settings: NotificationSettings) -> None: ...


def parse_toggle(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUE_VALUES | _FALSE_VALUES:
        return value.strip().lower() in _TRUE_VALUES
    raise InvalidReminderInput(f"{name} must be a boolean, got {value!r}")


def validate_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Turn raw field updates into typed values, rejecting anything invalid."""
    parsed: Dict[str, Any] = {}
    for name, value in changes.items():
        if name in TOGGLE_FIELDS:
            parsed[name] = parse_toggle(name, value)
        elif name in TIME_FIELDS:
            parsed[name] = TimeOfDay.parse(value)
        elif name in OPTIONAL_TIME_FIELDS:
            parsed[name] = None if value in (None, "") else TimeOfDay.parse(value)
        else:
            raise InvalidReminderInput(f"unknown or read-only setting: {name}")
    return parsed


class ReminderService:
    """Load, mutate, save, then reconcile: the caller side of the scheduler."""

    def __init__(self, store: SettingsStore, scheduler: ReminderScheduler) -> None:
        self.store = store
        self.scheduler = scheduler
        self._lock = threading.RLock()

    def get_settings(self) -> NotificationSettings:
        return self.store.load_settings()

    def _commit(self, settings: NotificationSettings) -> ReconcileReport:
        self.store.save_settings(settings)
        return self.scheduler.reconcile(settings)

    def sync(self) -> ReconcileReport:
        with self._lock:
            return self.scheduler.reconcile(self.store.load_settings())

    def update_settings(self, changes: Dict[str, Any]) -> Tuple[NotificationSettings, ReconcileReport]:
        parsed = validate_changes(changes)
        with self._lock:
            settings = dataclasses.replace(self.store.load_settings(), **parsed)
            report = self._commit(settings)
        LOGGER.info("Updated notification settings: %s", ", ".join(sorted(parsed)) or "no changes")
        return settings, report

    def add_custom(self, title: str, body: str, time: Any) -> Tuple[CustomNotification, ReconcileReport]:
        custom = CustomNotification.create(title, body, time)
        with self._lock:
            settings = self.store.load_settings()
            settings.custom_notifications.append(custom)
            report = self._commit(settings)
        LOGGER.info("Added custom notification %s at %s", custom.id, custom.time)
        return custom, report

    def _replace_custom(self, custom_id: str, **changes: Any) -> Tuple[CustomNotification, ReconcileReport]:
        with self._lock:
            settings = self.store.load_settings()
            current = settings.find_custom(custom_id)
            if current is None:
                raise ReminderNotFound(custom_id)
            updated = dataclasses.replace(current, **changes)
            settings.custom_notifications = [
                updated if item.id == custom_id else item for item in settings.custom_notifications
            ]
            report = self._commit(settings)
        return updated, report

    def edit_custom(
        self,
        custom_id: str,
        *,
        title: Optional[str] = None,
        body: Optional[str] = None,
        time: Any = None,
    ) -> Tuple[CustomNotification, ReconcileReport]:
        changes: Dict[str, Any] = {}
        if title is not None:
            changes["title"] = title
        if body is not None:
            changes["body"] = body
        if time is not None:
            changes["time"] = TimeOfDay.parse(time)
        return self._replace_custom(custom_id, **changes)

    def set_custom_enabled(self, custom_id: str, enabled: Optional[bool] = None) -> Tuple[CustomNotification, ReconcileReport]:
        """Enable or disable a custom reminder; ``None`` flips the current state."""
        with self._lock:
            if enabled is None:
                current = self.get_settings().find_custom(custom_id)
                if current is None:
                    raise ReminderNotFound(custom_id)
                enabled = not current.enabled
            return self._replace_custom(custom_id, enabled=enabled)

    def delete_custom(self, custom_id: str) -> ReconcileReport:
        with self._lock:
            settings = self.store.load_settings()
            if settings.find_custom(custom_id) is None:
                raise ReminderNotFound(custom_id)
            self.scheduler.cancel_custom(custom_id)
            settings.custom_notifications = [item for item in settings.custom_notifications if item.id != custom_id]
            report = self._commit(settings)
        LOGGER.info("Deleted custom notification %s", custom_id)
        return report

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from .config import CUSTOM_REMINDER_PREFIX
from .exceptions import GatewayError
from .gateway import NotificationGateway
from .models import NotificationSettings, ReconcileReport, TimeOfDay
from .quiet_hours import resolve
from .quotes import Quote, random_quote
from .registry import build_slots
from .timeutils import next_occurrence

LOGGER = logging.getLogger(__name__)


class ReminderScheduler:
    """Brings the gateway's live schedule in line with a settings snapshot.

    Every reconciliation cancels everything and reschedules the enabled slots.
    Calls are serialized so a second pass never starts before the first one
    has issued all of its schedule calls.
    """

    def __init__(
        self,
        gateway: NotificationGateway,
        *,
        clock: Callable[[], datetime] = datetime.now,
        quote_picker: Callable[[], Quote] = random_quote,
    ) -> None:
        self.gateway = gateway
        self._clock = clock
        self._quote_picker = quote_picker
        self._lock = threading.Lock()

    def fire_time(self, time: TimeOfDay, settings: NotificationSettings, now: Optional[datetime] = None) -> datetime:
        """Next instant ``time`` should fire, deferred past quiet hours."""
        now = now or self._clock()
        candidate = next_occurrence(time, now)
        return resolve(candidate, settings.quiet_hours_start, settings.quiet_hours_end, now)

    def reconcile(self, settings: NotificationSettings) -> ReconcileReport:
        with self._lock:
            return self._reconcile(settings)

    def _reconcile(self, settings: NotificationSettings) -> ReconcileReport:
        try:
            self.gateway.cancel_all()
        except GatewayError as exc:
            LOGGER.warning("Error canceling reminders: %s", exc)

        if not self.gateway.request_permission():
            LOGGER.info("Notification permission denied; no reminders scheduled")
            return ReconcileReport(permission_granted=False)

        now = self._clock()
        report = ReconcileReport(permission_granted=True)
        for slot in build_slots(settings, quote=self._quote_picker()):
            if not slot.enabled:
                report.skipped.append(slot.identifier)
                continue
            fire_at = self.fire_time(slot.time, settings, now)
            try:
                self.gateway.schedule_at(
                    slot.identifier,
                    slot.title,
                    slot.body,
                    fire_at.hour,
                    fire_at.minute,
                    repeats_daily=True,
                )
            except Exception as exc:
                LOGGER.exception("Error scheduling notification %s", slot.identifier)
                report.failed[slot.identifier] = str(exc)
                continue
            report.scheduled[slot.identifier] = fire_at

        LOGGER.info(
            "Reconciled reminders: %d scheduled, %d disabled, %d failed",
            len(report.scheduled),
            len(report.skipped),
            len(report.failed),
        )
        return report

    def cancel_one(self, identifier: str) -> None:
        with self._lock:
            try:
                self.gateway.cancel(identifier)
            except GatewayError as exc:
                LOGGER.warning("Error canceling notification %s: %s", identifier, exc)
                return
        LOGGER.info("Reminder %s canceled", identifier)

    def cancel_custom(self, custom_id: str) -> None:
        self.cancel_one(f"{CUSTOM_REMINDER_PREFIX}{custom_id}")

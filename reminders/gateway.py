"""Notification gateways: the platform primitives the scheduler drives."""
from __future__ import annotations

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import requests
from requests.utils import quote

from .config import GATEWAY_TIMEOUT, GATEWAY_TOKEN, NOTIFICATION_CHANNEL
from .exceptions import GatewayCancelFailure, GatewayError, GatewayScheduleFailure
from .models import DeliveredNotification, ScheduledNotification

LOGGER = logging.getLogger(__name__)


class NotificationGateway(ABC):
    """Individually atomic schedule/cancel primitives with no transactions."""

    @abstractmethod
    def request_permission(self) -> bool:
        """Ask for notification permission; idempotent."""

    @abstractmethod
    def schedule_at(
        self,
        identifier: str,
        title: str,
        body: str,
        hour: int,
        minute: int,
        repeats_daily: bool = True,
    ) -> None:
        """Register (or replace) the trigger stored under ``identifier``."""

    @abstractmethod
    def schedule_once_immediate(self, title: str, body: str) -> str:
        """Deliver a notification now and return the gateway-assigned id."""

    @abstractmethod
    def cancel(self, identifier: str) -> None:
        """Remove one trigger; an unknown identifier is not an error."""

    @abstractmethod
    def cancel_all(self) -> None:
        """Remove every scheduled trigger."""

    def ensure_channel(self, channel: Dict[str, Any] = NOTIFICATION_CHANNEL) -> None:
        """Create the delivery channel if the platform has channels."""


class InMemoryGateway(NotificationGateway):
    """Process-local registry of triggers, used when no device bridge is configured."""

    def __init__(self, permission_granted: bool = True) -> None:
        self.permission_granted = permission_granted
        self.scheduled: Dict[str, ScheduledNotification] = {}
        self.delivered: List[DeliveredNotification] = []
        self.channels: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Tuple[str, Optional[str]]] = []
        self._lock = threading.Lock()

    def _record(self, op: str, identifier: Optional[str] = None) -> None:
        self.calls.append((op, identifier))

    def request_permission(self) -> bool:
        with self._lock:
            self._record("request_permission")
            granted = self.permission_granted
        if granted:
            self.ensure_channel()
        return granted

    def ensure_channel(self, channel: Dict[str, Any] = NOTIFICATION_CHANNEL) -> None:
        with self._lock:
            self.channels.setdefault(channel["id"], dict(channel))

    def schedule_at(self, identifier, title, body, hour, minute, repeats_daily=True) -> None:
        if not 0 <= hour <= 23 or not 0 <= minute <= 59:
            raise GatewayScheduleFailure(identifier, f"invalid trigger {hour}:{minute}")
        with self._lock:
            self._record("schedule_at", identifier)
            self.scheduled[identifier] = ScheduledNotification(
                identifier=identifier,
                title=title,
                body=body,
                hour=hour,
                minute=minute,
                repeats_daily=repeats_daily,
            )

    def schedule_once_immediate(self, title: str, body: str) -> str:
        identifier = str(uuid.uuid4())
        with self._lock:
            self._record("schedule_once_immediate", identifier)
            self.delivered.append(DeliveredNotification(identifier=identifier, title=title, body=body))
        return identifier

    def cancel(self, identifier: str) -> None:
        with self._lock:
            self._record("cancel", identifier)
            self.scheduled.pop(identifier, None)

    def cancel_all(self) -> None:
        with self._lock:
            self._record("cancel_all")
            self.scheduled.clear()

    def triggers(self) -> Dict[str, Tuple[int, int]]:
        """Snapshot of identifier -> (hour, minute)."""
        with self._lock:
            return {key: (item.hour, item.minute) for key, item in self.scheduled.items()}


class HttpGateway(NotificationGateway):
    """Forwards gateway primitives to a device-side notification bridge."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = GATEWAY_TOKEN,
        timeout: float = GATEWAY_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            return self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise GatewayError(f"{method} {url} failed: {exc}") from exc

    def request_permission(self) -> bool:
        resp = self._request("POST", "/permissions", {"alert": True, "badge": True, "sound": True})
        if resp.status_code >= 400:
            raise GatewayError(f"permission request returned {resp.status_code}: {resp.text[:120]}")
        try:
            granted = bool(resp.json().get("granted"))
        except (ValueError, AttributeError) as exc:
            raise GatewayError(f"permission response was not JSON: {resp.text[:120]}") from exc
        if not granted:
            LOGGER.warning("Notification permission not granted by %s", self.base_url)
            return False
        try:
            self.ensure_channel()
        except GatewayError as exc:
            LOGGER.info("Notification channel setup: %s", exc)
        return True

    def ensure_channel(self, channel: Dict[str, Any] = NOTIFICATION_CHANNEL) -> None:
        resp = self._request("PUT", f"/channels/{channel['id']}", dict(channel))
        if resp.status_code >= 400:
            raise GatewayError(f"channel setup returned {resp.status_code}")

    def schedule_at(self, identifier, title, body, hour, minute, repeats_daily=True) -> None:
        payload = {
            "title": title,
            "body": body,
            "trigger": {"type": "daily", "hour": hour, "minute": minute, "repeats": repeats_daily},
        }
        try:
            resp = self._request("PUT", f"/schedules/{quote(identifier, safe='')}", payload)
        except GatewayError as exc:
            raise GatewayScheduleFailure(identifier, str(exc)) from exc
        if resp.status_code >= 400:
            raise GatewayScheduleFailure(identifier, f"{resp.status_code} {resp.text[:120]}")
        LOGGER.info("Scheduled %s daily at %02d:%02d", identifier, hour, minute)

    def schedule_once_immediate(self, title: str, body: str) -> str:
        resp = self._request("POST", "/notifications", {"title": title, "body": body, "trigger": None})
        if resp.status_code >= 400:
            raise GatewayError(f"immediate notification returned {resp.status_code}: {resp.text[:120]}")
        try:
            return str(resp.json().get("id", ""))
        except (ValueError, AttributeError):
            LOGGER.debug("Immediate notification accepted without an id")
            return ""

    def cancel(self, identifier: str) -> None:
        resp = self._request("DELETE", f"/schedules/{quote(identifier, safe='')}")
        if resp.status_code == 404:
            LOGGER.debug("Reminder %s was not scheduled", identifier)
            return
        if resp.status_code >= 400:
            raise GatewayCancelFailure(identifier, f"{resp.status_code} {resp.text[:120]}")

    def cancel_all(self) -> None:
        resp = self._request("DELETE", "/schedules")
        if resp.status_code >= 400:
            raise GatewayCancelFailure(None, f"{resp.status_code} {resp.text[:120]}")

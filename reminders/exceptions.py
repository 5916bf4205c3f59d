"""Error types raised by the reminder engine."""
from __future__ import annotations


class ReminderError(Exception):
    """Base class for reminder engine errors."""


class InvalidTimeInput(ReminderError, ValueError):
    """A time of day could not be parsed or is out of range."""


class InvalidReminderInput(ReminderError, ValueError):
    """A settings or custom reminder field failed validation."""


class ReminderNotFound(ReminderError, KeyError):
    """No custom reminder exists with the requested id."""


class GatewayError(ReminderError):
    """The notification gateway rejected or failed an operation."""


class GatewayScheduleFailure(GatewayError):
    """A trigger could not be registered for an identifier."""

    def __init__(self, identifier: str, reason: str = "") -> None:
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"could not schedule {identifier}: {reason}" if reason else f"could not schedule {identifier}")


class GatewayCancelFailure(GatewayError):
    """A scheduled trigger could not be removed."""

    def __init__(self, identifier: str | None = None, reason: str = "") -> None:
        self.identifier = identifier
        self.reason = reason
        target = identifier or "all reminders"
        super().__init__(f"could not cancel {target}: {reason}" if reason else f"could not cancel {target}")

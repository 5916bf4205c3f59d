from datetime import datetime

import pytest

from reminders.gateway import InMemoryGateway
from reminders.orchestrator import ReminderScheduler
from reminders.quotes import quote_by_index
from reminders.service import ReminderService
from reminders.store import JsonSettingsStore

NOW = datetime(2024, 1, 10, 12, 0)


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
def scheduler(gateway):
    return ReminderScheduler(gateway, clock=lambda: NOW, quote_picker=lambda: quote_by_index(0))


@pytest.fixture
def store(tmp_path):
    return JsonSettingsStore(str(tmp_path / "notification_settings.json"))


@pytest.fixture
def service(store, scheduler):
    return ReminderService(store, scheduler)

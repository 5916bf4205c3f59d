import pytest

from reminders.exceptions import InvalidReminderInput, InvalidTimeInput, ReminderNotFound
from reminders.models import TimeOfDay
from reminders.registry import build_slots


def test_update_settings_saves_and_reconciles(service, store, gateway):
    settings, report = service.update_settings({"morning_reminder": False, "evening_time": "21:15"})

    assert store.load_settings().evening_time == TimeOfDay(21, 15)
    assert settings.morning_reminder is False
    assert "morning-reminder" not in gateway.scheduled
    assert gateway.triggers()["evening-reminder"] == (21, 15)
    assert report.permission_granted


def test_update_settings_accepts_form_style_toggles(service):
    settings, _ = service.update_settings({"goal_reminders": "off", "milestone_notifications": "true"})
    assert settings.goal_reminders is False
    assert settings.milestone_notifications is True


def test_invalid_time_is_rejected_before_anything_is_saved(service, store, gateway):
    with pytest.raises(InvalidTimeInput):
        service.update_settings({"morning_time": "25:00", "midday_reminder": False})
    assert store.load_settings().midday_reminder is True
    assert gateway.calls == []


@pytest.mark.parametrize("changes", [{"snooze": True}, {"custom_notifications": []}, {"morning_reminder": "maybe"}])
def test_invalid_fields_are_rejected(service, changes):
    with pytest.raises(InvalidReminderInput):
        service.update_settings(changes)


def test_quiet_hours_can_be_cleared(service, gateway):
    service.add_custom("Night owl", "Late check", "23:30")
    assert 23 not in [hour for hour, _ in gateway.triggers().values()]

    settings, _ = service.update_settings({"quiet_hours_start": "", "quiet_hours_end": None})
    assert settings.quiet_hours_start is None
    assert (23, 30) in gateway.triggers().values()


def test_custom_notification_add_disable_delete(service, store, gateway):
    custom, _ = service.add_custom("  Drink water ", "Stay hydrated", "09:00")
    identifier = f"custom-{custom.id}"
    assert custom.title == "Drink water"
    assert gateway.triggers()[identifier] == (9, 0)

    toggled, _ = service.set_custom_enabled(custom.id)
    assert toggled.enabled is False
    assert identifier not in gateway.scheduled

    gateway.calls.clear()
    service.delete_custom(custom.id)
    assert gateway.calls[0] == ("cancel", identifier)
    saved = store.load_settings()
    assert saved.custom_notifications == []
    assert identifier not in [slot.identifier for slot in build_slots(saved)]


def test_edit_custom_keeps_id_and_created_at(service, gateway):
    custom, _ = service.add_custom("Stretch", "Stand up", "15:00")
    edited, _ = service.edit_custom(custom.id, body="Stand up and stretch", time="16:45")

    assert edited.id == custom.id
    assert edited.created_at == custom.created_at
    assert edited.title == "Stretch"
    assert edited.body == "Stand up and stretch"
    assert gateway.triggers()[f"custom-{custom.id}"] == (16, 45)


def test_add_custom_requires_text(service, store):
    with pytest.raises(InvalidReminderInput):
        service.add_custom("   ", "body", "09:00")
    assert store.load_settings().custom_notifications == []


def test_unknown_custom_id(service):
    with pytest.raises(ReminderNotFound):
        service.edit_custom("nope", title="x")
    with pytest.raises(ReminderNotFound):
        service.set_custom_enabled("nope", True)
    with pytest.raises(ReminderNotFound):
        service.delete_custom("nope")


def test_sync_uses_stored_settings(service, store, gateway):
    settings = store.load_settings()
    settings.evening_reminder = False
    store.save_settings(settings)

    report = service.sync()
    assert "evening-reminder" in report.skipped
    assert "evening-reminder" not in gateway.scheduled

import json

from reminders.models import CustomNotification, TimeOfDay
from reminders.store import JsonSettingsStore, SqlSettingsStore


def test_missing_file_yields_defaults(tmp_path):
    store = JsonSettingsStore(str(tmp_path / "missing.json"))
    settings = store.load_settings()
    assert settings.morning_reminder is True
    assert settings.custom_notifications == []


def test_partial_document_is_merged_over_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"morning_time": "06:30", "goal_reminders": False}), encoding="utf-8")

    settings = JsonSettingsStore(str(path)).load_settings()
    assert settings.morning_time == TimeOfDay(6, 30)
    assert settings.goal_reminders is False
    assert settings.evening_time == TimeOfDay(20, 0)


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert JsonSettingsStore(str(path)).load_settings().midday_time == TimeOfDay(13, 0)


def test_json_save_writes_whole_document(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    store = JsonSettingsStore(str(path))
    settings = store.load_settings()
    settings.custom_notifications.append(CustomNotification("c1", "Read", "Ten pages", "21:00"))
    store.save_settings(settings)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["custom_notifications"][0]["id"] == "c1"
    assert data["quiet_hours_start"] == "22:00"
    assert store.load_settings().custom_notifications[0].time == TimeOfDay(21, 0)


def test_sql_store_keeps_profiles_apart(tmp_path):
    url = f"sqlite:///{tmp_path / 'reminders.db'}"
    alice = SqlSettingsStore(url, profile="alice")
    bob = SqlSettingsStore(url, profile="bob", engine=alice.engine)

    settings = alice.load_settings()
    settings.midday_reminder = False
    alice.save_settings(settings)
    settings.midday_time = TimeOfDay(12, 30)
    alice.save_settings(settings)

    reloaded = alice.load_settings()
    assert reloaded.midday_reminder is False
    assert reloaded.midday_time == TimeOfDay(12, 30)
    assert bob.load_settings().midday_reminder is True

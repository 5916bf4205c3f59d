import pytest

import app
from reminders.dispatcher import OneShotDispatcher


@pytest.fixture
def client(monkeypatch, service, gateway):
    monkeypatch.setattr(app, "get_service", lambda: service)
    monkeypatch.setattr(app, "get_dispatcher", lambda: OneShotDispatcher(gateway))
    with app.app.test_client() as client:
        yield client


def test_healthz(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.get_json()["ok"] is True


def test_get_settings_returns_defaults(client):
    body = client.get("/api/notifications/settings").get_json()
    assert body["morning_time"] == "08:00"
    assert body["quiet_hours_end"] == "07:00"


def test_patch_settings_reconciles(client, gateway):
    response = client.patch("/api/notifications/settings", json={"morning_reminder": False})
    assert response.status_code == 200
    body = response.get_json()
    assert body["settings"]["morning_reminder"] is False
    assert "morning-reminder" in body["reconcile"]["skipped"]
    assert "morning-reminder" not in gateway.scheduled


def test_patch_settings_rejects_bad_time(client):
    response = client.patch("/api/notifications/settings", json={"evening_time": "8pm"})
    assert response.status_code == 400
    assert "HH:mm" in response.get_json()["error"]


def test_custom_notification_routes(client, gateway):
    response = client.post(
        "/api/notifications/custom",
        json={"title": "Meditate", "body": "Five minutes", "time": "18:30"},
    )
    assert response.status_code == 201
    cid = response.get_json()["notification"]["id"]
    assert gateway.triggers()[f"custom-{cid}"] == (18, 30)

    response = client.patch(f"/api/notifications/custom/{cid}", json={"time": "19:00"})
    assert response.get_json()["notification"]["time"] == "19:00"

    response = client.post(f"/api/notifications/custom/{cid}/toggle", json={"enabled": False})
    assert response.get_json()["notification"]["enabled"] is False
    assert f"custom-{cid}" not in gateway.scheduled

    response = client.delete(f"/api/notifications/custom/{cid}")
    assert response.status_code == 200
    assert client.get("/api/notifications/settings").get_json()["custom_notifications"] == []


def test_custom_notification_validation(client):
    response = client.post("/api/notifications/custom", json={"title": "", "body": "x", "time": "09:00"})
    assert response.status_code == 400
    response = client.delete("/api/notifications/custom/missing")
    assert response.status_code == 404


def test_sync_reports_permission_denied(client, gateway):
    gateway.permission_granted = False
    body = client.post("/api/notifications/sync").get_json()
    assert body["permission_granted"] is False
    assert body["scheduled"] == {}


def test_one_shot_routes(client, gateway):
    assert client.post("/api/notifications/milestone", json={"days": 7}).get_json() == {"sent": True}
    assert client.post("/api/notifications/milestone", json={"days": "seven"}).status_code == 400
    assert client.post(
        "/api/notifications/goal-reminder",
        json={"title": "Read", "days_remaining": 3},
    ).get_json() == {"sent": True}
    assert client.post(
        "/api/notifications/goal-reminder",
        json={"title": "Read", "days_remaining": 30, "progress": 10},
    ).get_json() == {"sent": False}
    assert client.post("/api/notifications/goal-completed", json={"title": "Read"}).get_json() == {"sent": True}
    assert len(gateway.delivered) == 3
    assert "cancel_all" not in [op for op, _ in gateway.calls]


def test_one_shot_routes_respect_settings(client, gateway):
    client.patch("/api/notifications/settings", json={"milestone_notifications": False})
    assert client.post("/api/notifications/milestone", json={"days": 30}).get_json() == {"sent": False}
    assert gateway.delivered == []

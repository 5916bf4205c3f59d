# app.py
from flask import Flask, request, jsonify, abort
import logging
import os
from functools import lru_cache
from typing import Any, Dict

from reminders.config import GATEWAY_URL
from reminders.dispatcher import OneShotDispatcher
from reminders.exceptions import (
    GatewayError,
    InvalidReminderInput,
    InvalidTimeInput,
    ReminderNotFound,
)
from reminders.gateway import HttpGateway, InMemoryGateway, NotificationGateway
from reminders.milestones import goal_needs_reminder
from reminders.orchestrator import ReminderScheduler
from reminders.service import ReminderService
from reminders.store import JsonSettingsStore, SqlSettingsStore

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
LOGGER = logging.getLogger(__name__)

app = Flask(__name__)

APP_MODE = os.environ.get("APP_MODE", "prod").lower()
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.environ.get("DATA_DIR", BASE_DIR)


def data_path(name: str) -> str:
    return os.path.join(DATA_DIR, name)

# ------------------------------- Paths / Config -------------------------------
SETTINGS_FILE = data_path("notification_settings.json")
SETTINGS_PROFILE = os.getenv("SETTINGS_PROFILE", "default")

USE_DATABASE = os.getenv("USE_DATABASE", "1").strip().lower() not in {"0", "false", "no"}
DATABASE_URL = os.getenv("DATABASE_URL") or os.getenv("SQLALCHEMY_DATABASE_URI")
DEFAULT_SQLITE_URL = f"sqlite:///{data_path('reminders.db')}"

if not DATABASE_URL and USE_DATABASE:
    DATABASE_URL = DEFAULT_SQLITE_URL

DB_ENABLED = bool(USE_DATABASE and DATABASE_URL)


# ------------------------------- Wiring -------------------------------
@lru_cache(maxsize=1)
def get_gateway() -> NotificationGateway:
    if GATEWAY_URL:
        LOGGER.info("Using notification bridge at %s", GATEWAY_URL)
        return HttpGateway(GATEWAY_URL)
    return InMemoryGateway()


@lru_cache(maxsize=1)
def get_store():
    if DB_ENABLED:
        os.makedirs(DATA_DIR, exist_ok=True)
        return SqlSettingsStore(DATABASE_URL, profile=SETTINGS_PROFILE)
    return JsonSettingsStore(SETTINGS_FILE)


@lru_cache(maxsize=1)
def get_service() -> ReminderService:
    return ReminderService(get_store(), ReminderScheduler(get_gateway()))


@lru_cache(maxsize=1)
def get_dispatcher() -> OneShotDispatcher:
    return OneShotDispatcher(get_gateway())


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        abort(400, description="JSON object expected")
    return payload


def _int_field(payload: Dict[str, Any], name: str) -> int:
    value = payload.get(name)
    if isinstance(value, bool):
        abort(400, description=f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        abort(400, description=f"{name} must be an integer")


def _text_field(payload: Dict[str, Any], name: str) -> str:
    value = str(payload.get(name) or "").strip()
    if not value:
        abort(400, description=f"{name} is required")
    return value


# ------------------------------- Errors -------------------------------
@app.errorhandler(InvalidTimeInput)
@app.errorhandler(InvalidReminderInput)
def handle_invalid_input(exc):
    return jsonify({"error": str(exc)}), 400


@app.errorhandler(ReminderNotFound)
def handle_not_found(exc):
    return jsonify({"error": f"custom notification {exc.args[0]} not found"}), 404


@app.errorhandler(GatewayError)
def handle_gateway_error(exc):
    LOGGER.error("Notification gateway failure: %s", exc)
    return jsonify({"error": "notification gateway unavailable"}), 502


@app.errorhandler(400)
def handle_bad_request(exc):
    return jsonify({"error": exc.description}), 400


@app.get("/healthz")
def healthz():
    return {"ok": True, "mode": APP_MODE}, 200


# ------------------------------- Settings -------------------------------
@app.get("/api/notifications/settings")
def notification_settings():
    return jsonify(get_service().get_settings().to_dict())


@app.patch("/api/notifications/settings")
def notification_settings_update():
    settings, report = get_service().update_settings(_json_body())
    return jsonify({"settings": settings.to_dict(), "reconcile": report.to_dict()})


@app.post("/api/notifications/sync")
def notifications_sync():
    report = get_service().sync()
    return jsonify(report.to_dict())


# ------------------------------- Custom reminders -------------------------------
@app.post("/api/notifications/custom")
def custom_add():
    payload = _json_body()
    custom, report = get_service().add_custom(
        payload.get("title", ""),
        payload.get("body", ""),
        payload.get("time", "09:00"),
    )
    return jsonify({"notification": custom.to_dict(), "reconcile": report.to_dict()}), 201


@app.patch("/api/notifications/custom/<cid>")
def custom_edit(cid):
    payload = _json_body()
    custom, report = get_service().edit_custom(
        cid,
        title=payload.get("title"),
        body=payload.get("body"),
        time=payload.get("time"),
    )
    return jsonify({"notification": custom.to_dict(), "reconcile": report.to_dict()})


@app.post("/api/notifications/custom/<cid>/toggle")
def custom_toggle(cid):
    payload = _json_body()
    enabled = payload.get("enabled")
    if enabled is not None and not isinstance(enabled, bool):
        abort(400, description="enabled must be a boolean")
    custom, report = get_service().set_custom_enabled(cid, enabled)
    return jsonify({"notification": custom.to_dict(), "reconcile": report.to_dict()})


@app.delete("/api/notifications/custom/<cid>")
def custom_delete(cid):
    report = get_service().delete_custom(cid)
    return jsonify({"deleted": cid, "reconcile": report.to_dict()})


# ------------------------------- One-shot notifications -------------------------------
@app.post("/api/notifications/milestone")
def milestone_notify():
    days = _int_field(_json_body(), "days")
    sent = get_dispatcher().send_milestone(days, settings=get_service().get_settings())
    return jsonify({"sent": sent})


@app.post("/api/notifications/goal-reminder")
def goal_reminder_notify():
    payload = _json_body()
    title = _text_field(payload, "title")
    days_remaining = _int_field(payload, "days_remaining")
    if "progress" in payload:
        try:
            progress = float(payload["progress"])
        except (TypeError, ValueError):
            abort(400, description="progress must be a number")
        if not goal_needs_reminder(progress, days_remaining):
            return jsonify({"sent": False})
    sent = get_dispatcher().send_goal_reminder(title, days_remaining, settings=get_service().get_settings())
    return jsonify({"sent": sent})


@app.post("/api/notifications/goal-completed")
def goal_completed_notify():
    title = _text_field(_json_body(), "title")
    sent = get_dispatcher().send_goal_completion(title, settings=get_service().get_settings())
    return jsonify({"sent": sent})


if __name__ == "__main__":
    app.run(debug=APP_MODE != "prod", threaded=True)

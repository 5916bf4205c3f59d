"""Shared configuration defaults for the reminder engine."""
from __future__ import annotations

import os

DEFAULT_NOTIFICATION_SETTINGS = {
    "morning_reminder": True,
    "morning_time": "08:00",
    "midday_reminder": True,
    "midday_time": "13:00",
    "evening_reminder": True,
    "evening_time": "20:00",
    "milestone_notifications": True,
    "motivational_quotes": True,
    "motivational_quotes_time": "10:00",
    "goal_reminders": True,
    "quiet_hours_start": "22:00",
    "quiet_hours_end": "07:00",
    "custom_notifications": [],
}

MORNING_REMINDER_ID = "morning-reminder"
MIDDAY_REMINDER_ID = "midday-reminder"
EVENING_REMINDER_ID = "evening-reminder"
MOTIVATIONAL_QUOTE_ID = "motivational-quote"
CUSTOM_REMINDER_PREFIX = "custom-"

# (identifier, toggle field, time field, title, body); the quote body is picked at schedule time
BUILTIN_SLOTS = [
    (
        MORNING_REMINDER_ID,
        "morning_reminder",
        "morning_time",
        "Good Morning! \U0001F305",
        "Time to start your morning routine and set your intention for the day.",
    ),
    (
        MIDDAY_REMINDER_ID,
        "midday_reminder",
        "midday_time",
        "Midday Check-in ☕",
        "How are you feeling? Take a moment to check in with yourself.",
    ),
    (
        EVENING_REMINDER_ID,
        "evening_reminder",
        "evening_time",
        "Evening Reflection \U0001F319",
        "Time to complete your evening shutdown and journal entry.",
    ),
    (
        MOTIVATIONAL_QUOTE_ID,
        "motivational_quotes",
        "motivational_quotes_time",
        "\U0001F49A Daily Motivation",
        None,
    ),
]

TIME_FIELDS = {"morning_time", "midday_time", "evening_time", "motivational_quotes_time"}
OPTIONAL_TIME_FIELDS = {"quiet_hours_start", "quiet_hours_end"}
TOGGLE_FIELDS = {
    "morning_reminder",
    "midday_reminder",
    "evening_reminder",
    "milestone_notifications",
    "motivational_quotes",
    "goal_reminders",
}

NOTIFICATION_CHANNEL = {
    "id": "default",
    "name": "Break Free Reminders",
    "importance": "high",
    "vibration_pattern": [0, 250, 250, 250],
    "light_color": "#5a7a5a",
    "sound": "default",
}

STREAK_MILESTONES = (7, 30, 90, 180, 365)
GOAL_PROGRESS_MARKERS = (25, 50, 75)
GOAL_PROGRESS_BAND = 5
GOAL_FINAL_STRETCH_DAYS = 5

GATEWAY_URL = os.getenv("NOTIFY_GATEWAY_URL")
GATEWAY_TOKEN = os.getenv("NOTIFY_GATEWAY_TOKEN")
GATEWAY_TIMEOUT = float(os.getenv("NOTIFY_GATEWAY_TIMEOUT", "10"))

"""Settings persistence: a locked JSON file or a SQLAlchemy table."""
from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, DateTime, String, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .models import NotificationSettings

try:
    import fcntl  # type: ignore[import]
except ImportError:
    fcntl = None

LOGGER = logging.getLogger(__name__)


@contextlib.contextmanager
def with_json_lock(path: str):
    lock_path = f"{path}.lock"
    os.makedirs(os.path.dirname(lock_path) or ".", exist_ok=True)
    lock_file = open(lock_path, "a+")
    locked = False
    try:
        if fcntl is not None:
            fcntl.flock(lock_file, fcntl.LOCK_EX)
            locked = True
        yield
    finally:
        try:
            if locked:
                fcntl.flock(lock_file, fcntl.LOCK_UN)
        finally:
            lock_file.close()


def save_json_atomic(path: str, data: Any) -> None:
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)
    with with_json_lock(path):
        fd, tmp = tempfile.mkstemp(prefix=".tmp-", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        finally:
            try:
                os.remove(tmp)
            except OSError:
                pass


def load_json(path: str, default: Any) -> Any:
    try:
        with with_json_lock(path):
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
    except FileNotFoundError:
        return default
    except json.JSONDecodeError:
        LOGGER.warning("Ignoring unreadable settings file %s", path)
        return default


class JsonSettingsStore:
    """Keeps one settings document in a JSON file."""

    def __init__(self, path: str) -> None:
        self.path = path

    def load_settings(self) -> NotificationSettings:
        data = load_json(self.path, {})
        if not isinstance(data, dict):
            data = {}
        return NotificationSettings.from_dict(data)

    def save_settings(self, settings: NotificationSettings) -> None:
        save_json_atomic(self.path, settings.to_dict())


Base = declarative_base()


class NotificationSettingsModel(Base):
    __tablename__ = "notification_settings"
    profile = Column(String(80), primary_key=True)
    payload = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class SqlSettingsStore:
    """Keeps settings documents keyed by profile in a SQL table."""

    def __init__(self, database_url: str, profile: str = "default", engine=None) -> None:
        if engine is None:
            engine_kwargs: Dict[str, Any] = {"future": True}
            if database_url.startswith("sqlite"):
                engine_kwargs["connect_args"] = {"check_same_thread": False}
            engine = create_engine(database_url, pool_pre_ping=not database_url.startswith("sqlite"), **engine_kwargs)
        self.engine = engine
        self.profile = profile
        self.SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)
        Base.metadata.create_all(engine)

    def load_settings(self) -> NotificationSettings:
        with self.SessionLocal() as session:
            row: Optional[NotificationSettingsModel] = session.get(NotificationSettingsModel, self.profile)
            payload = dict(row.payload or {}) if row else {}
        return NotificationSettings.from_dict(payload)

    def save_settings(self, settings: NotificationSettings) -> None:
        with self.SessionLocal() as session:
            row = session.get(NotificationSettingsModel, self.profile)
            if row is None:
                row = NotificationSettingsModel(profile=self.profile)
                session.add(row)
            row.payload = settings.to_dict()
            row.updated_at = datetime.utcnow()
            session.commit()
        LOGGER.debug("Saved notification settings for profile %s", self.profile)

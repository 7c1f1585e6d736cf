# src/taskflow/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Everything has a working default so `taskflow` runs with zero setup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKFLOW"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- HTTP server ----
    host: str
    port: int
    debug: bool

    # ---- HTTP client (console against a remote server) ----
    api_url: str
    http_timeout_seconds: float

    # ---- Store ----
    seed_sample_data: bool

    # ---- Notifications ----
    notifications_enabled: bool
    notify_interval_seconds: float
    notify_cooldown_minutes: int
    notify_due_soon_hours: int
    due_soon_display_hours: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskflow") or "taskflow"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskflow"))

        host = _env(_k("HOST"), "127.0.0.1")
        port = _env_int(_k("PORT"), 5000)
        debug = _env_bool(_k("DEBUG"), False)

        api_url = _env(_k("API_URL"), "").strip()
        http_timeout_seconds = max(0.5, _env_float(_k("HTTP_TIMEOUT_SECONDS"), 10.0))

        seed_sample_data = _env_bool(_k("SEED_SAMPLE_DATA"), True)

        notifications_enabled = _env_bool(_k("NOTIFICATIONS_ENABLED"), True)
        notify_interval_seconds = max(1.0, _env_float(_k("NOTIFY_INTERVAL_SECONDS"), 60.0))
        notify_cooldown_minutes = max(0, _env_int(_k("NOTIFY_COOLDOWN_MINUTES"), 30))
        notify_due_soon_hours = max(1, _env_int(_k("NOTIFY_DUE_SOON_HOURS"), 2))
        due_soon_display_hours = max(1, _env_int(_k("DUE_SOON_DISPLAY_HOURS"), 48))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            host=host,
            port=port,
            debug=debug,
            api_url=api_url,
            http_timeout_seconds=http_timeout_seconds,
            seed_sample_data=seed_sample_data,
            notifications_enabled=notifications_enabled,
            notify_interval_seconds=notify_interval_seconds,
            notify_cooldown_minutes=notify_cooldown_minutes,
            notify_due_soon_hours=notify_due_soon_hours,
            due_soon_display_hours=due_soon_display_hours,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS

from __future__ import annotations

import os
from typing import Optional


_API_DATA_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "apps", "api", "data")
)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


def store_backend() -> str:
    return os.getenv("MEMORYKEEPER_STORE", "sqlite").strip().lower()


def db_path() -> str:
    return os.getenv("MEMORYKEEPER_DB_PATH", os.path.join(_API_DATA_DIR, "reminders.db"))


def notifications_enabled() -> bool:
    return _env_bool("MEMORYKEEPER_NOTIFICATIONS_ENABLED", "true")


def notify_interval_seconds() -> float:
    return float(os.getenv("MEMORYKEEPER_NOTIFY_INTERVAL_SECONDS", "30"))


def notify_delay_seconds() -> float:
    return float(os.getenv("MEMORYKEEPER_NOTIFY_DELAY_SECONDS", "1"))


def speech_rate() -> int:
    return int(os.getenv("MEMORYKEEPER_SPEECH_RATE", "175"))


def openai_api_key() -> Optional[str]:
    return os.getenv("OPENAI_API_KEY") or os.getenv("OPENAI_KEY") or os.getenv("API_KEY")


def openai_model() -> str:
    return os.getenv("OPENAI_MODEL", "gpt-4o")


def openai_base_url() -> str:
    return os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")


def openai_timeout_seconds() -> int:
    return int(os.getenv("OPENAI_TIMEOUT_SECONDS", "60"))

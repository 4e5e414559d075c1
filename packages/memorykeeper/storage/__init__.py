from .base import (
    DEFAULT_CATEGORY,
    ReminderDraft,
    ReminderState,
    ReminderStore,
)
from .memory import InMemoryReminderStore
from .sqlite import SQLiteReminderStore

__all__ = [
    "DEFAULT_CATEGORY",
    "ReminderDraft",
    "ReminderState",
    "ReminderStore",
    "InMemoryReminderStore",
    "SQLiteReminderStore",
    "build_reminder_store",
]


def build_reminder_store(backend: str, db_path: str) -> ReminderStore:
    if backend == "memory":
        return InMemoryReminderStore()
    if backend == "sqlite":
        return SQLiteReminderStore(db_path=db_path)
    raise ValueError(f"Unknown reminder store backend: {backend}")

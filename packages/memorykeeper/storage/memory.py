from __future__ import annotations

import dataclasses
import threading
from typing import Any, Dict, List, Mapping, Optional

from .base import (
    Clock,
    ReminderDraft,
    ReminderState,
    ReminderStore,
    bumped_timestamp,
    newest_first,
    normalize_changes,
    normalize_draft,
    to_iso,
    utc_now,
)


class InMemoryReminderStore(ReminderStore):
    """Volatile store; everything is lost when the process exits."""

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._reminders: Dict[int, ReminderState] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    def insert_reminder(self, draft: ReminderDraft) -> ReminderState:
        draft = normalize_draft(draft)
        with self._lock:
            now = to_iso(self._clock())
            reminder = ReminderState(
                id=self._next_id,
                content=draft.content,
                category=draft.category,
                important=draft.important,
                created_at=now,
                updated_at=now,
            )
            self._reminders[reminder.id] = reminder
            self._next_id += 1
            return reminder

    def list_reminders(self) -> List[ReminderState]:
        with self._lock:
            return newest_first(self._reminders.values())

    def list_reminders_by_category(self, category: str) -> List[ReminderState]:
        with self._lock:
            return newest_first(r for r in self._reminders.values() if r.category == category)

    def get_reminder(self, reminder_id: int) -> Optional[ReminderState]:
        with self._lock:
            return self._reminders.get(reminder_id)

    def update_reminder(
        self, reminder_id: int, changes: Mapping[str, Any]
    ) -> Optional[ReminderState]:
        cleaned = normalize_changes(changes)
        with self._lock:
            existing = self._reminders.get(reminder_id)
            if existing is None:
                return None
            updated = dataclasses.replace(
                existing,
                **cleaned,
                updated_at=bumped_timestamp(existing.updated_at, self._clock()),
            )
            self._reminders[reminder_id] = updated
            return updated

    def delete_reminder(self, reminder_id: int) -> bool:
        with self._lock:
            return self._reminders.pop(reminder_id, None) is not None

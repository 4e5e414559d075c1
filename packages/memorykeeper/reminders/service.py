from __future__ import annotations

from typing import Any, List, Optional

from ..storage.base import ReminderDraft, ReminderState, ReminderStore


def create_reminder(
    store: ReminderStore,
    content: str,
    category: Optional[str] = None,
    important: Optional[bool] = None,
) -> ReminderState:
    return store.insert_reminder(
        ReminderDraft(content=content, category=category, important=important)
    )


def list_reminders(store: ReminderStore, category: Optional[str] = None) -> List[ReminderState]:
    if category:
        return store.list_reminders_by_category(category)
    return store.list_reminders()


def get_reminder(store: ReminderStore, reminder_id: int) -> Optional[ReminderState]:
    return store.get_reminder(reminder_id)


def update_reminder(
    store: ReminderStore, reminder_id: int, **changes: Any
) -> Optional[ReminderState]:
    """Merge only the supplied fields. An empty call still refreshes ``updated_at``."""
    return store.update_reminder(reminder_id, changes)


def delete_reminder(store: ReminderStore, reminder_id: int) -> bool:
    return store.delete_reminder(reminder_id)


def important_reminders(store: ReminderStore) -> List[ReminderState]:
    return [reminder for reminder in store.list_reminders() if reminder.important]

from __future__ import annotations

from typing import Optional, Sequence

from ..storage.base import ReminderState


MAX_ANNOUNCED = 3


def important_announcement(reminders: Sequence[ReminderState]) -> Optional[str]:
    """Periodic announcement for the important subset; None when there is nothing to say."""
    if not reminders:
        return None
    if len(reminders) == 1:
        return f"You have an important reminder: {reminders[0].content}"
    contents = ". ".join(reminder.content for reminder in reminders[:MAX_ANNOUNCED])
    return f"You have {len(reminders)} important reminders. {contents}"


def read_all_text(reminders: Sequence[ReminderState]) -> str:
    if not reminders:
        return "You have no reminders."
    items = ". ".join(
        f"{index}. {'Important: ' if reminder.important else ''}{reminder.content}"
        for index, reminder in enumerate(reminders, start=1)
    )
    plural = "s" if len(reminders) > 1 else ""
    return f"You have {len(reminders)} reminder{plural}. {items}"


def read_one_text(reminder: ReminderState) -> str:
    prefix = "Important reminder:" if reminder.important else "Reminder:"
    return f"{prefix} {reminder.content}"

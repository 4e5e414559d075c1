from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Protocol, runtime_checkable

from ..errors import ValidationError


DEFAULT_CATEGORY = "Personal"
UPDATABLE_FIELDS = ("content", "category", "important")

Clock = Callable[[], dt.datetime]


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def to_iso(value: dt.datetime) -> str:
    # Fixed width so stored timestamps sort lexicographically.
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc).isoformat(timespec="microseconds")


def bumped_timestamp(previous_iso: str, now: dt.datetime) -> str:
    """Return ``now`` as ISO, nudged forward so it is strictly after ``previous_iso``."""
    previous = dt.datetime.fromisoformat(previous_iso)
    if now.tzinfo is None:
        now = now.replace(tzinfo=dt.timezone.utc)
    if now <= previous:
        now = previous + dt.timedelta(microseconds=1)
    return to_iso(now)


@dataclass(frozen=True)
class ReminderDraft:
    content: str
    category: Optional[str] = None
    important: Optional[bool] = None


@dataclass(frozen=True)
class ReminderState:
    id: int
    content: str
    category: str
    important: bool
    created_at: str
    updated_at: str


@runtime_checkable
class ReminderStore(Protocol):
    def insert_reminder(self, draft: ReminderDraft) -> ReminderState:
        """Validate and persist a new reminder. Raises ValidationError on bad input."""

    def list_reminders(self) -> List[ReminderState]:
        """List all reminders, newest first."""

    def list_reminders_by_category(self, category: str) -> List[ReminderState]:
        """List reminders with exactly this category, newest first."""

    def get_reminder(self, reminder_id: int) -> Optional[ReminderState]:
        """Return reminder by id, or None."""

    def update_reminder(
        self, reminder_id: int, changes: Mapping[str, Any]
    ) -> Optional[ReminderState]:
        """Merge changes into a reminder. Returns None if it does not exist."""

    def delete_reminder(self, reminder_id: int) -> bool:
        """Delete a reminder. Returns True if deleted."""


def _clean_content(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("content must be a non-empty string")
    return value.strip()


def _clean_category(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("category must be a non-empty string")
    return value.strip()


def _clean_important(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValidationError("important must be a boolean")
    return value


def normalize_draft(draft: ReminderDraft) -> ReminderDraft:
    return ReminderDraft(
        content=_clean_content(draft.content),
        category=DEFAULT_CATEGORY if draft.category is None else _clean_category(draft.category),
        important=False if draft.important is None else _clean_important(draft.important),
    )


def normalize_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
    unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown reminder fields: {', '.join(unknown)}")
    cleaned: Dict[str, Any] = {}
    if "content" in changes:
        cleaned["content"] = _clean_content(changes["content"])
    if "category" in changes:
        cleaned["category"] = _clean_category(changes["category"])
    if "important" in changes:
        cleaned["important"] = _clean_important(changes["important"])
    return cleaned


def newest_first(reminders: Iterable[ReminderState]) -> List[ReminderState]:
    return sorted(reminders, key=lambda r: (r.created_at, r.id), reverse=True)

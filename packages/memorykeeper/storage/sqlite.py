from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional, Sequence

from ..errors import BackendUnavailable
from .base import (
    DEFAULT_CATEGORY,
    Clock,
    ReminderDraft,
    ReminderState,
    ReminderStore,
    bumped_timestamp,
    normalize_changes,
    normalize_draft,
    to_iso,
    utc_now,
)


logger = logging.getLogger("memorykeeper.store")

_COLUMNS = "id, content, category, important, created_at, updated_at"

# SQLite INTEGER is a signed 64-bit value; ids outside it can never exist.
_MIN_ROWID = -(2**63)
_MAX_ROWID = 2**63 - 1


def _row_to_reminder(row: Sequence[Any]) -> ReminderState:
    return ReminderState(
        id=row[0],
        content=row[1],
        category=row[2],
        important=bool(row[3]),
        created_at=row[4],
        updated_at=row[5],
    )


def _storable_id(reminder_id: int) -> bool:
    return _MIN_ROWID <= reminder_id <= _MAX_ROWID


class SQLiteReminderStore(ReminderStore):
    def __init__(self, db_path: str, clock: Clock = utc_now) -> None:
        self._db_path = db_path
        self._clock = clock
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        self._init_db()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as exc:
            logger.exception("sqlite_connect_failed path=%s", self._db_path)
            raise BackendUnavailable(f"Cannot open reminder database: {exc}") from exc
        try:
            with conn:
                yield conn
        except sqlite3.Error as exc:
            logger.exception("sqlite_operation_failed path=%s error=%s", self._db_path, exc)
            raise BackendUnavailable(f"Reminder database error: {exc}") from exc
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS reminders (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    content TEXT NOT NULL,
                    category TEXT NOT NULL DEFAULT '{DEFAULT_CATEGORY}',
                    important INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL
                        DEFAULT (strftime('%Y-%m-%dT%H:%M:%f000+00:00', 'now')),
                    updated_at TEXT NOT NULL
                        DEFAULT (strftime('%Y-%m-%dT%H:%M:%f000+00:00', 'now'))
                )
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS reminders_category_idx
                ON reminders (category, created_at)
                """
            )

    def insert_reminder(self, draft: ReminderDraft) -> ReminderState:
        draft = normalize_draft(draft)
        now = to_iso(self._clock())
        with self._connect() as conn:
            cur = conn.execute(
                """
                INSERT INTO reminders (content, category, important, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (draft.content, draft.category, 1 if draft.important else 0, now, now),
            )
            reminder_id = cur.lastrowid
        logger.debug("reminder_inserted id=%s category=%s", reminder_id, draft.category)
        return ReminderState(
            id=reminder_id,
            content=draft.content,
            category=draft.category,
            important=draft.important,
            created_at=now,
            updated_at=now,
        )

    def list_reminders(self) -> List[ReminderState]:
        with self._connect() as conn:
            rows = conn.execute(
                f"""
                SELECT {_COLUMNS}
                FROM reminders
                ORDER BY created_at DESC, id DESC
                """
            ).fetchall()
            return [_row_to_reminder(row) for row in rows]

    def list_reminders_by_category(self, category: str) -> List[ReminderState]:
        with self._connect() as conn:
            rows = conn.execute(
                f"""
                SELECT {_COLUMNS}
                FROM reminders
                WHERE category = ?
                ORDER BY created_at DESC, id DESC
                """,
                (category,),
            ).fetchall()
            return [_row_to_reminder(row) for row in rows]

    def get_reminder(self, reminder_id: int) -> Optional[ReminderState]:
        if not _storable_id(reminder_id):
            return None
        with self._connect() as conn:
            return self._fetch(conn, reminder_id)

    def _fetch(self, conn: sqlite3.Connection, reminder_id: int) -> Optional[ReminderState]:
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM reminders WHERE id = ?",
            (reminder_id,),
        ).fetchone()
        if row is None:
            return None
        return _row_to_reminder(row)

    def update_reminder(
        self, reminder_id: int, changes: Mapping[str, Any]
    ) -> Optional[ReminderState]:
        cleaned = normalize_changes(changes)
        if not _storable_id(reminder_id):
            return None
        with self._connect() as conn:
            existing = self._fetch(conn, reminder_id)
            if existing is None:
                return None
            updated = ReminderState(
                id=existing.id,
                content=cleaned.get("content", existing.content),
                category=cleaned.get("category", existing.category),
                important=cleaned.get("important", existing.important),
                created_at=existing.created_at,
                updated_at=bumped_timestamp(existing.updated_at, self._clock()),
            )
            conn.execute(
                """
                UPDATE reminders
                SET content = ?, category = ?, important = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    updated.content,
                    updated.category,
                    1 if updated.important else 0,
                    updated.updated_at,
                    updated.id,
                ),
            )
            return updated

    def delete_reminder(self, reminder_id: int) -> bool:
        if not _storable_id(reminder_id):
            return False
        with self._connect() as conn:
            result = conn.execute("DELETE FROM reminders WHERE id = ?", (reminder_id,))
            return result.rowcount > 0

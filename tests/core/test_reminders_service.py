import datetime as dt

from packages.memorykeeper.notifications.announcements import (
    important_announcement,
    read_all_text,
    read_one_text,
)
from packages.memorykeeper.reminders import KNOWN_CATEGORIES
from packages.memorykeeper.reminders.service import (
    create_reminder,
    delete_reminder,
    get_reminder,
    important_reminders,
    list_reminders,
    update_reminder,
)
from packages.memorykeeper.storage.memory import InMemoryReminderStore
from packages.memorykeeper.storage.sqlite import SQLiteReminderStore


def _ticking_clock():
    state = {"now": dt.datetime(2026, 3, 1, 8, 0, tzinfo=dt.timezone.utc)}

    def clock():
        state["now"] += dt.timedelta(seconds=1)
        return state["now"]

    return clock


def test_reminder_create_update_delete(tmp_path):
    store = SQLiteReminderStore(db_path=str(tmp_path / "reminders.db"), clock=_ticking_clock())

    reminder = create_reminder(store, content="Trash day", category="Other")
    assert reminder.id == 1
    assert reminder.important is False

    updated = update_reminder(store, reminder.id, content="Trash day (recycling)", important=True)
    assert updated.content == "Trash day (recycling)"
    assert updated.important is True
    assert get_reminder(store, reminder.id) == updated

    assert delete_reminder(store, reminder.id) is True
    assert list_reminders(store) == []


def test_list_reminders_with_and_without_category():
    store = InMemoryReminderStore(clock=_ticking_clock())
    pills = create_reminder(store, content="Pills", category="Health", important=True)
    report = create_reminder(store, content="Report", category="Work")

    assert list_reminders(store) == [report, pills]
    assert list_reminders(store, category="Health") == [pills]
    assert list_reminders(store, category=None) == [report, pills]


def test_important_reminders_keep_store_order():
    store = InMemoryReminderStore(clock=_ticking_clock())
    first = create_reminder(store, content="first", important=True)
    create_reminder(store, content="plain")
    third = create_reminder(store, content="third", important=True)

    assert important_reminders(store) == [third, first]


def test_known_categories():
    assert KNOWN_CATEGORIES == ("Personal", "Work", "Health", "Other")


def test_important_announcement_text():
    store = InMemoryReminderStore(clock=_ticking_clock())
    assert important_announcement([]) is None

    one = create_reminder(store, content="Call the vet", important=True)
    assert important_announcement([one]) == "You have an important reminder: Call the vet"

    for content in ("b", "c", "d", "e"):
        create_reminder(store, content=content, important=True)
    text = important_announcement(important_reminders(store))
    assert text == "You have 5 important reminders. e. d. c"


def test_read_aloud_text():
    store = InMemoryReminderStore(clock=_ticking_clock())
    assert read_all_text([]) == "You have no reminders."

    milk = create_reminder(store, content="Buy milk")
    assert read_all_text([milk]) == "You have 1 reminder. 1. Buy milk"

    rent = create_reminder(store, content="Pay rent", important=True)
    assert read_all_text(list_reminders(store)) == (
        "You have 2 reminders. 1. Important: Pay rent. 2. Buy milk"
    )
    assert read_one_text(rent) == "Important reminder: Pay rent"
    assert read_one_text(milk) == "Reminder: Buy milk"

import datetime as dt

import pytest

from packages.memorykeeper.errors import ValidationError
from packages.memorykeeper.storage import (
    InMemoryReminderStore,
    ReminderDraft,
    SQLiteReminderStore,
)


class StepClock:
    def __init__(self, step_seconds=1):
        self.now = dt.datetime(2026, 1, 5, 9, 0, tzinfo=dt.timezone.utc)
        self.step = dt.timedelta(seconds=step_seconds)

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


@pytest.fixture(params=["memory", "sqlite"])
def make_store(request, tmp_path):
    def _make(clock=None):
        kwargs = {"clock": clock} if clock is not None else {}
        if request.param == "memory":
            return InMemoryReminderStore(**kwargs)
        return SQLiteReminderStore(db_path=str(tmp_path / "reminders.db"), **kwargs)

    return _make


def test_insert_assigns_id_defaults_and_timestamps(make_store):
    store = make_store(StepClock())

    reminder = store.insert_reminder(ReminderDraft(content="  Buy milk  "))

    assert reminder.id == 1
    assert reminder.content == "Buy milk"
    assert reminder.category == "Personal"
    assert reminder.important is False
    assert reminder.created_at == reminder.updated_at
    assert store.get_reminder(1) == reminder


def test_list_is_newest_first(make_store):
    store = make_store(StepClock())
    first = store.insert_reminder(ReminderDraft(content="first"))
    second = store.insert_reminder(ReminderDraft(content="second"))
    third = store.insert_reminder(ReminderDraft(content="third"))

    assert [r.id for r in store.list_reminders()] == [third.id, second.id, first.id]


def test_equal_timestamps_fall_back_to_id_descending(make_store):
    store = make_store(StepClock(step_seconds=0))
    for content in ("a", "b", "c"):
        store.insert_reminder(ReminderDraft(content=content))

    reminders = store.list_reminders()
    assert len({r.created_at for r in reminders}) == 1
    assert [r.content for r in reminders] == ["c", "b", "a"]


def test_category_filter_is_exact(make_store):
    store = make_store(StepClock())
    health = store.insert_reminder(
        ReminderDraft(content="Take vitamins", category="Health", important=True)
    )
    work = store.insert_reminder(ReminderDraft(content="Send report", category="Work"))

    assert store.list_reminders_by_category("Health") == [health]
    assert store.list_reminders_by_category("health") == []
    assert [r.id for r in store.list_reminders()] == [work.id, health.id]


def test_unknown_ids_return_not_found(make_store):
    store = make_store()

    assert store.get_reminder(42) is None
    assert store.update_reminder(42, {"content": "nope"}) is None
    assert store.delete_reminder(42) is False


@pytest.mark.parametrize("reminder_id", [2**63, 2**70, -(2**63) - 1])
def test_ids_beyond_64_bits_return_not_found(make_store, reminder_id):
    store = make_store()
    store.insert_reminder(ReminderDraft(content="Water plants"))

    assert store.get_reminder(reminder_id) is None
    assert store.update_reminder(reminder_id, {"content": "nope"}) is None
    assert store.delete_reminder(reminder_id) is False
    assert len(store.list_reminders()) == 1


@pytest.mark.parametrize("content", ["", "   ", "\n\t"])
def test_blank_content_is_rejected_without_using_an_id(make_store, content):
    store = make_store()

    with pytest.raises(ValidationError):
        store.insert_reminder(ReminderDraft(content=content))

    assert store.insert_reminder(ReminderDraft(content="real")).id == 1
    assert len(store.list_reminders()) == 1


def test_invalid_draft_fields_are_rejected(make_store):
    store = make_store()

    with pytest.raises(ValidationError):
        store.insert_reminder(ReminderDraft(content="x", category="  "))
    with pytest.raises(ValidationError):
        store.insert_reminder(ReminderDraft(content="x", important="yes"))


def test_empty_update_only_bumps_updated_at(make_store):
    store = make_store(StepClock(step_seconds=0))
    reminder = store.insert_reminder(ReminderDraft(content="Call mom", category="Personal"))

    updated = store.update_reminder(reminder.id, {})

    assert updated is not None
    assert updated.updated_at > reminder.updated_at
    assert (updated.id, updated.content, updated.category, updated.important, updated.created_at) == (
        reminder.id,
        reminder.content,
        reminder.category,
        reminder.important,
        reminder.created_at,
    )
    again = store.update_reminder(reminder.id, {})
    assert again.updated_at > updated.updated_at


def test_update_merges_supplied_fields(make_store):
    store = make_store(StepClock())
    reminder = store.insert_reminder(ReminderDraft(content="Dentist", category="Health"))

    updated = store.update_reminder(reminder.id, {"important": True, "content": " Dentist at 3 "})

    assert updated.content == "Dentist at 3"
    assert updated.category == "Health"
    assert updated.important is True
    assert updated.created_at == reminder.created_at
    assert updated.created_at <= updated.updated_at
    assert store.get_reminder(reminder.id) == updated


def test_update_rejects_bad_fields(make_store):
    store = make_store()
    reminder = store.insert_reminder(ReminderDraft(content="Dentist"))

    with pytest.raises(ValidationError):
        store.update_reminder(reminder.id, {"content": "  "})
    with pytest.raises(ValidationError):
        store.update_reminder(reminder.id, {"id": 99})
    with pytest.raises(ValidationError):
        store.update_reminder(reminder.id, {"important": None})

    assert store.get_reminder(reminder.id) == reminder


def test_delete_twice(make_store):
    store = make_store()
    reminder = store.insert_reminder(ReminderDraft(content="Water plants"))

    assert store.delete_reminder(reminder.id) is True
    assert store.delete_reminder(reminder.id) is False
    assert store.get_reminder(reminder.id) is None


def test_ids_are_not_reused_after_delete(make_store):
    store = make_store()
    store.insert_reminder(ReminderDraft(content="one"))
    second = store.insert_reminder(ReminderDraft(content="two"))
    store.delete_reminder(second.id)

    assert store.insert_reminder(ReminderDraft(content="three")).id == 3


def test_realizations_agree_on_ordering_and_filtering(tmp_path):
    memory = InMemoryReminderStore(clock=StepClock(step_seconds=0))
    sqlite = SQLiteReminderStore(db_path=str(tmp_path / "r.db"), clock=StepClock(step_seconds=0))

    def replay(store):
        store.insert_reminder(ReminderDraft(content="a", category="Work"))
        store.insert_reminder(ReminderDraft(content="b", category="Health", important=True))
        store.insert_reminder(ReminderDraft(content="c", category="Work"))
        store.update_reminder(1, {"important": True})
        store.delete_reminder(2)
        store.insert_reminder(ReminderDraft(content="d"))
        return (
            [(r.id, r.content, r.category, r.important) for r in store.list_reminders()],
            [r.id for r in store.list_reminders_by_category("Work")],
        )

    assert replay(memory) == replay(sqlite)

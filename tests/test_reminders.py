from datetime import timedelta

import pytest

from helpers.datetime_utils import ensure_utc
from services.reminders import ReminderService
from services.tasks import TaskService


@pytest.fixture()
def tasks(session_factory, clock):
    return TaskService("user-1", session_factory=session_factory, clock=clock)


@pytest.fixture()
def received():
    return []


@pytest.fixture()
def reminders(session_factory, clock, received):
    return ReminderService(
        "user-1", session_factory=session_factory, clock=clock, notifier=received.append
    )


def test_due_reminder_fires_once(tasks, reminders, clock, received):
    task = tasks.add("Call the bank")
    reminder = reminders.add(task.id, clock.now + timedelta(minutes=10))

    assert reminders.check() == []
    clock.advance(minutes=10)
    notices = reminders.check()

    assert len(notices) == 1
    notice = notices[0]
    assert notice.reminder_id == reminder.id
    assert notice.title == "Task Reminder"
    assert notice.body == "Reminder: Call the bank"
    assert notice.remind_at == clock.now
    assert received == notices

    assert reminders.check() == []
    assert reminders.list() == []


def test_custom_message_is_used(tasks, reminders, clock):
    task = tasks.add("Stretch")
    reminders.add(task.id, clock.now, message="Stand up and stretch", reminder_type="email")
    notice = reminders.check()[0]
    assert notice.body == "Stand up and stretch"
    assert notice.reminder_type == "email"


def test_list_and_due_are_ordered(tasks, reminders, clock):
    task = tasks.add("Prepare slides")
    late = reminders.add(task.id, clock.now + timedelta(hours=2))
    early = reminders.add(task.id, clock.now + timedelta(hours=1))

    assert [r.id for r in reminders.list()] == [early.id, late.id]
    assert [r.id for r in reminders.due(clock.now + timedelta(hours=1))] == [early.id]
    assert ensure_utc(reminders.list()[0].remind_at) == clock.now + timedelta(hours=1)


def test_add_validates_task_and_type(tasks, reminders, session_factory, clock):
    with pytest.raises(ValueError):
        reminders.add("missing", clock.now)

    task = tasks.add("Mine")
    with pytest.raises(ValueError):
        reminders.add(task.id, clock.now, reminder_type="pigeon")

    other = ReminderService("user-2", session_factory=session_factory, clock=clock)
    with pytest.raises(ValueError):
        other.add(task.id, clock.now)


def test_delete_only_own_reminders(tasks, reminders, session_factory, clock):
    task = tasks.add("Renew passport")
    reminder = reminders.add(task.id, clock.now)
    other = ReminderService("user-2", session_factory=session_factory, clock=clock)

    assert other.delete(reminder.id) is False
    assert reminders.delete(reminder.id) is True
    assert reminders.delete(reminder.id) is False


def test_failing_notifier_still_consumes_reminder(tasks, session_factory, clock):
    def broken(notice):
        raise RuntimeError("no display")

    service = ReminderService("user-1", session_factory=session_factory, clock=clock, notifier=broken)
    task = tasks.add("Pay invoice")
    service.add(task.id, clock.now)

    assert len(service.check()) == 1
    assert service.list() == []

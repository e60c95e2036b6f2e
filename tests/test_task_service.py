from datetime import date

import pytest
from sqlmodel import select

from helpers.datetime_utils import ensure_utc
from models.reminder import Reminder
from services.analytics import AnalyticsService
from services.task_parser import parse_utterance
from services.tasks import TaskService


@pytest.fixture()
def analytics(session_factory, clock):
    return AnalyticsService("user-1", session_factory=session_factory, clock=clock)


@pytest.fixture()
def service(session_factory, analytics, clock):
    return TaskService("user-1", session_factory=session_factory, analytics=analytics, clock=clock)


def _today_stat(analytics):
    stats = analytics.daily_stats(1)
    assert len(stats) == 1
    return stats[0]


def test_add_from_utterance_persists_parsed_fields(service, analytics):
    task = service.add_from_utterance("Call mom tomorrow at 3pm, urgent")

    stored = service.get(task.id)
    assert stored.user_id == "user-1"
    assert stored.title == "Call mom"
    assert stored.description == "Call mom tomorrow at 3pm, urgent"
    assert stored.due_date == date(2024, 5, 16)
    assert stored.due_time == "15:00"
    assert stored.priority == "high"
    assert "communication" in stored.tags
    assert stored.voice_created is True
    assert stored.voice_confidence == pytest.approx(0.85)
    assert stored.status == "pending"

    stat = _today_stat(analytics)
    assert stat.tasks_created == 1
    assert stat.voice_tasks_created == 1


def test_add_draft_falls_back_to_description_for_empty_title(service):
    task = service.add_draft(parse_utterance("urgent"))
    assert task.title == "urgent"
    assert task.priority == "high"


def test_manual_task_counts_as_typed(service, analytics):
    task = service.add("Write summary", priority=3, tags=[" Work ", "work", "notes"])
    assert task.priority == "high"
    assert task.tags == ["work", "notes"]
    assert task.voice_created is False

    stat = _today_stat(analytics)
    assert stat.tasks_created == 1
    assert stat.voice_tasks_created == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"title": "   "},
        {"title": "Ok", "due_time": "25:99"},
        {"title": "Ok", "due_date": "next tuesday"},
        {"title": "Ok", "priority": "whenever"},
        {"title": "Ok", "status": "archived"},
        {"title": "Ok", "estimated_duration": -5},
    ],
)
def test_add_rejects_invalid_input(service, kwargs):
    title = kwargs.pop("title")
    with pytest.raises(ValueError):
        service.add(title, **kwargs)


def test_update_whitelisted_fields(service, clock):
    task = service.add("Draft plan")
    clock.advance(minutes=5)
    updated = service.update(task.id, title=" Final plan ", due_date="2024-06-01", due_time="08:30")
    assert updated.title == "Final plan"
    assert updated.due_date == date(2024, 6, 1)
    assert updated.due_time == "08:30"
    assert ensure_utc(updated.updated_at) == clock.now

    with pytest.raises(ValueError):
        service.update(task.id, status="completed")
    assert service.update("missing", title="x") is None


def test_completion_updates_analytics_once(service, analytics, clock):
    task = service.add("Ship release")
    clock.advance(hours=1)

    done = service.set_status(task.id, "completed")
    assert done.status == "completed"
    assert ensure_utc(done.completed_at) == clock.now

    clock.advance(minutes=1)
    again = service.set_status(task.id, "completed")
    assert ensure_utc(again.completed_at) == ensure_utc(done.completed_at)
    assert _today_stat(analytics).tasks_completed == 1

    reopened = service.set_status(task.id, "in_progress")
    assert reopened.completed_at is None

    with pytest.raises(ValueError):
        service.set_status(task.id, "finished")


def test_toggle_completion_round_trip(service, analytics):
    task = service.add("Water plants")
    assert service.toggle_completion(task.id).status == "completed"
    pending = service.toggle_completion(task.id)
    assert pending.status == "pending"
    assert pending.completed_at is None
    assert service.toggle_completion("missing") is None
    assert _today_stat(analytics).tasks_completed == 1


def test_list_is_newest_first_and_filterable(service, clock):
    first = service.add("First")
    clock.advance(minutes=1)
    second = service.add("Second")
    clock.advance(minutes=1)
    third = service.add("Third")
    service.set_status(second.id, "completed")

    assert [t.id for t in service.list()] == [third.id, second.id, first.id]
    assert [t.id for t in service.list(status="completed")] == [second.id]
    assert [t.id for t in service.recent(2)] == [third.id, second.id]


def test_tasks_are_scoped_to_their_owner(service, session_factory, clock):
    task = service.add("Private")
    other = TaskService("user-2", session_factory=session_factory, clock=clock)

    assert other.get(task.id) is None
    assert other.list() == []
    assert other.delete(task.id) is False
    assert other.set_status(task.id, "completed") is None
    assert service.get(task.id) is not None


def test_delete_removes_reminders(service, session_factory, clock):
    task = service.add("Pay bill")
    with session_factory() as s:
        s.add(Reminder(task_id=task.id, user_id="user-1", remind_at=clock.now))
        s.commit()

    assert service.delete(task.id) is True
    assert service.get(task.id) is None
    with session_factory() as s:
        assert s.exec(select(Reminder)).all() == []


def test_listeners_are_notified_and_isolated(service):
    seen = []

    def broken(task_id):
        raise RuntimeError("boom")

    service.subscribe("after_create", seen.append)
    service.subscribe("after_create", broken)
    task = service.add("Notify me")
    assert seen == [task.id]

    service.unsubscribe("after_create", seen.append)
    service.add("Quiet")
    assert seen == [task.id]

    with pytest.raises(ValueError):
        service.subscribe("after_explode", seen.append)


def test_analytics_failures_do_not_break_task_creation(session_factory, clock):
    class BrokenAnalytics:
        def record(self, **counters):
            raise RuntimeError("store unavailable")

    service = TaskService("user-1", session_factory=session_factory, analytics=BrokenAnalytics(), clock=clock)
    task = service.add("Still saved")
    assert service.get(task.id) is not None
    assert service.set_status(task.id, "completed").status == "completed"

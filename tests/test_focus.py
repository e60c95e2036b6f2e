import pytest

from services.analytics import AnalyticsService
from services.focus import FocusService, planned_minutes


@pytest.fixture()
def analytics(session_factory, clock):
    return AnalyticsService("user-1", session_factory=session_factory, clock=clock)


@pytest.fixture()
def focus(session_factory, analytics, clock):
    return FocusService("user-1", session_factory=session_factory, analytics=analytics, clock=clock)


def test_planned_minutes():
    assert planned_minutes("pomodoro") == 25
    assert planned_minutes("deep_work") == 50
    assert planned_minutes("break") == 5
    assert planned_minutes("custom") is None
    with pytest.raises(ValueError):
        planned_minutes("nap")


def test_session_lifecycle(focus, analytics, clock):
    session = focus.start(task_id="task-1")
    assert session.is_running
    assert focus.current().id == session.id

    clock.advance(minutes=12, seconds=40)
    focus.add_interruption()
    ended = focus.end("Good progress")

    assert ended.duration_minutes == 13
    assert ended.interruptions == 1
    assert ended.notes == "Good progress"
    assert not ended.is_running
    assert focus.current() is None
    assert analytics.daily_stats()[0].focus_minutes == 13


def test_only_one_session_at_a_time(focus):
    focus.start()
    with pytest.raises(ValueError):
        focus.start(session_type="deep_work")


def test_end_without_session(focus):
    with pytest.raises(ValueError):
        focus.end()
    assert focus.add_interruption() is None


def test_tick_counts_down_and_ends_pomodoro(focus, analytics, clock):
    focus.start()
    clock.advance(minutes=24)
    assert focus.remaining_seconds() == 60
    assert focus.tick() is None

    clock.advance(minutes=1)
    finished = focus.tick()
    assert finished is not None
    assert finished.duration_minutes == 25
    assert focus.current() is None
    assert focus.tick() is None
    assert analytics.daily_stats()[0].focus_minutes == 25


def test_custom_session_is_untimed(focus, clock):
    focus.start(session_type="custom")
    clock.advance(hours=3)
    assert focus.remaining_seconds() is None
    assert focus.tick() is None
    assert focus.current() is not None


def test_list_newest_first(focus, clock):
    first = focus.start(session_type="break")
    clock.advance(minutes=5)
    focus.end()
    clock.advance(minutes=1)
    second = focus.start()

    assert [s.id for s in focus.list()] == [second.id, first.id]
    assert [s.id for s in focus.list(limit=1)] == [second.id]

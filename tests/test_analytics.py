from datetime import date

import pytest

from services.analytics import AnalyticsService
from services.insights import Metrics


@pytest.fixture()
def analytics(session_factory, clock):
    return AnalyticsService("user-1", session_factory=session_factory, clock=clock)


def test_record_accumulates_per_day(analytics):
    analytics.record(tasks_created=1, voice_tasks_created=1)
    analytics.record(tasks_created=2)
    row = analytics.record(focus_minutes=25)

    assert row.date == date(2024, 5, 15)
    assert row.tasks_created == 3
    assert row.voice_tasks_created == 1
    assert row.focus_minutes == 25
    assert len(analytics.daily_stats()) == 1


def test_days_roll_over_with_the_clock(analytics, clock):
    analytics.record(tasks_created=1)
    clock.advance(days=1)
    analytics.record(tasks_created=4, tasks_completed=2)

    stats = analytics.daily_stats()
    assert [row.date for row in stats] == [date(2024, 5, 15), date(2024, 5, 16)]
    assert [row.tasks_created for row in stats] == [1, 4]


def test_window_excludes_older_days(analytics):
    analytics.record(day=date(2024, 5, 1), tasks_created=9)
    analytics.record(day=date(2024, 5, 2), tasks_created=1)
    analytics.record(tasks_created=2)

    # 14 days ending 2024-05-15 start on 2024-05-02
    assert [row.date for row in analytics.daily_stats(14)] == [date(2024, 5, 2), date(2024, 5, 15)]
    assert [row.date for row in analytics.daily_stats(1)] == [date(2024, 5, 15)]


def test_daily_series_fills_gaps(analytics):
    analytics.record(day=date(2024, 5, 13), tasks_created=2)
    series = analytics.daily_series(3)
    assert [row.date for row in series] == [date(2024, 5, 13), date(2024, 5, 14), date(2024, 5, 15)]
    assert [row.tasks_created for row in series] == [2, 0, 0]


def test_users_do_not_share_counters(analytics, session_factory, clock):
    other = AnalyticsService("user-2", session_factory=session_factory, clock=clock)
    analytics.record(tasks_created=1)
    other.record(tasks_created=5)
    assert analytics.daily_stats()[0].tasks_created == 1
    assert other.daily_stats()[0].tasks_created == 5


@pytest.mark.parametrize("counters", [{"tasks_deleted": 1}, {"tasks_created": -1}])
def test_record_rejects_bad_counters(analytics, counters):
    with pytest.raises(ValueError):
        analytics.record(**counters)


def test_metrics_over_window(analytics):
    analytics.record(tasks_created=4, tasks_completed=1, voice_tasks_created=2)
    analytics.record(day=date(2024, 5, 14), tasks_created=4, tasks_completed=2)
    assert analytics.metrics() == Metrics(productivity_score=38, completion_rate=38, voice_usage_rate=25)

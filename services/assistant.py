# voicetasks/services/assistant.py
from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from core.settings import INSIGHTS
from helpers.datetime_utils import utc_now
from services.analytics import AnalyticsService
from services.insights import Metrics, Suggestion, compute_hints, compute_suggestions
from services.tasks import TaskService
from services.tips import Tip, tip_at


class AssistantService:
    """Dashboard-facing view over the insight functions.

    Reads snapshots from the task and analytics services and never writes.
    """

    def __init__(
        self,
        tasks: TaskService,
        analytics: AnalyticsService,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.tasks = tasks
        self.analytics = analytics
        self._clock = clock

    def metrics(self, days: int = INSIGHTS.stats_window_days) -> Metrics:
        return self.analytics.metrics(days)

    def suggestions(self) -> List[Suggestion]:
        recent = self.tasks.recent(INSIGHTS.recent_tasks_limit)
        return compute_suggestions(recent, now=self._clock())

    def hints(self) -> List[str]:
        return compute_hints(self.tasks.list(), self.metrics())

    def tip(self, now: Optional[datetime] = None) -> Tip:
        return tip_at(now or self._clock())


__all__ = ["AssistantService"]

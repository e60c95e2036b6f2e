"""Composition root: one user's services over one database."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.engine import Engine

from core.logs import get_logger
from helpers.datetime_utils import utc_now
from models.focus_session import FocusSession
from services.analytics import AnalyticsService
from services.assistant import AssistantService
from services.focus import FocusService
from services.reminders import Notifier, ReminderNotice, ReminderService
from services.tasks import TaskService
from storage.db import init_db, make_session_factory


@dataclass
class TickResult:
    notices: List[ReminderNotice] = field(default_factory=list)
    finished_session: Optional[FocusSession] = None


@dataclass
class Workspace:
    user_id: str
    tasks: TaskService
    reminders: ReminderService
    focus: FocusService
    analytics: AnalyticsService
    assistant: AssistantService
    clock: Callable[[], datetime] = utc_now

    def tick(self, now: Optional[datetime] = None) -> TickResult:
        """One polling step: fire due reminders and close an expired focus session."""
        moment = now or self.clock()
        return TickResult(
            notices=self.reminders.check(moment),
            finished_session=self.focus.tick(moment),
        )


def open_workspace(
    user_id: str,
    *,
    engine: Optional[Engine] = None,
    clock: Callable[[], datetime] = utc_now,
    notifier: Optional[Notifier] = None,
) -> Workspace:
    if not user_id:
        raise ValueError("A signed-in user is required")
    engine = init_db(engine)
    session_factory = make_session_factory(engine)

    analytics = AnalyticsService(user_id, session_factory=session_factory, clock=clock)
    tasks = TaskService(user_id, session_factory=session_factory, analytics=analytics, clock=clock)
    workspace = Workspace(
        user_id=user_id,
        tasks=tasks,
        reminders=ReminderService(
            user_id, session_factory=session_factory, clock=clock, notifier=notifier
        ),
        focus=FocusService(user_id, session_factory=session_factory, analytics=analytics, clock=clock),
        analytics=analytics,
        assistant=AssistantService(tasks, analytics, clock=clock),
        clock=clock,
    )
    get_logger("app").info("Workspace opened for %s", user_id)
    return workspace


__all__ = ["TickResult", "Workspace", "open_workspace"]

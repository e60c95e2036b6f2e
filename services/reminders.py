# voicetasks/services/reminders.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from sqlmodel import select

from core.logs import get_logger
from core.settings import REMINDERS
from helpers.datetime_utils import ensure_utc, utc_now
from models.reminder import REMINDER_TYPES, Reminder
from models.task import Task
from storage.db import get_session


@dataclass(frozen=True)
class ReminderNotice:
    reminder_id: str
    task_id: str
    title: str
    body: str
    remind_at: datetime
    reminder_type: str


Notifier = Callable[[ReminderNotice], None]


class ReminderService:
    """Reminders for one user's tasks.

    Nothing here runs on its own: the host calls :meth:`check` on its polling
    interval (``REMINDERS.poll_interval_sec``) and every due reminder is handed
    to ``notifier`` once, then removed.
    """

    def __init__(
        self,
        user_id: str,
        *,
        session_factory=get_session,
        clock: Callable[[], datetime] = utc_now,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self.user_id = user_id
        self._session_factory = session_factory
        self._clock = clock
        self.notifier = notifier
        self.logger = get_logger("reminders")

    def list(self) -> List[Reminder]:
        with self._session_factory() as s:
            stmt = (
                select(Reminder)
                .where(Reminder.user_id == self.user_id)
                .order_by(Reminder.remind_at.asc())
            )
            return list(s.exec(stmt))

    def add(
        self,
        task_id: str,
        remind_at: datetime,
        *,
        reminder_type: str = REMINDERS.default_type,
        message: Optional[str] = None,
    ) -> Reminder:
        if reminder_type not in REMINDER_TYPES:
            raise ValueError(f"Unsupported reminder type: {reminder_type!r}")
        if remind_at is None:
            raise ValueError("Reminder time is required")
        with self._session_factory() as s:
            task = s.get(Task, task_id)
            if task is None or task.user_id != self.user_id:
                raise ValueError(f"Unknown task: {task_id}")
            reminder = Reminder(
                task_id=task_id,
                user_id=self.user_id,
                remind_at=ensure_utc(remind_at),
                reminder_type=reminder_type,
                message=message or None,
                created_at=self._clock(),
            )
            s.add(reminder)
            s.commit()
            s.refresh(reminder)
        self.logger.info("Reminder %s set for task %s at %s", reminder.id, task_id, remind_at)
        return reminder

    def delete(self, reminder_id: str) -> bool:
        with self._session_factory() as s:
            reminder = s.get(Reminder, reminder_id)
            if reminder is None or reminder.user_id != self.user_id:
                return False
            s.delete(reminder)
            s.commit()
        return True

    def due(self, now: Optional[datetime] = None) -> List[Reminder]:
        moment = ensure_utc(now or self._clock())
        with self._session_factory() as s:
            stmt = (
                select(Reminder)
                .where(Reminder.user_id == self.user_id, Reminder.remind_at <= moment)
                .order_by(Reminder.remind_at.asc())
            )
            return list(s.exec(stmt))

    def check(self, now: Optional[datetime] = None) -> List[ReminderNotice]:
        """Fire every due reminder and return the notices that were produced.

        A reminder whose task no longer exists is dropped without a notice.
        """
        due = self.due(now)
        if not due:
            return []

        task_ids = {reminder.task_id for reminder in due}
        with self._session_factory() as s:
            stmt = select(Task).where(Task.id.in_(task_ids), Task.user_id == self.user_id)
            titles = {task.id: task.title for task in s.exec(stmt)}

        notices: List[ReminderNotice] = []
        for reminder in due:
            title = titles.get(reminder.task_id)
            if title is not None:
                notice = ReminderNotice(
                    reminder_id=reminder.id,
                    task_id=reminder.task_id,
                    title=f"Task {REMINDERS.title_prefix}",
                    body=reminder.message or f"{REMINDERS.title_prefix}: {title}",
                    remind_at=ensure_utc(reminder.remind_at),
                    reminder_type=reminder.reminder_type,
                )
                notices.append(notice)
                self._notify(notice)
            self.delete(reminder.id)

        self.logger.info("Fired %d reminder(s)", len(notices))
        return notices

    def _notify(self, notice: ReminderNotice) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier(notice)
        except Exception:
            self.logger.exception("Notifier failed for reminder %s", notice.reminder_id)


__all__ = ["Notifier", "ReminderNotice", "ReminderService"]

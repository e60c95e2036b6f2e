# voicetasks/services/tasks.py
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlmodel import select

from core.logs import get_logger
from core.priorities import normalize_priority
from core.settings import INSIGHTS
from helpers.datetime_utils import ensure_utc, parse_clock, parse_date_input, utc_now
from models.draft import TaskDraft
from models.reminder import Reminder
from models.task import TASK_STATUSES, Task
from services.task_parser import parse_utterance
from storage.db import get_session


EDITABLE_FIELDS = (
    "title",
    "description",
    "due_date",
    "due_time",
    "priority",
    "tags",
    "category",
    "location",
    "estimated_duration",
    "actual_duration",
    "notes",
)


def _clean_title(value: Optional[str]) -> str:
    title = (value or "").strip()
    if not title:
        raise ValueError("Task title cannot be empty")
    return title


def _clean_due_date(value: date | str | None) -> Optional[date]:
    if value is None or value == "":
        return None
    parsed = parse_date_input(value)
    if parsed is None:
        raise ValueError(f"Invalid due date: {value!r}")
    return parsed


def _clean_due_time(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    parsed = parse_clock(value)
    if parsed is None:
        raise ValueError(f"Due time must be HH:MM (24-hour), got {value!r}")
    return parsed.strftime("%H:%M")


def _clean_minutes(value: Optional[int], name: str) -> Optional[int]:
    if value is None:
        return None
    minutes = int(value)
    if minutes < 0:
        raise ValueError(f"{name} cannot be negative")
    return minutes


def _clean_tags(values: Optional[Iterable[str]]) -> List[str]:
    tags: List[str] = []
    for raw in values or ():
        tag = str(raw).strip().lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def _clean_status(value: str) -> str:
    if value not in TASK_STATUSES:
        raise ValueError(f"Unsupported status: {value!r}")
    return value


_CLEANERS: Dict[str, Callable[[Any], Any]] = {
    "title": _clean_title,
    "due_date": _clean_due_date,
    "due_time": _clean_due_time,
    "priority": normalize_priority,
    "tags": _clean_tags,
    "estimated_duration": lambda v: _clean_minutes(v, "Estimated duration"),
    "actual_duration": lambda v: _clean_minutes(v, "Actual duration"),
}


class TaskService:
    """Task storage for one user.

    Creating and completing tasks feeds the daily counters of the optional
    ``analytics`` service; failures there are logged and never surface to the
    caller.
    """

    EVENTS = ("after_create", "after_update", "after_delete")

    def __init__(
        self,
        user_id: str,
        *,
        session_factory=get_session,
        analytics=None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.user_id = user_id
        self._session_factory = session_factory
        self.analytics = analytics
        self._clock = clock
        self._listeners: Dict[str, set] = {event: set() for event in self.EVENTS}
        self.logger = get_logger("tasks")

    # ---------- events ----------
    def subscribe(self, event: str, callback) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unsupported event: {event}")
        self._listeners[event].add(callback)

    def unsubscribe(self, event: str, callback) -> None:
        if event not in self._listeners:
            return
        self._listeners[event].discard(callback)

    def _emit(self, event: str, task_id: str) -> None:
        for listener in list(self._listeners.get(event, ())):
            try:
                listener(task_id)
            except Exception:
                self.logger.exception("Listener for %s failed on task %s", event, task_id)

    def _bump(self, **counters: int) -> None:
        if self.analytics is None:
            return
        try:
            self.analytics.record(**counters)
        except Exception:
            self.logger.exception("Error updating analytics: %s", counters)

    def _owned(self, session, task_id: str) -> Optional[Task]:
        task = session.get(Task, task_id)
        if task is None or task.user_id != self.user_id:
            return None
        return task

    # ---------- queries ----------
    def get(self, task_id: str) -> Optional[Task]:
        with self._session_factory() as s:
            return self._owned(s, task_id)

    def list(
        self,
        *,
        status: Optional[str] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Task]:
        """Tasks of the user, newest first, optionally filtered by creation time."""
        with self._session_factory() as s:
            stmt = select(Task).where(Task.user_id == self.user_id)
            if status:
                stmt = stmt.where(Task.status == _clean_status(status))
            if since is not None:
                stmt = stmt.where(Task.created_at >= ensure_utc(since))
            if until is not None:
                stmt = stmt.where(Task.created_at <= ensure_utc(until))
            stmt = stmt.order_by(Task.created_at.desc())
            if limit:
                stmt = stmt.limit(limit)
            return list(s.exec(stmt))

    def recent(self, limit: int = INSIGHTS.recent_tasks_limit) -> List[Task]:
        return self.list(limit=limit)

    # ---------- commands ----------
    def add(
        self,
        title: str,
        *,
        description: Optional[str] = None,
        due_date: date | str | None = None,
        due_time: Optional[str] = None,
        priority: str | int | None = None,
        tags: Optional[Iterable[str]] = None,
        category: Optional[str] = None,
        location: Optional[str] = None,
        estimated_duration: Optional[int] = None,
        voice_created: bool = False,
        voice_confidence: Optional[float] = None,
        ai_suggested: bool = False,
        status: str = "pending",
        notes: Optional[str] = None,
    ) -> Task:
        now = self._clock()
        status = _clean_status(status)
        task = Task(
            user_id=self.user_id,
            title=_clean_title(title),
            description=description or None,
            due_date=_clean_due_date(due_date),
            due_time=_clean_due_time(due_time),
            priority=normalize_priority(priority),
            tags=_clean_tags(tags),
            status=status,
            category=category or None,
            location=location or None,
            estimated_duration=_clean_minutes(estimated_duration, "Estimated duration"),
            voice_created=bool(voice_created),
            voice_confidence=voice_confidence,
            ai_suggested=bool(ai_suggested),
            notes=notes or None,
            completed_at=now if status == "completed" else None,
            created_at=now,
            updated_at=now,
        )
        with self._session_factory() as s:
            s.add(task)
            s.commit()
            s.refresh(task)

        self.logger.info("Task created: %s (voice=%s)", task.id, task.voice_created)
        self._bump(tasks_created=1, voice_tasks_created=1 if task.voice_created else 0)
        self._emit("after_create", task.id)
        return task

    def add_draft(self, draft: TaskDraft) -> Task:
        fields = draft.to_task_fields()
        title = fields.pop("title") or draft.description.strip()
        return self.add(title, **fields)

    def add_from_utterance(self, utterance: str) -> Task:
        """Parse a dictated sentence and store the result."""
        draft = parse_utterance(utterance, now=self._clock())
        return self.add_draft(draft)

    def update(self, task_id: str, **fields: Any) -> Optional[Task]:
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
        cleaned = {
            name: _CLEANERS[name](value) if name in _CLEANERS else value
            for name, value in fields.items()
        }
        with self._session_factory() as s:
            task = self._owned(s, task_id)
            if task is None:
                return None
            for name, value in cleaned.items():
                setattr(task, name, value)
            task.updated_at = self._clock()
            s.add(task)
            s.commit()
            s.refresh(task)

        self.logger.debug("Task updated: %s %s", task_id, sorted(cleaned))
        self._emit("after_update", task.id)
        return task

    def set_status(self, task_id: str, status: str) -> Optional[Task]:
        status = _clean_status(status)
        with self._session_factory() as s:
            task = self._owned(s, task_id)
            if task is None:
                return None
            newly_completed = status == "completed" and task.status != "completed"
            now = self._clock()
            if status != "completed":
                task.completed_at = None
            elif newly_completed:
                task.completed_at = now
            task.status = status
            task.updated_at = now
            s.add(task)
            s.commit()
            s.refresh(task)

        self.logger.info("Task %s -> %s", task_id, status)
        if newly_completed:
            self._bump(tasks_completed=1)
        self._emit("after_update", task.id)
        return task

    def toggle_completion(self, task_id: str) -> Optional[Task]:
        task = self.get(task_id)
        if task is None:
            return None
        return self.set_status(task_id, "pending" if task.is_completed else "completed")

    def delete(self, task_id: str) -> bool:
        with self._session_factory() as s:
            task = self._owned(s, task_id)
            if task is None:
                return False
            self._emit("after_delete", task_id)
            # Reminders reference the task, drop them first
            stmt = select(Reminder).where(Reminder.task_id == task_id)
            for reminder in s.exec(stmt):
                s.delete(reminder)
            s.delete(task)
            s.commit()
        self.logger.info("Task deleted: %s", task_id)
        return True


__all__ = ["EDITABLE_FIELDS", "TaskService"]

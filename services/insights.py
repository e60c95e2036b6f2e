"""Productivity metrics and personalised suggestions.

Everything here is a pure function over snapshots of task and daily-stat
records. Records may be ORM objects or plain mappings (rows handed over by
another store); fields are read by name either way.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from core.settings import INSIGHTS
from helpers.datetime_utils import parse_date_input


@dataclass(frozen=True)
class Metrics:
    productivity_score: int = 0
    completion_rate: int = 0
    voice_usage_rate: int = 0


@dataclass(frozen=True)
class Suggestion:
    kind: str  # optimization / reminder / insight
    title: str
    description: str
    priority: str


def _field(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def _total(stats: Iterable[Any], name: str) -> int:
    return sum(int(_field(row, name, 0) or 0) for row in stats)


def _percent(part: int, whole: int) -> int:
    """Half-up rounded percentage clamped to [0, 100]; 0 for an empty whole."""
    if whole <= 0:
        return 0
    value = math.floor(100 * part / whole + 0.5)
    return max(0, min(100, value))


# ---------- metrics ----------
def completion_rate(daily_stats: Sequence[Any]) -> int:
    return _percent(_total(daily_stats, "tasks_completed"), _total(daily_stats, "tasks_created"))


def productivity_score(daily_stats: Sequence[Any]) -> int:
    # Currently the completion ratio capped at 100.
    score = _percent(_total(daily_stats, "tasks_completed"), _total(daily_stats, "tasks_created"))
    return min(100, score)


def voice_usage_rate(daily_stats: Sequence[Any]) -> int:
    return _percent(_total(daily_stats, "voice_tasks_created"), _total(daily_stats, "tasks_created"))


def compute_metrics(daily_stats: Sequence[Any]) -> Metrics:
    stats = list(daily_stats)
    return Metrics(
        productivity_score=productivity_score(stats),
        completion_rate=completion_rate(stats),
        voice_usage_rate=voice_usage_rate(stats),
    )


# ---------- suggestions ----------
def is_completed(task: Any) -> bool:
    return _field(task, "status") == "completed"


def is_overdue(task: Any, now: datetime) -> bool:
    """Open task whose due date (taken at midnight) lies before ``now``."""
    if is_completed(task):
        return False
    due: Optional[date] = parse_date_input(_field(task, "due_date"))
    if due is None:
        return False
    return datetime.combine(due, time.min, tzinfo=now.tzinfo) < now


def compute_suggestions(tasks: Sequence[Any], *, now: Optional[datetime] = None) -> List[Suggestion]:
    items = list(tasks)
    if not items:
        return []
    now = now or datetime.now()

    suggestions: List[Suggestion] = []
    open_tasks = [task for task in items if not is_completed(task)]

    if len(open_tasks) > INSIGHTS.open_tasks_threshold:
        suggestions.append(
            Suggestion(
                kind="optimization",
                title="Too many open tasks",
                description=(
                    "You have many incomplete tasks. Consider focusing on completing "
                    "existing ones before adding new tasks."
                ),
                priority="high",
            )
        )

    overdue = sum(1 for task in open_tasks if is_overdue(task, now))
    if overdue > 0:
        suggestions.append(
            Suggestion(
                kind="reminder",
                title="Overdue tasks need attention",
                description=f"You have {overdue} overdue tasks. Consider rescheduling or completing them.",
                priority="high",
            )
        )

    completed = len(items) - len(open_tasks)
    if completed / len(items) < INSIGHTS.low_completion_ratio:
        suggestions.append(
            Suggestion(
                kind="insight",
                title="Low completion rate",
                description=(
                    "Your task completion rate is below 50%. Try breaking large tasks "
                    "into smaller, manageable pieces."
                ),
                priority="medium",
            )
        )

    return suggestions


def compute_hints(tasks: Sequence[Any], metrics: Metrics) -> List[str]:
    """Short contextual nudges shown next to the rotating tips."""
    limits = INSIGHTS.hints
    open_tasks = [task for task in tasks if not is_completed(task)]
    hints: List[str] = []

    undated = [task for task in open_tasks if not _field(task, "due_date")]
    if len(undated) > limits.undated_open_tasks:
        hints.append(
            "You have several tasks without due dates. Adding deadlines can help you prioritize better."
        )

    if metrics.voice_usage_rate < limits.min_voice_usage_rate:
        hints.append("Try using voice input for quick task creation. It's faster than typing!")

    if metrics.productivity_score < limits.min_productivity_score:
        hints.append(
            "Your task completion rate is below average. Try focusing on completing "
            "existing tasks before adding new ones."
        )

    urgent = [task for task in open_tasks if _field(task, "priority") == "high"]
    if len(urgent) > limits.high_priority_open_tasks:
        hints.append(
            "You have several high-priority tasks. Consider focusing on these before "
            "working on lower priority items."
        )

    return hints


__all__ = [
    "Metrics",
    "Suggestion",
    "completion_rate",
    "compute_hints",
    "compute_metrics",
    "compute_suggestions",
    "is_completed",
    "is_overdue",
    "productivity_score",
    "voice_usage_rate",
]

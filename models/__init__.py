"""ORM models and value objects exposed by the VoiceTasks application."""
from .daily_stat import DailyStat
from .draft import TaskDraft
from .focus_session import FocusSession
from .reminder import Reminder
from .task import Task

__all__ = ["DailyStat", "FocusSession", "Reminder", "Task", "TaskDraft"]

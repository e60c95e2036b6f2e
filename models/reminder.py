# voicetasks/models/reminder.py
from __future__ import annotations

from datetime import datetime
from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from helpers.datetime_utils import utc_now


REMINDER_TYPES = ("notification", "email", "sms")


class Reminder(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    task_id: str = Field(index=True, foreign_key="task.id")
    user_id: str = Field(index=True)
    remind_at: datetime = Field(index=True)
    reminder_type: str = Field(default="notification")
    message: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)


__all__ = ["Reminder", "REMINDER_TYPES"]

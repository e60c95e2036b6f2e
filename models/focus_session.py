# voicetasks/models/focus_session.py
from __future__ import annotations

from datetime import datetime
from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from helpers.datetime_utils import utc_now


SESSION_TYPES = ("pomodoro", "deep_work", "break", "custom")


class FocusSession(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(index=True)
    task_id: Optional[str] = Field(default=None, index=True)
    start_time: datetime = Field(default_factory=utc_now, index=True)
    end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    session_type: str = Field(default="pomodoro")
    interruptions: int = Field(default=0)
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def is_running(self) -> bool:
        return self.end_time is None


__all__ = ["FocusSession", "SESSION_TYPES"]

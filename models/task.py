# voicetasks/models/task.py
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional
import uuid

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from helpers.datetime_utils import utc_now


TASK_STATUSES = ("pending", "in_progress", "completed")


class Task(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(index=True)
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = Field(default=None, index=True)
    due_time: Optional[str] = None          # HH:MM, 24-hour
    priority: str = "medium"                # low / medium / high
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    status: str = Field(default="pending", index=True)
    category: Optional[str] = None
    location: Optional[str] = None
    estimated_duration: Optional[int] = None
    actual_duration: Optional[int] = None
    voice_created: bool = False
    voice_confidence: Optional[float] = None
    ai_suggested: bool = False
    notes: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"


__all__ = ["Task", "TASK_STATUSES"]

# voicetasks/models/daily_stat.py
from __future__ import annotations

import datetime as dt
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from helpers.datetime_utils import utc_now


COUNTER_FIELDS = ("tasks_created", "tasks_completed", "voice_tasks_created", "focus_minutes")


class DailyStat(SQLModel, table=True):
    """Per-user, per-day activity counters. Writes accumulate."""

    __table_args__ = (UniqueConstraint("user_id", "date", name="ux_dailystat_user_date"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    date: dt.date = Field(index=True)
    tasks_created: int = Field(default=0)
    tasks_completed: int = Field(default=0)
    voice_tasks_created: int = Field(default=0)
    focus_minutes: int = Field(default=0)
    created_at: dt.datetime = Field(default_factory=utc_now)
    updated_at: dt.datetime = Field(default_factory=utc_now)


__all__ = ["DailyStat", "COUNTER_FIELDS"]

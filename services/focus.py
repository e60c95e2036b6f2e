# voicetasks/services/focus.py
from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from sqlmodel import select

from core.logs import get_logger
from core.settings import FOCUS
from helpers.datetime_utils import ensure_utc, utc_now
from models.focus_session import SESSION_TYPES, FocusSession
from storage.db import get_session


PLANNED_MINUTES = {
    "pomodoro": FOCUS.pomodoro_minutes,
    "deep_work": FOCUS.deep_work_minutes,
    "break": FOCUS.break_minutes,
    "custom": None,
}


def planned_minutes(session_type: str) -> Optional[int]:
    if session_type not in SESSION_TYPES:
        raise ValueError(f"Unsupported session type: {session_type!r}")
    return PLANNED_MINUTES[session_type]


def _elapsed_seconds(session: FocusSession, now: datetime) -> int:
    start = ensure_utc(session.start_time)
    return max(0, int((ensure_utc(now) - start).total_seconds()))


class FocusService:
    """Focus timer sessions; at most one runs at a time per user.

    The countdown itself is driven from outside: the host calls :meth:`tick`
    and a session whose planned length has elapsed is closed.
    """

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
        self.logger = get_logger("focus")

    def list(self, limit: Optional[int] = None) -> List[FocusSession]:
        with self._session_factory() as s:
            stmt = (
                select(FocusSession)
                .where(FocusSession.user_id == self.user_id)
                .order_by(FocusSession.start_time.desc())
            )
            if limit:
                stmt = stmt.limit(limit)
            return list(s.exec(stmt))

    def current(self) -> Optional[FocusSession]:
        with self._session_factory() as s:
            stmt = (
                select(FocusSession)
                .where(FocusSession.user_id == self.user_id, FocusSession.end_time == None)  # noqa: E711
                .order_by(FocusSession.start_time.desc())
            )
            return s.exec(stmt).first()

    def start(
        self,
        task_id: Optional[str] = None,
        session_type: str = FOCUS.default_session_type,
    ) -> FocusSession:
        planned_minutes(session_type)
        if self.current() is not None:
            raise ValueError("A focus session is already running")
        now = self._clock()
        session = FocusSession(
            user_id=self.user_id,
            task_id=task_id or None,
            start_time=now,
            session_type=session_type,
            interruptions=0,
            created_at=now,
        )
        with self._session_factory() as s:
            s.add(session)
            s.commit()
            s.refresh(session)
        self.logger.info("Focus session %s started (%s)", session.id, session_type)
        return session

    def end(self, notes: Optional[str] = None, *, now: Optional[datetime] = None) -> FocusSession:
        moment = now or self._clock()
        with self._session_factory() as s:
            stmt = select(FocusSession).where(
                FocusSession.user_id == self.user_id,
                FocusSession.end_time == None,  # noqa: E711
            )
            session = s.exec(stmt).first()
            if session is None:
                raise ValueError("No active focus session")
            duration = int((_elapsed_seconds(session, moment) + 30) // 60)
            session.end_time = moment
            session.duration_minutes = duration
            session.notes = notes or None
            s.add(session)
            s.commit()
            s.refresh(session)

        self.logger.info("Focus session %s completed: %d min", session.id, duration)
        if self.analytics is not None:
            try:
                self.analytics.record(focus_minutes=duration)
            except Exception:
                self.logger.exception("Error updating analytics for session %s", session.id)
        return session

    def add_interruption(self) -> Optional[FocusSession]:
        with self._session_factory() as s:
            stmt = select(FocusSession).where(
                FocusSession.user_id == self.user_id,
                FocusSession.end_time == None,  # noqa: E711
            )
            session = s.exec(stmt).first()
            if session is None:
                return None
            session.interruptions = (session.interruptions or 0) + 1
            s.add(session)
            s.commit()
            s.refresh(session)
            return session

    def remaining_seconds(self, now: Optional[datetime] = None) -> Optional[int]:
        """Seconds left on the running session; ``None`` when nothing is timed."""
        session = self.current()
        if session is None:
            return None
        planned = PLANNED_MINUTES.get(session.session_type)
        if planned is None:
            return None
        elapsed = _elapsed_seconds(session, now or self._clock())
        return max(0, planned * 60 - elapsed)

    def tick(self, now: Optional[datetime] = None) -> Optional[FocusSession]:
        moment = now or self._clock()
        if self.remaining_seconds(moment) != 0:
            return None
        return self.end(now=moment)


__all__ = ["FocusService", "PLANNED_MINUTES", "planned_minutes"]

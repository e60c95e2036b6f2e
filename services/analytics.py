# voicetasks/services/analytics.py
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, List, Optional

from sqlmodel import select

from core.logs import get_logger
from core.settings import INSIGHTS
from helpers.datetime_utils import utc_now
from models.daily_stat import COUNTER_FIELDS, DailyStat
from services.insights import Metrics, compute_metrics
from storage.db import get_session


class AnalyticsService:
    """Daily activity counters for one user.

    ``record`` is an accumulating upsert keyed by ``(user_id, date)``: repeated
    calls for the same day add to the stored counters.
    """

    def __init__(
        self,
        user_id: str,
        *,
        session_factory=get_session,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.user_id = user_id
        self._session_factory = session_factory
        self._clock = clock
        self.logger = get_logger("analytics")

    def today(self) -> date:
        return self._clock().date()

    def record(self, *, day: Optional[date] = None, **counters: int) -> DailyStat:
        unknown = set(counters) - set(COUNTER_FIELDS)
        if unknown:
            raise ValueError(f"Unsupported counters: {', '.join(sorted(unknown))}")
        for name, value in counters.items():
            if int(value) < 0:
                raise ValueError(f"Counter {name} cannot decrease")

        target = day or self.today()
        with self._session_factory() as s:
            stmt = select(DailyStat).where(
                DailyStat.user_id == self.user_id,
                DailyStat.date == target,
            )
            row = s.exec(stmt).first()
            if row is None:
                row = DailyStat(user_id=self.user_id, date=target)
            for name, value in counters.items():
                setattr(row, name, (getattr(row, name) or 0) + int(value))
            row.updated_at = self._clock()
            s.add(row)
            s.commit()
            s.refresh(row)
        self.logger.debug("Daily stats %s for %s: %s", target, self.user_id, counters)
        return row

    def daily_stats(self, days: int = INSIGHTS.stats_window_days) -> List[DailyStat]:
        """Stored rows for the last ``days`` days (today included), oldest first."""
        end = self.today()
        start = end - timedelta(days=max(days, 1) - 1)
        with self._session_factory() as s:
            stmt = (
                select(DailyStat)
                .where(
                    DailyStat.user_id == self.user_id,
                    DailyStat.date >= start,
                    DailyStat.date <= end,
                )
                .order_by(DailyStat.date.asc())
            )
            return list(s.exec(stmt))

    def daily_series(self, days: int = INSIGHTS.stats_window_days) -> List[DailyStat]:
        """One entry per day of the window; days without activity are zero rows."""
        span = max(days, 1)
        stored = {row.date: row for row in self.daily_stats(span)}
        start = self.today() - timedelta(days=span - 1)
        series: List[DailyStat] = []
        for offset in range(span):
            day = start + timedelta(days=offset)
            series.append(stored.get(day) or DailyStat(user_id=self.user_id, date=day))
        return series

    def metrics(self, days: int = INSIGHTS.stats_window_days) -> Metrics:
        return compute_metrics(self.daily_stats(days))


__all__ = ["AnalyticsService"]

"""Shared utilities for parsing and normalizing date/time values."""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional


UTC = timezone.utc

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _parse_int(value: str | None) -> Optional[int]:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def parse_date_input(value: date | str | None) -> Optional[date]:
    """Accept a ``date``/``datetime`` or an ISO ``YYYY-MM-DD`` string."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.strptime(text[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_clock(value: str | None) -> Optional[time]:
    """Parse a strict 24-hour ``HH:MM`` string."""

    if not value:
        return None
    text = value.strip()
    if len(text) != 5 or text[2] != ":":
        return None
    hours = _parse_int(text[:2])
    minutes = _parse_int(text[3:])
    if hours is None or minutes is None:
        return None
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    return time(hours, minutes)


def format_clock(hour: int, minute: int) -> Optional[str]:
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return f"{hour:02d}:{minute:02d}"


def to_24_hour(hour: int, meridiem: Optional[str], *, afternoon_before: int) -> int:
    """Convert a spoken clock hour to 24-hour form.

    Without an am/pm marker, hours below ``afternoon_before`` are assumed to be
    in the afternoon ("at 2:30" means 14:30).
    """

    marker = (meridiem or "").lower()
    if marker == "pm" and hour < 12:
        return hour + 12
    if marker == "am" and hour == 12:
        return 0
    if not marker and hour < afternoon_before:
        return hour + 12
    return hour


def next_weekday(day: date, weekday: int) -> date:
    """Next ``weekday`` (Monday=0) strictly after ``day``."""

    days_ahead = (weekday - day.weekday()) % 7
    if days_ahead == 0:
        days_ahead = 7
    return day + timedelta(days=days_ahead)


def numeric_date(month: str, day: str, year: str) -> Optional[date]:
    """Build a date from month-first numeric parts; two-digit years are 20YY."""

    m, d, y = _parse_int(month), _parse_int(day), _parse_int(year)
    if m is None or d is None or y is None:
        return None
    if len(year) == 2:
        y += 2000
    try:
        return date(y, m, d)
    except ValueError:
        return None


__all__ = [
    "UTC",
    "WEEKDAYS",
    "ensure_utc",
    "format_clock",
    "next_weekday",
    "numeric_date",
    "parse_clock",
    "parse_date_input",
    "to_24_hour",
    "utc_now",
]

"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import logging
import os
import sys


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return an OS-specific user data directory for ``app_name``."""

    platform_id = (platform or sys.platform).lower()
    environ = dict(env or os.environ)
    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-")

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = Path(environ.get("APPDATA") or home_dir / "Library" / "Application Support")
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return (base.expanduser() / sanitized)


APP_NAME = "VoiceTasks"


DATA_DIR = get_default_data_dir(APP_NAME)
LOG_DIR = DATA_DIR / "logs"

for _dir in (DATA_DIR, LOG_DIR):
    _dir.mkdir(parents=True, exist_ok=True)


DB_PATH = DATA_DIR / "app.db"


@dataclass(frozen=True)
class ParserSettings:
    title_max_length: int = 100
    voice_confidence: float = 0.85
    # Bare "H:MM" times below this hour are read as afternoon.
    afternoon_before_hour: int = 8


PARSER = ParserSettings()


@dataclass(frozen=True)
class HintThresholds:
    undated_open_tasks: int = 3
    min_voice_usage_rate: int = 20
    min_productivity_score: int = 50
    high_priority_open_tasks: int = 5


@dataclass(frozen=True)
class InsightSettings:
    open_tasks_threshold: int = 10
    low_completion_ratio: float = 0.5
    recent_tasks_limit: int = 50
    stats_window_days: int = 14
    hints: HintThresholds = HintThresholds()


INSIGHTS = InsightSettings()


@dataclass(frozen=True)
class ReminderSettings:
    poll_interval_sec: int = 60
    default_type: str = "notification"
    title_prefix: str = "Reminder"


REMINDERS = ReminderSettings()


@dataclass(frozen=True)
class FocusSettings:
    pomodoro_minutes: int = 25
    deep_work_minutes: int = 50
    break_minutes: int = 5
    default_session_type: str = "pomodoro"


FOCUS = FocusSettings()


@dataclass(frozen=True)
class TipSettings:
    rotation_interval_sec: int = 15


TIPS = TipSettings()


@dataclass(frozen=True)
class LoggingSettings:
    directory: Path = LOG_DIR
    filename: str = "voicetasks.log"
    max_bytes: int = 1_000_000
    backup_count: int = 3
    level: int = logging.INFO


LOGGING = LoggingSettings()


__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "LOG_DIR",
    "DB_PATH",
    "PARSER",
    "INSIGHTS",
    "REMINDERS",
    "FOCUS",
    "TIPS",
    "LOGGING",
    "get_default_data_dir",
]

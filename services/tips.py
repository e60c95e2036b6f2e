# voicetasks/services/tips.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from core.settings import TIPS
from helpers.datetime_utils import utc_now


@dataclass(frozen=True)
class Tip:
    title: str
    description: str


CATALOG: Tuple[Tip, ...] = (
    Tip(
        "Break down large tasks",
        "Try breaking complex tasks into smaller, more manageable sub-tasks for better focus.",
    ),
    Tip(
        "Set deadlines for all tasks",
        "Adding due dates helps prioritize your work and improves completion rates.",
    ),
    Tip(
        "Use voice input for quick capture",
        "Try the voice input feature to quickly add tasks when you're on the go.",
    ),
    Tip(
        "Review completed tasks",
        "Looking at what you've accomplished can boost motivation and productivity.",
    ),
    Tip(
        "Set priorities for important tasks",
        "Mark high-priority tasks to ensure you focus on what matters most.",
    ),
    Tip(
        "Use tags for organization",
        "Adding tags to your tasks makes them easier to find and organize.",
    ),
)


def tip_at(now: Optional[datetime] = None, *, interval_sec: int = TIPS.rotation_interval_sec) -> Tip:
    """Tip shown at ``now``; the catalog advances one entry per interval."""
    moment = now or utc_now()
    slot = int(moment.timestamp() // max(interval_sec, 1))
    return CATALOG[slot % len(CATALOG)]


__all__ = ["CATALOG", "Tip", "tip_at"]

"""Utility helpers for task priorities."""
from __future__ import annotations

from typing import Dict, Tuple

# Ordered from least to most urgent; the rank is the index in this tuple.
PRIORITY_LEVELS: Tuple[str, ...] = ("low", "medium", "high")

PRIORITY_META: Dict[str, Dict[str, str]] = {
    "low": {"label": "Low priority", "short": "Low"},
    "medium": {"label": "Medium priority", "short": "Medium"},
    "high": {"label": "High priority", "short": "High"},
}

DEFAULT_PRIORITY = "medium"


def normalize_priority(value: str | int | None) -> str:
    """Map external values onto ``low``/``medium``/``high``.

    Strings are matched case-insensitively; integers 1..3 are accepted as
    ranks. Anything else raises ``ValueError``; ``None`` gives the default.
    """
    if value is None:
        return DEFAULT_PRIORITY
    if isinstance(value, bool):
        raise ValueError(f"Unsupported priority: {value!r}")
    if isinstance(value, int):
        if 1 <= value <= len(PRIORITY_LEVELS):
            return PRIORITY_LEVELS[value - 1]
        raise ValueError(f"Unsupported priority: {value!r}")
    cleaned = str(value).strip().lower()
    if cleaned in PRIORITY_META:
        return cleaned
    raise ValueError(f"Unsupported priority: {value!r}")


def priority_rank(value: str | None) -> int:
    try:
        return PRIORITY_LEVELS.index(value or DEFAULT_PRIORITY)
    except ValueError:
        return PRIORITY_LEVELS.index(DEFAULT_PRIORITY)


def priority_label(value: str, *, short: bool = False) -> str:
    meta = PRIORITY_META.get(value, PRIORITY_META[DEFAULT_PRIORITY])
    return meta["short" if short else "label"]


__all__ = [
    "DEFAULT_PRIORITY",
    "PRIORITY_LEVELS",
    "normalize_priority",
    "priority_label",
    "priority_rank",
]

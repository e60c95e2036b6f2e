"""Structured result of parsing a free-text task utterance."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional, Tuple

from core.settings import PARSER


@dataclass(frozen=True)
class TaskDraft:
    """A task that has been understood but not yet persisted.

    ``description`` keeps the utterance verbatim. The provenance flags mark
    every draft as voice/assistant derived.
    """

    title: str
    description: str
    due_date: Optional[date] = None
    due_time: Optional[str] = None
    priority: str = "medium"
    tags: Tuple[str, ...] = ("general",)
    category: str = "General"
    location: Optional[str] = None
    estimated_duration: Optional[int] = None
    due_phrase: Optional[str] = None
    voice_created: bool = True
    voice_confidence: float = PARSER.voice_confidence
    ai_suggested: bool = True
    status: str = "pending"

    @property
    def provenance(self) -> Dict[str, Any]:
        return {
            "voice_created": self.voice_created,
            "confidence_score": self.voice_confidence,
            "ai_suggested": self.ai_suggested,
        }

    def to_task_fields(self) -> Dict[str, Any]:
        """Keyword arguments accepted by ``TaskService.add``."""
        return {
            "title": self.title,
            "description": self.description,
            "due_date": self.due_date,
            "due_time": self.due_time,
            "priority": self.priority,
            "tags": list(self.tags),
            "category": self.category,
            "location": self.location,
            "estimated_duration": self.estimated_duration,
            "voice_created": self.voice_created,
            "voice_confidence": self.voice_confidence,
            "ai_suggested": self.ai_suggested,
            "status": self.status,
        }


__all__ = ["TaskDraft"]

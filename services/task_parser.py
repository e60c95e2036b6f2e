"""Rule-based extraction of task fields from a free-text utterance.

Every field is driven by an ordered table of :class:`Rule` objects. Within a
table the first rule that yields a value wins; the tables themselves are
evaluated independently, so a duration match never hides a date match. Tags
are the exception: every tag rule that matches contributes its tag.

The parser is total. Anything it does not recognise is left at its default
(medium priority, ``general`` tag, no date/time/location/duration).
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from core.settings import PARSER
from helpers.datetime_utils import WEEKDAYS, format_clock, next_weekday, numeric_date, to_24_hour
from models.draft import TaskDraft


DEFAULT_TAG = "general"
DEFAULT_CATEGORY = "General"

_I = re.IGNORECASE


@dataclass(frozen=True)
class Hit:
    rule: str
    value: Any
    phrase: str
    span: Tuple[int, int]


@dataclass(frozen=True)
class Rule:
    name: str
    pattern: re.Pattern
    extract: Callable[[re.Match, date], Any]

    def apply(self, text: str, today: date) -> Optional[Hit]:
        """First match of ``pattern`` whose extractor yields a value."""
        for match in self.pattern.finditer(text):
            value = self.extract(match, today)
            if value is not None:
                return Hit(self.name, value, match.group(0), match.span())
        return None


def first_hit(rules: Iterable[Rule], text: str, today: date) -> Optional[Hit]:
    for rule in rules:
        hit = rule.apply(text, today)
        if hit is not None:
            return hit
    return None


# ---------- due date ----------
_RELATIVE_DAY = r"tomorrow|today|next\s+week|this\s+week"
_WEEKDAY = "|".join(WEEKDAYS)


def _resolve_day(phrase: str, today: date) -> Optional[date]:
    key = " ".join(phrase.lower().split())
    if key == "today":
        return today
    if key == "tomorrow":
        return today + timedelta(days=1)
    if key in ("next week", "this week"):
        return today + timedelta(days=7)
    if key in WEEKDAYS:
        return next_weekday(today, WEEKDAYS.index(key))
    return None


def _relative_date(match: re.Match, today: date) -> Optional[date]:
    return _resolve_day(match.group("day"), today)


def _numeric_date(match: re.Match, today: date) -> Optional[date]:
    return numeric_date(match.group("month"), match.group("day"), match.group("year"))


DATE_RULES: Tuple[Rule, ...] = (
    Rule(
        "due_keyword",
        re.compile(rf"\b(?:by|due|on)\s+(?P<day>{_RELATIVE_DAY}|{_WEEKDAY})\b", _I),
        _relative_date,
    ),
    Rule("relative_day", re.compile(rf"\b(?P<day>{_RELATIVE_DAY})\b", _I), _relative_date),
    Rule(
        "slash_date",
        re.compile(r"\b(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<year>\d{4}|\d{2})\b"),
        _numeric_date,
    ),
    Rule(
        "dash_date",
        re.compile(r"\b(?P<month>\d{1,2})-(?P<day>\d{1,2})-(?P<year>\d{4}|\d{2})\b"),
        _numeric_date,
    ),
)


# ---------- due time ----------
def _clock_time(match: re.Match, today: date) -> Optional[str]:
    groups = match.groupdict()
    hour = int(groups["hour"])
    minute = int(groups.get("minute") or 0)
    hour = to_24_hour(hour, groups.get("meridiem"), afternoon_before=PARSER.afternoon_before_hour)
    return format_clock(hour, minute)


TIME_RULES: Tuple[Rule, ...] = (
    Rule(
        "at_clock_meridiem",
        re.compile(r"\bat\s+(?P<hour>\d{1,2}):(?P<minute>\d{2})\s?(?P<meridiem>am|pm)\b", _I),
        _clock_time,
    ),
    Rule(
        "at_hour_meridiem",
        re.compile(r"\bat\s+(?P<hour>\d{1,2})\s?(?P<meridiem>am|pm)\b", _I),
        _clock_time,
    ),
    Rule(
        "clock_meridiem",
        re.compile(r"\b(?P<hour>\d{1,2}):(?P<minute>\d{2})\s?(?P<meridiem>am|pm)\b", _I),
        _clock_time,
    ),
    Rule("hour_meridiem", re.compile(r"\b(?P<hour>\d{1,2})\s*(?P<meridiem>am|pm)\b", _I), _clock_time),
    Rule("clock", re.compile(r"\b(?P<hour>\d{1,2}):(?P<minute>\d{2})\b"), _clock_time),
)


# ---------- priority ----------
HIGH_PRIORITY_PATTERN = re.compile(
    r"\b(?:urgent(?:ly)?|asap|immediate(?:ly)?|critical|important|high\s+priority|emergency)\b",
    _I,
)
LOW_PRIORITY_PATTERN = re.compile(
    r"\b(?:sometime|when\s+you\s+can|low\s+priority|later|eventually|no\s+rush)\b",
    _I,
)

PRIORITY_RULES: Tuple[Rule, ...] = (
    Rule("high_keywords", HIGH_PRIORITY_PATTERN, lambda match, today: "high"),
    Rule("low_keywords", LOW_PRIORITY_PATTERN, lambda match, today: "low"),
)


# ---------- location ----------
_PLACE = r"(?:the\s+)?(?P<place>[^,\s]+(?:\s+[^,\s]+)*?)(?=\s|,|$)"
_TIME_LIKE = re.compile(r"^\d{1,2}(?::\d{2})?\s?(?:am|pm)?$", _I)


def _place(match: re.Match, today: date) -> Optional[str]:
    candidate = match.group("place").strip().rstrip(".!?;:")
    if not candidate or candidate.isdigit() or _TIME_LIKE.match(candidate):
        return None
    return candidate


LOCATION_RULES: Tuple[Rule, ...] = (
    Rule("at_place", re.compile(rf"\bat\s+{_PLACE}", _I), _place),
    Rule("in_place", re.compile(rf"\bin\s+{_PLACE}", _I), _place),
)


# ---------- estimated duration ----------
def _minutes(factor: int) -> Callable[[re.Match, date], int]:
    def extract(match: re.Match, today: date) -> int:
        return int(match.group("value")) * factor

    return extract


DURATION_RULES: Tuple[Rule, ...] = (
    Rule("hours", re.compile(r"\b(?P<value>\d+)\s?hours?\b", _I), _minutes(60)),
    Rule("minutes", re.compile(r"\b(?P<value>\d+)\s?minutes?\b", _I), _minutes(1)),
    Rule("mins", re.compile(r"\b(?P<value>\d+)\s?mins?\b", _I), _minutes(1)),
    Rule("hours_short", re.compile(r"\b(?P<value>\d+)h\b", _I), _minutes(60)),
    Rule("minutes_short", re.compile(r"\b(?P<value>\d+)m\b", _I), _minutes(1)),
)
_DURATION_LEAD_IN = re.compile(r"\bfor\s+$", _I)


# ---------- tags & category ----------
def _tag_rule(tag: str, keywords: Sequence[str]) -> Rule:
    words = "|".join(keywords)
    pattern = re.compile(rf"\b(?:{words})(?:s|es|ed|ing)?\b", _I)
    return Rule(tag, pattern, lambda match, today: tag)


TAG_RULES: Tuple[Rule, ...] = (
    _tag_rule("work", ("work", "job", "office", "project", "deadline", "report", "client", "meeting")),
    _tag_rule("home", ("home", "house", "apartment", "family", "personal", "chore", "laundry")),
    _tag_rule("study", ("study", "school", "class", "learn", "course", "homework", "assignment", "exam")),
    _tag_rule("meeting", ("meeting", "conference", "zoom", "teams", "standup")),
    _tag_rule("communication", ("call", "email", "mail", "message", "reply", "respond", "text", "phone")),
    _tag_rule("shopping", ("buy", "purchase", "order", "shop", "shopping", "store", "market", "groceries")),
    _tag_rule("health", ("health", "doctor", "dentist", "appointment", "exercise", "gym", "workout")),
    _tag_rule("travel", ("travel", "trip", "vacation", "flight", "hotel")),
    _tag_rule("finance", ("finance", "money", "bank", "pay", "bill", "budget", "invoice")),
)

CATEGORY_PRECEDENCE: Tuple[Tuple[str, str], ...] = (
    ("work", "Work"),
    ("home", "Personal"),
    ("study", "Education"),
    ("health", "Health"),
    ("shopping", "Shopping"),
)


def extract_tags(text: str) -> Tuple[str, ...]:
    tags = tuple(rule.name for rule in TAG_RULES if rule.pattern.search(text))
    return tags or (DEFAULT_TAG,)


def derive_category(tags: Iterable[str]) -> str:
    present = set(tags)
    for tag, category in CATEGORY_PRECEDENCE:
        if tag in present:
            return category
    return DEFAULT_CATEGORY


# ---------- title ----------
_RE_SPACES = re.compile(r"\s+")
_RE_SPACE_BEFORE_PUNCT = re.compile(r"\s+([,.;:!?])")


def _merge(spans: Iterable[Tuple[int, int]]) -> List[Tuple[int, int]]:
    merged: List[Tuple[int, int]] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(end, merged[-1][1]))
        else:
            merged.append((start, end))
    return merged


def clean_title(
    utterance: str,
    *,
    due: Optional[Hit] = None,
    time: Optional[Hit] = None,
    duration: Optional[Hit] = None,
) -> str:
    spans: List[Tuple[int, int]] = []
    for hit in (due, time):
        if hit is not None:
            spans.append(hit.span)
    for pattern in (HIGH_PRIORITY_PATTERN, LOW_PRIORITY_PATTERN):
        spans.extend(m.span() for m in pattern.finditer(utterance))
    if duration is not None:
        start, end = duration.span
        lead_in = _DURATION_LEAD_IN.search(utterance[:start])
        spans.append((lead_in.start() if lead_in else start, end))

    pieces: List[str] = []
    cursor = 0
    for start, end in _merge(spans):
        pieces.append(utterance[cursor:start])
        cursor = end
    pieces.append(utterance[cursor:])

    title = _RE_SPACES.sub(" ", " ".join(pieces)).strip()
    title = _RE_SPACE_BEFORE_PUNCT.sub(r"\1", title)
    title = title.strip(" ,;:-")

    limit = PARSER.title_max_length
    if len(title) > limit:
        title = title[: limit - 3] + "..."
    return title


# ---------- entry point ----------
def _as_day(now: date | datetime | None) -> date:
    if now is None:
        return datetime.now().date()
    if isinstance(now, datetime):
        return now.date()
    return now


def parse_utterance(utterance: str, *, now: date | datetime | None = None) -> TaskDraft:
    """Turn a dictated or typed sentence into a :class:`TaskDraft`.

    ``now`` anchors relative dates ("tomorrow", "friday"); only its calendar
    date is used.
    """
    text = utterance or ""
    today = _as_day(now)

    due = first_hit(DATE_RULES, text, today)
    time = first_hit(TIME_RULES, text, today)
    priority = first_hit(PRIORITY_RULES, text, today)
    location = first_hit(LOCATION_RULES, text, today)
    duration = first_hit(DURATION_RULES, text, today)
    tags = extract_tags(text)

    return TaskDraft(
        title=clean_title(text, due=due, time=time, duration=duration),
        description=text,
        due_date=due.value if due else None,
        due_time=time.value if time else None,
        priority=priority.value if priority else "medium",
        tags=tags,
        category=derive_category(tags),
        location=location.value if location else None,
        estimated_duration=duration.value if duration else None,
        due_phrase=due.phrase if due else None,
        voice_confidence=PARSER.voice_confidence,
    )


__all__ = [
    "CATEGORY_PRECEDENCE",
    "DATE_RULES",
    "DURATION_RULES",
    "Hit",
    "LOCATION_RULES",
    "PRIORITY_RULES",
    "Rule",
    "TAG_RULES",
    "TIME_RULES",
    "clean_title",
    "derive_category",
    "extract_tags",
    "first_hit",
    "parse_utterance",
]

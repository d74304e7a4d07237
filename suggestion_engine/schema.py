"""Core data schema for tasks, feedback and completion snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional


class TimeBucket(str, Enum):
    """Coarse partition of the hour of day."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"

    @classmethod
    def from_hour(cls, hour: int) -> "TimeBucket":
        hour = int(hour) % 24
        if 6 <= hour <= 11:
            return cls.MORNING
        if 12 <= hour <= 16:
            return cls.AFTERNOON
        if 17 <= hour <= 20:
            return cls.EVENING
        return cls.NIGHT

    @property
    def order(self) -> int:
        return _BUCKET_ORDER[self]


_BUCKET_ORDER = {bucket: index for index, bucket in enumerate(TimeBucket)}


class Priority(IntEnum):
    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    URGENT = 4

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: object, default: Optional["Priority"] = None) -> "Priority":
        """Map free text like ``"High"`` onto a level, falling back to ``default``."""

        if isinstance(value, cls):
            return value
        text = str(value).strip().upper() if value is not None else ""
        if text in cls.__members__:
            return cls[text]
        return cls.NONE if default is None else default


class TaskCategory(IntEnum):
    """Fixed category set; the ordinal is the canonical tie-break order."""

    UNCATEGORIZED = 0
    WORK = 1
    PERSONAL = 2
    HEALTH = 3
    FINANCE = 4
    SHOPPING = 5
    ERRANDS = 6
    LEARNING = 7
    HOME = 8

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: object) -> "TaskCategory":
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                return cls.UNCATEGORIZED
        text = str(value).strip().upper() if value is not None else ""
        if text.isdigit():
            return cls.parse(int(text))
        return cls.__members__.get(text, cls.UNCATEGORIZED)


class FeedbackAction(str, Enum):
    """User reaction to a surfaced suggestion."""

    STARTED_IMMEDIATELY = "started_immediately"
    VIEWED_DETAILS = "viewed_details"
    SNOOZED_1_HOUR = "snoozed_1_hour"
    SNOOZED_EVENING = "snoozed_evening"
    SNOOZED_TOMORROW = "snoozed_tomorrow"
    SKIPPED_NOT_RELEVANT = "skipped_not_relevant"
    SKIPPED_WRONG_TIME = "skipped_wrong_time"
    SKIPPED_NEEDS_FOCUS = "skipped_needs_focus"

    @property
    def is_positive(self) -> bool:
        return self in _POSITIVE_ACTIONS

    @property
    def is_skip(self) -> bool:
        return self in _SKIP_ACTIONS

    @property
    def is_snooze(self) -> bool:
        return self in _SNOOZE_ACTIONS

    @property
    def adjustment_delta(self) -> float:
        return _ADJUSTMENT_DELTAS[self]


_POSITIVE_ACTIONS = frozenset({FeedbackAction.STARTED_IMMEDIATELY, FeedbackAction.VIEWED_DETAILS})
_SKIP_ACTIONS = frozenset(
    {
        FeedbackAction.SKIPPED_NOT_RELEVANT,
        FeedbackAction.SKIPPED_WRONG_TIME,
        FeedbackAction.SKIPPED_NEEDS_FOCUS,
    }
)
_SNOOZE_ACTIONS = frozenset(
    {FeedbackAction.SNOOZED_1_HOUR, FeedbackAction.SNOOZED_EVENING, FeedbackAction.SNOOZED_TOMORROW}
)
_ADJUSTMENT_DELTAS = {
    FeedbackAction.STARTED_IMMEDIATELY: 5.0,
    FeedbackAction.VIEWED_DETAILS: 1.0,
    FeedbackAction.SNOOZED_1_HOUR: -2.0,
    FeedbackAction.SNOOZED_EVENING: -3.0,
    FeedbackAction.SNOOZED_TOMORROW: -3.0,
    FeedbackAction.SKIPPED_NOT_RELEVANT: -5.0,
    FeedbackAction.SKIPPED_WRONG_TIME: -5.0,
    FeedbackAction.SKIPPED_NEEDS_FOCUS: -5.0,
}


@dataclass(frozen=True)
class Task:
    """Task record as read by the scorer."""

    id: str
    title: str
    created_at: datetime
    due: Optional[datetime] = None
    priority: Priority = Priority.NONE
    estimated_duration: Optional[float] = None
    category: TaskCategory = TaskCategory.UNCATEGORIZED
    notes: Optional[str] = None


@dataclass(frozen=True)
class FeedbackEvent:
    """Append-only log entry recorded for every suggestion interaction."""

    task_id: str
    action: FeedbackAction
    timestamp: datetime
    original_score: float
    category: TaskCategory
    hour_of_day: int


class CompletionKey(NamedTuple):
    category: TaskCategory
    hour: int

    def __str__(self) -> str:
        return f"{int(self.category)}_{self.hour}"


def parse_completion_key(key: str) -> Optional[CompletionKey]:
    """Parse ``"<ordinal>_<hour>"``; anything else yields ``None``."""

    parts = str(key).split("_")
    if len(parts) != 2:
        return None
    raw_category, raw_hour = parts
    try:
        ordinal = int(raw_category)
        hour = int(raw_hour)
    except ValueError:
        return None
    if not 0 <= hour <= 23:
        return None
    try:
        category = TaskCategory(ordinal)
    except ValueError:
        return None
    return CompletionKey(category, hour)


def _frozen(mapping: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class CompletionPatterns:
    """Read-only snapshot of completion aggregates owned by the caller."""

    last_completed_category: Optional[TaskCategory] = None
    last_completed_time: Optional[datetime] = None
    category_time_patterns: Mapping[str, int] = field(default_factory=dict)
    category_day_patterns: Mapping[str, int] = field(default_factory=dict)
    average_completion_times: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "category_time_patterns", _frozen(self.category_time_patterns))
        object.__setattr__(self, "category_day_patterns", _frozen(self.category_day_patterns))
        object.__setattr__(self, "average_completion_times", _frozen(self.average_completion_times))

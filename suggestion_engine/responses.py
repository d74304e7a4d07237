"""Normalization of free-form inference replies into typed suggestions."""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from suggestion_engine.schema import Priority, TaskCategory

logger = logging.getLogger(__name__)

MIN_MINUTES = 5
MAX_MINUTES = 480
DEFAULT_MINUTES = 30
MAX_SUBTASKS = 3

# one level of nested braces is enough for the reply shapes we ask for
_JSON_OBJECT = re.compile(r"\{[^{}]*(?:\{[^{}]*\}[^{}]*)*\}")


class Confidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BestTime(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    ANYTIME = "anytime"


@dataclass(frozen=True)
class TaskEstimate:
    estimated_minutes: int
    confidence: Confidence
    reasoning: str

    @property
    def estimated_duration(self) -> float:
        return float(self.estimated_minutes * 60)


@dataclass(frozen=True)
class PrioritySuggestion:
    priority: Priority
    reasoning: str


@dataclass(frozen=True)
class ProposedCategory:
    name: str
    color_hex: str = "#808080"
    icon_name: str = "tag.fill"


@dataclass(frozen=True)
class TaskAnalysis:
    estimated_minutes: int = DEFAULT_MINUTES
    suggested_priority: Priority = Priority.MEDIUM
    best_time: BestTime = BestTime.ANYTIME
    suggested_category: TaskCategory = TaskCategory.UNCATEGORIZED
    proposed_new_category: Optional[ProposedCategory] = None
    subtasks: tuple[str, ...] = field(default_factory=tuple)
    tips: str = ""
    refined_title: Optional[str] = None
    suggested_description: Optional[str] = None

    @classmethod
    def default(cls) -> "TaskAnalysis":
        return cls()


def extract_json(text: Optional[str]) -> Optional[dict]:
    """Return the first JSON object in ``text``, tolerating surrounding prose."""

    if not text:
        return None

    try:
        payload = json.loads(text)
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        return payload

    match = _JSON_OBJECT.search(text)
    if match is None:
        return None
    try:
        payload = json.loads(match.group(0))
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def normalize_minutes(value: Any) -> int:
    """Round half up and clamp into the range the prompt asked for."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        minutes = DEFAULT_MINUTES
    elif isinstance(value, float):
        minutes = math.floor(value + 0.5) if math.isfinite(value) else DEFAULT_MINUTES
    else:
        minutes = value
    return max(MIN_MINUTES, min(MAX_MINUTES, minutes))


def _string(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def _optional_string(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _confidence(value: Any) -> Confidence:
    text = _string(value).strip().lower()
    try:
        return Confidence(text)
    except ValueError:
        return Confidence.LOW


def _best_time(value: Any) -> BestTime:
    text = _string(value).strip().lower()
    try:
        return BestTime(text)
    except ValueError:
        return BestTime.ANYTIME


def _category(value: Any) -> TaskCategory:
    text = _string(value).strip().upper()
    return TaskCategory.__members__.get(text, TaskCategory.UNCATEGORIZED)


def _proposed_category(value: Any) -> Optional[ProposedCategory]:
    if not isinstance(value, dict):
        return None
    name = _string(value.get("name")).strip()
    if not name:
        return None
    defaults = ProposedCategory(name=name)
    return ProposedCategory(
        name=name,
        color_hex=_string(value.get("color_hex"), defaults.color_hex),
        icon_name=_string(value.get("icon_name"), defaults.icon_name),
    )


def parse_duration_response(text: Optional[str]) -> TaskEstimate:
    payload = extract_json(text)
    if payload is None:
        logger.debug("Duration reply not parseable, using fallback estimate")
        return TaskEstimate(DEFAULT_MINUTES, Confidence.LOW, "Could not parse response")

    return TaskEstimate(
        estimated_minutes=normalize_minutes(payload.get("estimated_minutes")),
        confidence=_confidence(payload.get("confidence")),
        reasoning=_string(payload.get("reasoning")),
    )


def parse_priority_response(text: Optional[str]) -> PrioritySuggestion:
    payload = extract_json(text)
    if payload is None:
        return PrioritySuggestion(Priority.MEDIUM, "Could not parse response")

    raw = payload.get("priority", "medium")
    return PrioritySuggestion(
        priority=Priority.parse(_string(raw, "medium"), default=Priority.NONE),
        reasoning=_string(payload.get("reasoning")),
    )


def parse_analysis_response(text: Optional[str]) -> TaskAnalysis:
    """Parse a full task analysis; anything unreadable becomes the default analysis."""

    payload = extract_json(text)
    if payload is None:
        return TaskAnalysis.default()

    category = _category(payload.get("category", "uncategorized"))
    proposed = None
    if category is TaskCategory.UNCATEGORIZED:
        proposed = _proposed_category(payload.get("proposed_new_category"))

    raw_subtasks = payload.get("subtasks")
    subtasks = [item for item in raw_subtasks if isinstance(item, str)] if isinstance(raw_subtasks, list) else []

    return TaskAnalysis(
        estimated_minutes=normalize_minutes(payload.get("estimated_minutes")),
        suggested_priority=Priority.parse(_string(payload.get("suggested_priority"), "medium"), default=Priority.NONE),
        best_time=_best_time(payload.get("best_time")),
        suggested_category=category,
        proposed_new_category=proposed,
        subtasks=tuple(subtasks[:MAX_SUBTASKS]),
        tips=_string(payload.get("tips")),
        refined_title=_optional_string(payload.get("refined_title")),
        suggested_description=_optional_string(payload.get("suggested_description")),
    )


def order_from_payload(payload: Optional[dict]) -> list[int]:
    """Integer entries of an already extracted ``order`` array."""

    if payload is None:
        return []
    order = payload.get("order")
    if not isinstance(order, list):
        return []

    values = []
    for item in order:
        if isinstance(item, bool):
            continue
        if isinstance(item, int):
            values.append(item)
        elif isinstance(item, float) and math.isfinite(item) and item.is_integer():
            values.append(int(item))
    return values


def parse_order_response(text: Optional[str]) -> list[int]:
    """Raw integer proposal from an ordering reply; ``[]`` when there is none."""

    return order_from_payload(extract_json(text))

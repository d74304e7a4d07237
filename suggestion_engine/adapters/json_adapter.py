"""JSON adapter for feedback logs, completion snapshots and task lists."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from suggestion_engine.schema import (
    CompletionPatterns,
    FeedbackAction,
    FeedbackEvent,
    Priority,
    Task,
    TaskCategory,
)

_REQUIRED_FIELDS = {"task_id", "timestamp", "action"}
_VALID_ACTIONS = {action.value for action in FeedbackAction}


def _load(file_path: str) -> Any:
    with open(file_path, encoding="utf-8") as handle:
        return json.load(handle)


def _parse_time(value: Any, label: str) -> datetime:
    try:
        return datetime.fromisoformat(str(value))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"{label}: malformed timestamp") from exc


def _optional_time(value: Any, label: str) -> Optional[datetime]:
    return None if value in (None, "") else _parse_time(value, label)


def _parse_item(item: dict, index: int) -> FeedbackEvent:
    missing = sorted(field for field in _REQUIRED_FIELDS if not item.get(field))
    if missing:
        raise ValueError(f"Item {index}: missing required fields {missing}")

    timestamp = _parse_time(item["timestamp"], f"Item {index}")

    action = str(item["action"]).strip()
    if action not in _VALID_ACTIONS:
        raise ValueError(f"Item {index}: invalid action '{action}'")

    try:
        original_score = float(item.get("original_score", 0.0))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Item {index}: invalid original_score") from exc

    hour = item.get("hour_of_day", timestamp.hour)
    if isinstance(hour, bool) or not isinstance(hour, int) or not 0 <= hour <= 23:
        raise ValueError(f"Item {index}: invalid hour_of_day")

    return FeedbackEvent(
        task_id=str(item["task_id"]).strip(),
        action=FeedbackAction(action),
        timestamp=timestamp,
        original_score=original_score,
        category=TaskCategory.parse(item.get("category")),
        hour_of_day=hour,
    )


def parse(file_path: str) -> list[FeedbackEvent]:
    """Parse JSON file into feedback events."""

    payload = _load(file_path)
    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")

    return [_parse_item(item, i) for i, item in enumerate(payload, start=1)]


def completion_patterns_from_dict(payload: dict) -> CompletionPatterns:
    if not isinstance(payload, dict):
        raise ValueError("Completion patterns must be a JSON object")

    last_category = payload.get("last_completed_category")
    return CompletionPatterns(
        last_completed_category=None if last_category is None else TaskCategory.parse(last_category),
        last_completed_time=_optional_time(payload.get("last_completed_time"), "last_completed_time"),
        category_time_patterns=payload.get("category_time_patterns") or {},
        category_day_patterns=payload.get("category_day_patterns") or {},
        average_completion_times=payload.get("average_completion_times") or {},
    )


def completion_patterns_to_dict(patterns: CompletionPatterns) -> dict:
    return {
        "last_completed_category": (
            None if patterns.last_completed_category is None else int(patterns.last_completed_category)
        ),
        "last_completed_time": (
            None if patterns.last_completed_time is None else patterns.last_completed_time.isoformat()
        ),
        "category_time_patterns": dict(patterns.category_time_patterns),
        "category_day_patterns": dict(patterns.category_day_patterns),
        "average_completion_times": dict(patterns.average_completion_times),
    }


def load_completion_patterns(file_path: str) -> CompletionPatterns:
    """Load a completion snapshot; keys are kept verbatim, bad ones included."""

    return completion_patterns_from_dict(_load(file_path))


def dump_completion_patterns(patterns: CompletionPatterns) -> str:
    return json.dumps(completion_patterns_to_dict(patterns), sort_keys=True)


def _parse_task(item: dict, index: int) -> Task:
    if not item.get("id") or not item.get("title") or not item.get("created_at"):
        raise ValueError(f"Task {index}: id, title and created_at are required")

    duration = item.get("estimated_duration")
    if duration is not None:
        try:
            duration = float(duration)
        except Exception as exc:  # noqa: BLE001
            raise ValueError(f"Task {index}: invalid estimated_duration") from exc

    return Task(
        id=str(item["id"]),
        title=str(item["title"]),
        created_at=_parse_time(item["created_at"], f"Task {index}"),
        due=_optional_time(item.get("due"), f"Task {index}"),
        priority=Priority.parse(item.get("priority")),
        estimated_duration=duration,
        category=TaskCategory.parse(item.get("category")),
        notes=item.get("notes"),
    )


def parse_tasks(file_path: str) -> list[Task]:
    """Parse a JSON list of task records."""

    payload = _load(file_path)
    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")

    return [_parse_task(item, i) for i, item in enumerate(payload, start=1)]

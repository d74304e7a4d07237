"""CSV adapter for feedback event logs."""

from __future__ import annotations

import csv
from datetime import datetime

from suggestion_engine.schema import FeedbackAction, FeedbackEvent, TaskCategory

_REQUIRED_FIELDS = {"task_id", "timestamp", "action"}
_VALID_ACTIONS = {action.value for action in FeedbackAction}


def _parse_row(row: dict, row_number: int) -> FeedbackEvent:
    missing = sorted(field for field in _REQUIRED_FIELDS if not row.get(field))
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    try:
        timestamp = datetime.fromisoformat(row["timestamp"])
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Row {row_number}: malformed timestamp") from exc

    action = row["action"].strip()
    if action not in _VALID_ACTIONS:
        raise ValueError(f"Row {row_number}: invalid action '{action}'")

    score_raw = row.get("original_score")
    original_score = 0.0
    if score_raw not in (None, ""):
        try:
            original_score = float(score_raw)
        except Exception as exc:  # noqa: BLE001
            raise ValueError(f"Row {row_number}: invalid original_score") from exc

    hour_raw = row.get("hour_of_day")
    hour = timestamp.hour
    if hour_raw not in (None, ""):
        try:
            hour = int(hour_raw)
        except Exception as exc:  # noqa: BLE001
            raise ValueError(f"Row {row_number}: invalid hour_of_day") from exc
        if not 0 <= hour <= 23:
            raise ValueError(f"Row {row_number}: hour_of_day out of range")

    return FeedbackEvent(
        task_id=row["task_id"].strip(),
        action=FeedbackAction(action),
        timestamp=timestamp,
        original_score=original_score,
        category=TaskCategory.parse(row.get("category")),
        hour_of_day=hour,
    )


def parse(file_path: str) -> list[FeedbackEvent]:
    """Parse CSV file into a list of feedback events."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        events: list[FeedbackEvent] = []
        for row_number, row in enumerate(reader, start=2):
            events.append(_parse_row(row, row_number))
        return events

"""Deterministic multi-factor task priority scoring."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

from suggestion_engine.schema import FeedbackEvent, Priority, Task

_PRIORITY_POINTS = {
    Priority.NONE: 0.0,
    Priority.LOW: 5.0,
    Priority.MEDIUM: 12.0,
    Priority.HIGH: 20.0,
    Priority.URGENT: 25.0,
}

MAX_ADJUSTMENT = 15.0


def due_date_score(task: Task, now: datetime) -> float:
    """Urgency from the due date, 5 (none or far away) up to 40 (overdue)."""

    if task.due is None:
        return 5.0

    hours = (task.due - now).total_seconds() / 3600.0
    if hours < 0:
        return 40.0
    if hours < 2:
        return 38.0
    if hours < 24:
        return 30.0 + (24.0 - hours) / 24.0 * 8.0
    if hours < 48:
        return 20.0 + (48.0 - hours) / 24.0 * 10.0
    if hours < 168:
        return 10.0 + (168.0 - hours) / 168.0 * 10.0
    return 5.0


def explicit_priority_score(task: Task) -> float:
    return _PRIORITY_POINTS.get(task.priority, 0.0)


def age_score(task: Task, now: datetime) -> float:
    days = (now - task.created_at).total_seconds() / 86400.0
    if days > 14:
        return 10.0
    if days > 7:
        return 7.0
    if days > 3:
        return 4.0
    return 2.0


def quick_win_score(task: Task) -> float:
    if task.estimated_duration is None:
        return 3.0

    minutes = task.estimated_duration / 60.0
    if minutes <= 5:
        return 10.0
    if minutes <= 15:
        return 8.0
    if minutes <= 30:
        return 5.0
    if minutes <= 60:
        return 2.0
    return 0.0


def score_components(task: Task, now: datetime) -> dict:
    """Return every sub-score together with their plain sum."""

    components = {
        "due_date": due_date_score(task, now),
        "explicit_priority": explicit_priority_score(task),
        "age": age_score(task, now),
        "quick_win": quick_win_score(task),
    }
    components["score"] = sum(components.values())
    return components


def score(task: Task, now: datetime) -> float:
    """Composite priority score; higher means more worth surfacing."""

    return due_date_score(task, now) + explicit_priority_score(task) + age_score(task, now) + quick_win_score(task)


def rank_tasks(tasks: Iterable[Task], now: datetime) -> list[Task]:
    """Baseline ordering: score descending, input order on ties."""

    scored = [(score(task, now), index, task) for index, task in enumerate(tasks)]
    scored.sort(key=lambda item: (-item[0], item[1]))
    return [task for _, _, task in scored]


def feedback_adjustments(events: Iterable[FeedbackEvent]) -> dict[str, float]:
    """Fold the feedback log into per-task score adjustments bounded to +/-15."""

    adjustments: dict[str, float] = {}
    for event in events:
        current = adjustments.get(event.task_id, 0.0) + event.action.adjustment_delta
        adjustments[event.task_id] = max(-MAX_ADJUSTMENT, min(MAX_ADJUSTMENT, current))
    return adjustments


def effective_score(task: Task, now: datetime, adjustments: Mapping[str, float] | None = None) -> float:
    adjustment = (adjustments or {}).get(task.id, 0.0)
    return max(0.0, min(100.0, score(task, now) + adjustment))


def score_reasons(task: Task, now: datetime) -> list[str]:
    """Short human-readable reasons backing a task's score."""

    reasons: list[str] = []

    if task.due is not None:
        days_ahead = (task.due.date() - now.date()).days
        if task.due < now:
            reasons.append("This task is overdue")
        elif days_ahead == 0:
            reasons.append("Due today")
        elif days_ahead == 1:
            reasons.append("Due tomorrow")
        else:
            reasons.append(f"Due in {days_ahead} days")

    if task.priority is Priority.URGENT:
        reasons.append("Marked as urgent")
    elif task.priority is Priority.HIGH:
        reasons.append("High priority")

    if task.estimated_duration is not None and task.estimated_duration <= 900:
        reasons.append(f"Quick {int(task.estimated_duration // 60)} minute task")

    if (now - task.created_at).total_seconds() / 86400.0 > 7:
        reasons.append("Been on your list for over a week")

    return reasons

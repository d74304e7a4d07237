"""Top-three suggestion selection with snooze suppression and adjustment decay."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from suggestion_engine.schema import FeedbackAction, FeedbackEvent, Task
from suggestion_engine.scoring import effective_score, feedback_adjustments, score_reasons

logger = logging.getLogger(__name__)

MAX_LOG_EVENTS = 200
MAX_SUGGESTIONS = 3
DIVERSITY_SCORE_GAP = 10.0
WEEKLY_DECAY = 0.95
MIN_ADJUSTMENT = 0.5


class ConfidenceLevel(str, Enum):
    RECOMMENDED = "recommended"
    GOOD_FIT = "good_fit"
    CONSIDER = "consider"


@dataclass(frozen=True)
class TaskSuggestion:
    task: Task
    score: float
    reasons: tuple[str, ...]
    confidence: ConfidenceLevel


@dataclass(frozen=True)
class Prioritization:
    """Outcome of one analysis pass over the task list."""

    prioritized: tuple[Task, ...]
    suggested_next: Optional[Task]
    suggestions: tuple[TaskSuggestion, ...]


def trim_feedback_log(events: Iterable[FeedbackEvent]) -> list[FeedbackEvent]:
    """Keep only the newest ``MAX_LOG_EVENTS`` entries of an append-only log."""

    return list(events)[-MAX_LOG_EVENTS:]


def snooze_until(action: FeedbackAction, at: datetime) -> Optional[datetime]:
    """When a snooze recorded at ``at`` expires; ``None`` for other actions."""

    if action is FeedbackAction.SNOOZED_1_HOUR:
        return at + timedelta(hours=1)
    if action is FeedbackAction.SNOOZED_EVENING:
        evening = at.replace(hour=18, minute=0, second=0, microsecond=0)
        return evening if evening > at else evening + timedelta(days=1)
    if action is FeedbackAction.SNOOZED_TOMORROW:
        return at.replace(hour=9, minute=0, second=0, microsecond=0) + timedelta(days=1)
    return None


def snoozed_until(events: Iterable[FeedbackEvent]) -> dict[str, datetime]:
    """Latest snooze expiry per task; later snoozes replace earlier ones."""

    expiries: dict[str, datetime] = {}
    for event in events:
        until = snooze_until(event.action, event.timestamp)
        if until is not None:
            expiries[event.task_id] = until
    return expiries


def is_snoozed(task_id: str, expiries: Mapping[str, datetime], now: datetime) -> bool:
    until = expiries.get(task_id)
    return until is not None and until > now


def decay_adjustments(
    adjustments: Mapping[str, float], last_decay: datetime, now: datetime
) -> tuple[dict[str, float], datetime]:
    """Apply 5% decay per whole elapsed week and drop adjustments under 0.5.

    Returns the decayed adjustments and the new last-decay time, which only
    advances once at least a week has passed.
    """

    weeks = (now - last_decay).days // 7
    if weeks < 1:
        return dict(adjustments), last_decay

    factor = WEEKLY_DECAY**weeks
    decayed = {}
    for task_id, value in adjustments.items():
        value = value * factor
        if abs(value) >= MIN_ADJUSTMENT:
            decayed[task_id] = value
    logger.debug("Decayed %d adjustments over %d weeks, kept %d", len(adjustments), weeks, len(decayed))
    return decayed, now


def confidence_level(score: float, all_scores: Sequence[float]) -> ConfidenceLevel:
    """Place ``score`` by its rank percentile within the current batch."""

    if not all_scores:
        return ConfidenceLevel.CONSIDER

    ordered = sorted(all_scores, reverse=True)
    rank = next((index for index, value in enumerate(ordered) if value <= score), len(ordered))
    percentile = rank / len(ordered)
    if percentile <= 0.1:
        return ConfidenceLevel.RECOMMENDED
    if percentile <= 0.3:
        return ConfidenceLevel.GOOD_FIT
    return ConfidenceLevel.CONSIDER


def select_top_three(scored: Sequence[tuple[Task, float]]) -> list[Task]:
    """Pick up to three tasks from a score-descending list, preferring variety.

    The top task always leads. Alternatives are taken when their category is
    not yet used or when they trail the leader by more than 10 points; any
    slots still open are then filled in score order.
    """

    if not scored:
        return []

    primary, primary_score = scored[0]
    result = [primary]
    used_categories = {primary.category}

    for task, value in scored[1:]:
        if len(result) >= MAX_SUGGESTIONS:
            break
        if primary_score - value > DIVERSITY_SCORE_GAP or task.category not in used_categories:
            result.append(task)
            used_categories.add(task.category)

    for task, _ in scored[1:]:
        if len(result) >= MAX_SUGGESTIONS:
            break
        if all(task.id != chosen.id for chosen in result):
            result.append(task)

    return result


def analyze_and_prioritize(
    tasks: Iterable[Task],
    events: Iterable[FeedbackEvent],
    now: datetime,
    last_decay: Optional[datetime] = None,
) -> Prioritization:
    """Rank by effective score and choose the suggestions to surface.

    Snoozed tasks stay in the full ranking but are never suggested, and they
    do not count towards the confidence curve. When ``last_decay`` is given
    the feedback adjustments are decayed against ``now`` first.
    """

    events = list(events)
    adjustments = feedback_adjustments(events)
    if last_decay is not None:
        adjustments, _ = decay_adjustments(adjustments, last_decay, now)
    expiries = snoozed_until(events)

    scored = [(task, effective_score(task, now, adjustments)) for task in tasks]
    scored.sort(key=lambda item: -item[1])
    unsnoozed = [item for item in scored if not is_snoozed(item[0].id, expiries, now)]

    all_scores = [value for _, value in unsnoozed]
    scores = {task.id: value for task, value in unsnoozed}
    suggestions = tuple(
        TaskSuggestion(
            task=task,
            score=scores[task.id],
            reasons=tuple(score_reasons(task, now)),
            confidence=confidence_level(scores[task.id], all_scores),
        )
        for task in select_top_three(unsnoozed)
    )
    return Prioritization(
        prioritized=tuple(task for task, _ in scored),
        suggested_next=unsnoozed[0][0] if unsnoozed else None,
        suggestions=suggestions,
    )

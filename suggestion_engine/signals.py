"""Behavioral signal extraction from suggestion feedback."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from suggestion_engine.schema import (
    CompletionPatterns,
    FeedbackAction,
    FeedbackEvent,
    TaskCategory,
    TimeBucket,
    parse_completion_key,
)
from suggestion_engine.selection import trim_feedback_log

logger = logging.getLogger(__name__)

MIN_EVENTS = 10
MIN_POSITIVE_SUPPORT = 6
MIN_TIME_SHARE = 0.40
MIN_AFFINITY_SCORE = 2
MIN_AFFINITY_SUPPORT = 3
MAX_AFFINITIES = 2
MIN_TOTAL_SNOOZES = 4
MIN_SNOOZE_GROUP = 3
MIN_SKIP_GROUP = 3
MAX_SKIP_HOTSPOTS = 2
MIN_COMPLETION_PEAK = 4


class SkipReason(str, Enum):
    WRONG_TIME = "wrong_time"
    NEEDS_FOCUS = "needs_focus"


_SKIP_REASONS = {
    FeedbackAction.SKIPPED_WRONG_TIME: SkipReason.WRONG_TIME,
    FeedbackAction.SKIPPED_NEEDS_FOCUS: SkipReason.NEEDS_FOCUS,
}
_REASON_ORDER = {reason: index for index, reason in enumerate(SkipReason)}


@dataclass(frozen=True)
class TimePreference:
    bucket: TimeBucket
    support: int
    share: float


@dataclass(frozen=True)
class CategoryAffinity:
    category: TaskCategory
    score: int
    support: int


@dataclass(frozen=True)
class SnoozeHotspot:
    category: TaskCategory
    bucket: TimeBucket
    count: int


@dataclass(frozen=True)
class SkipReasonHotspot:
    reason: SkipReason
    category: TaskCategory
    count: int


@dataclass(frozen=True)
class CompletionPeak:
    category: TaskCategory
    bucket: TimeBucket
    count: int


@dataclass(frozen=True)
class BehavioralSignals:
    """Confidence-gated summary of user behavior, recomputed on demand."""

    total_events: int
    time_preference: Optional[TimePreference] = None
    category_affinity: tuple[CategoryAffinity, ...] = ()
    snooze_hotspot: Optional[SnoozeHotspot] = None
    skip_reason_hotspots: tuple[SkipReasonHotspot, ...] = ()
    completion_peak: Optional[CompletionPeak] = None

    @property
    def is_cold_start(self) -> bool:
        return self.total_events < MIN_EVENTS and self.completion_peak is None


def _time_preference(events: list[FeedbackEvent]) -> Optional[TimePreference]:
    positive = [event for event in events if event.action.is_positive]
    support = len(positive)
    if support < MIN_POSITIVE_SUPPORT:
        return None

    counts = Counter(TimeBucket.from_hour(event.hour_of_day) for event in positive)
    bucket, count = min(counts.items(), key=lambda item: (-item[1], item[0].order))
    share = count / support
    if share < MIN_TIME_SHARE:
        return None
    return TimePreference(bucket=bucket, support=support, share=share)


def _category_affinity(events: list[FeedbackEvent]) -> tuple[CategoryAffinity, ...]:
    positive = Counter(event.category for event in events if event.action.is_positive)
    skipped = Counter(event.category for event in events if event.action.is_skip)

    candidates = []
    for category in set(positive) | set(skipped):
        net = 2 * positive[category] - 2 * skipped[category]
        support = positive[category] + skipped[category]
        if net >= MIN_AFFINITY_SCORE and support >= MIN_AFFINITY_SUPPORT:
            candidates.append(CategoryAffinity(category=category, score=net, support=support))

    candidates.sort(key=lambda item: (-item.score, -item.support, int(item.category)))
    return tuple(candidates[:MAX_AFFINITIES])


def _snooze_hotspot(events: list[FeedbackEvent]) -> Optional[SnoozeHotspot]:
    snoozes = [event for event in events if event.action.is_snooze]
    if len(snoozes) < MIN_TOTAL_SNOOZES:
        return None

    counts = Counter((event.category, TimeBucket.from_hour(event.hour_of_day)) for event in snoozes)
    (category, bucket), count = min(
        counts.items(), key=lambda item: (-item[1], int(item[0][0]), item[0][1].value)
    )
    if count < MIN_SNOOZE_GROUP:
        return None
    return SnoozeHotspot(category=category, bucket=bucket, count=count)


def _skip_reason_hotspots(events: list[FeedbackEvent]) -> tuple[SkipReasonHotspot, ...]:
    counts = Counter(
        (_SKIP_REASONS[event.action], event.category) for event in events if event.action in _SKIP_REASONS
    )
    hotspots = [
        SkipReasonHotspot(reason=reason, category=category, count=count)
        for (reason, category), count in counts.items()
        if count >= MIN_SKIP_GROUP
    ]
    hotspots.sort(key=lambda item: (-item.count, int(item.category), _REASON_ORDER[item.reason]))
    return tuple(hotspots[:MAX_SKIP_HOTSPOTS])


def _completion_peak(patterns: CompletionPatterns) -> Optional[CompletionPeak]:
    totals: Counter = Counter()
    for raw_key, count in patterns.category_time_patterns.items():
        key = parse_completion_key(raw_key)
        if key is None or isinstance(count, bool) or not isinstance(count, int):
            logger.debug("Dropping unparseable completion entry %r=%r", raw_key, count)
            continue
        totals[(key.category, TimeBucket.from_hour(key.hour))] += count

    if not totals:
        return None

    (category, bucket), count = min(
        totals.items(), key=lambda item: (-item[1], int(item[0][0]), item[0][1].order)
    )
    if count < MIN_COMPLETION_PEAK:
        return None
    return CompletionPeak(category=category, bucket=bucket, count=count)


def extract_signals(
    events: Iterable[FeedbackEvent],
    completion_patterns: CompletionPatterns | None = None,
    now: datetime | None = None,
) -> BehavioralSignals:
    """Summarize a feedback log and completion snapshot into behavioral signals.

    Event-derived signals are only computed once the log holds at least
    ``MIN_EVENTS`` events. Only the newest entries up to the log cap are
    considered. The completion peak comes from the snapshot alone,
    so it can lift cold start on its own. ``now`` is accepted so callers can
    pass the same clock they score with; extraction itself is time-invariant.
    """

    events = trim_feedback_log(events)
    patterns = completion_patterns or CompletionPatterns()
    total = len(events)

    peak = _completion_peak(patterns)
    if total < MIN_EVENTS:
        return BehavioralSignals(total_events=total, completion_peak=peak)

    return BehavioralSignals(
        total_events=total,
        time_preference=_time_preference(events),
        category_affinity=_category_affinity(events),
        snooze_hotspot=_snooze_hotspot(events),
        skip_reason_hotspots=_skip_reason_hotspots(events),
        completion_peak=peak,
    )

"""Demo script for suggestion-engine."""

import asyncio
import sys
from datetime import datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from suggestion_engine.reordering import suggest_order
from suggestion_engine.selection import analyze_and_prioritize
from suggestion_engine.schema import (
    CompletionPatterns,
    FeedbackAction,
    FeedbackEvent,
    Priority,
    Task,
    TaskCategory,
)


class CannedClient:
    """Stands in for the inference boundary with a fixed, overreaching reply."""

    async def complete(self, prompt: str, system_prompt: str) -> str:
        return 'Sure! {"order": [5, 1, 4, 3, 2], "reasoning": "Quick wins first."}'


def main() -> None:
    now = datetime(2025, 1, 6, 9, 0)
    tasks = [
        Task("a", "Review quarterly report", now - timedelta(days=10), priority=Priority.HIGH,
             category=TaskCategory.WORK),
        Task("b", "Buy groceries", now - timedelta(days=1), priority=Priority.LOW, category=TaskCategory.SHOPPING),
        Task("c", "Standup prep", now - timedelta(days=2), due=now + timedelta(hours=3),
             priority=Priority.MEDIUM, estimated_duration=600, category=TaskCategory.WORK),
        Task("d", "Read ML paper", now - timedelta(days=5), category=TaskCategory.LEARNING),
        Task("e", "Fix login bug", now, due=now + timedelta(hours=1), priority=Priority.URGENT,
             category=TaskCategory.WORK),
    ]
    events = [
        FeedbackEvent(f"t{i}", FeedbackAction.STARTED_IMMEDIATELY, now, 50.0, TaskCategory.WORK, 9)
        for i in range(12)
    ]
    patterns = CompletionPatterns(category_time_patterns={"1_9": 6, "7_20": 2})

    result = asyncio.run(suggest_order(tasks, events, patterns, now, CannedClient()))
    print("Behavior context:\n" + (result.behavior_context or "(none)"))
    print("Proposed:", list(result.proposed))
    print("Applied: ", list(result.order))
    for position, task in enumerate(result.tasks, start=1):
        print(f"{position}. {task.title}")

    print("Top suggestions:")
    for suggestion in analyze_and_prioritize(tasks, events, now).suggestions:
        print(f"- {suggestion.task.title} ({suggestion.confidence.value}, {suggestion.score:.0f})")


if __name__ == "__main__":
    main()

"""Prompt text for the external inference boundary."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Optional

from suggestion_engine.schema import Task
from suggestion_engine.signals import BehavioralSignals, SkipReason

SYSTEM_PROMPT = (
    "You are a productivity coach helping users organize tasks effectively.\n"
    "Be concise and practical, and consider the user's past preferences when provided.\n"
    "Respond ONLY in the specified JSON format."
)

HEDGE_LINE = "Use these as soft preferences. Keep reordering within 2 positions unless strongly justified."


def _percent(share: float) -> int:
    return int(share * 100 + 0.5)


def signal_lines(signals: BehavioralSignals) -> list[str]:
    """One line per qualifying signal, in fixed order."""

    lines: list[str] = []

    pref = signals.time_preference
    if pref is not None:
        lines.append(
            f"- Prefers engaging in the {pref.bucket.value} ({_percent(pref.share)}% of starts, n={pref.support})."
        )

    if signals.category_affinity:
        text = ", ".join(
            f"{item.category.display_name} (+{item.score}, n={item.support})" for item in signals.category_affinity
        )
        lines.append(f"- Strongest categories: {text}.")

    snooze = signals.snooze_hotspot
    if snooze is not None:
        lines.append(f"- Often snoozed: {snooze.category.display_name} in the {snooze.bucket.value} (n={snooze.count}).")

    for hotspot in signals.skip_reason_hotspots:
        name = hotspot.category.display_name
        if hotspot.reason is SkipReason.WRONG_TIME:
            lines.append(f"- Skips {name} as 'wrong time' (n={hotspot.count}).")
        else:
            lines.append(f"- Skips {name} as 'needs focus' (n={hotspot.count}, weak signal).")

    peak = signals.completion_peak
    if peak is not None:
        lines.append(
            f"- Completes {peak.category.display_name} tasks most in the {peak.bucket.value} (n={peak.count})."
        )

    return lines


def to_prompt_string(signals: BehavioralSignals) -> str:
    """Render signals as a behavior-context block, or ``""`` when there is nothing to say."""

    if signals.is_cold_start:
        return ""

    lines = signal_lines(signals)
    if not lines:
        return ""

    return "\n".join([f"User behavior from {signals.total_events} interactions:", *lines, HEDGE_LINE])


def _format_due(due: Optional[datetime]) -> str:
    return due.strftime("%Y-%m-%d") if due is not None else ""


def build_task_ordering_prompt(tasks: Sequence[Task], behavior_context: Optional[str] = None) -> str:
    """Ask for an ordering of the numbered baseline list."""

    items = []
    for number, task in enumerate(tasks, start=1):
        item = f"{number}. {task.title}"
        if task.due is not None:
            item += f" (Due: {_format_due(task.due)})"
        item += f" [Priority: {task.priority.display_name}]"
        items.append(item)

    sections = [
        "Suggest the best order to complete these tasks today.",
        "Tasks:\n" + "\n".join(items),
        "Consider: due dates first, then priority, then quick wins (short tasks).",
    ]
    if behavior_context:
        sections.append(behavior_context)
    sections.append(
        "Respond in JSON format:\n"
        "{\n"
        '    "order": [<task numbers in suggested order>],\n'
        '    "reasoning": "<brief one-sentence explanation>"\n'
        "}"
    )
    return "\n\n".join(sections)


def build_duration_prompt(title: str, notes: Optional[str] = None) -> str:
    prompt = f"Estimate how long this task will take in minutes.\n\nTask: {title}"
    if notes:
        prompt += f"\nDetails: {notes}"
    prompt += (
        "\n\nRespond in JSON format with reasoning in one sentence:\n"
        "{\n"
        '    "estimated_minutes": <number between 5 and 480>,\n'
        '    "confidence": "<low|medium|high>",\n'
        '    "reasoning": "<brief one-sentence explanation>"\n'
        "}"
    )
    return prompt


def build_priority_prompt(title: str, notes: Optional[str] = None, due: Optional[datetime] = None) -> str:
    prompt = f"Suggest a priority level for this task.\n\nTask: {title}"
    if notes:
        prompt += f"\nDetails: {notes}"
    if due is not None:
        prompt += f"\nDue: {_format_due(due)}"
    prompt += (
        "\n\nPriority levels:\n"
        "- none: No specific priority\n"
        "- low: Can be done anytime, not urgent\n"
        "- medium: Should be done soon\n"
        "- high: Important, needs attention this week\n"
        "- urgent: Critical, needs immediate attention\n"
        "\nRespond in JSON format with reasoning in one sentence:\n"
        "{\n"
        '    "priority": "<none|low|medium|high|urgent>",\n'
        '    "reasoning": "<brief one-sentence explanation>"\n'
        "}"
    )
    return prompt

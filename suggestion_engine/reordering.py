"""One suggestion cycle: baseline ranking, behavior-aware prompt, bounded reorder."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from suggestion_engine.config import Settings, get_settings
from suggestion_engine.metrics import compare_orderings
from suggestion_engine.permutation import clamp_permutation_greedy, sanitize_permutation
from suggestion_engine.prompting import SYSTEM_PROMPT, build_task_ordering_prompt, to_prompt_string
from suggestion_engine.responses import extract_json, order_from_payload
from suggestion_engine.schema import CompletionPatterns, FeedbackEvent, Task
from suggestion_engine.scoring import rank_tasks
from suggestion_engine.signals import extract_signals

logger = logging.getLogger(__name__)


class InferenceClient(Protocol):
    """External natural-language inference boundary."""

    async def complete(self, prompt: str, system_prompt: str) -> str: ...


@dataclass(frozen=True)
class ReorderResult:
    tasks: tuple[Task, ...]
    order: tuple[int, ...]
    proposed: tuple[int, ...]
    used_fallback: bool
    reasoning: str = ""
    behavior_context: str = ""


def apply_order(tasks: Sequence[Task], order: Sequence[int]) -> list[Task]:
    return [tasks[number - 1] for number in order]


async def suggest_order(
    tasks: Iterable[Task],
    events: Iterable[FeedbackEvent],
    completion_patterns: CompletionPatterns | None,
    now: datetime,
    client: InferenceClient,
    settings: Settings | None = None,
) -> ReorderResult:
    """Ask the inference boundary for an ordering and apply it safely.

    Only the top ``max_tasks`` of the baseline are offered for reordering;
    the rest keep their baseline positions. Any timeout or client failure
    yields the baseline ordering.
    """

    settings = settings or get_settings()
    baseline = rank_tasks(tasks, now)
    head, tail = baseline[: settings.max_tasks], baseline[settings.max_tasks :]
    identity = tuple(range(1, len(head) + 1))

    context = to_prompt_string(extract_signals(events, completion_patterns, now))
    fallback = ReorderResult(
        tasks=tuple(baseline), order=identity, proposed=(), used_fallback=True, behavior_context=context
    )
    if not head:
        return fallback

    prompt = build_task_ordering_prompt(head, context or None)
    try:
        reply = await asyncio.wait_for(
            client.complete(prompt, SYSTEM_PROMPT), timeout=settings.inference_timeout_seconds
        )
    except asyncio.TimeoutError:
        logger.warning("Inference timed out after %.1fs, keeping baseline order", settings.inference_timeout_seconds)
        return fallback
    except Exception as exc:  # noqa: BLE001
        logger.warning("Inference failed (%s), keeping baseline order", exc)
        return fallback

    payload = extract_json(reply) or {}
    proposed = order_from_payload(payload)
    sanitized = sanitize_permutation(proposed, len(head))
    order = clamp_permutation_greedy(sanitized, settings.max_displacement)
    logger.debug("Reorder comparison: %s", compare_orderings(sanitized, order))

    reasoning = payload.get("reasoning")
    return ReorderResult(
        tasks=tuple(apply_order(head, order) + tail),
        order=tuple(order),
        proposed=tuple(proposed),
        used_fallback=False,
        reasoning=reasoning if isinstance(reasoning, str) else "",
        behavior_context=context,
    )

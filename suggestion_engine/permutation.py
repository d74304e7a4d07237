"""Repair and bounding of untrusted reordering proposals.

A proposal is a sequence of 1-based task numbers referring to the baseline
list. ``sanitize_permutation`` turns any integer sequence into a permutation
of ``1..n``; ``clamp_permutation_greedy`` then limits how far each task may
move away from its baseline slot. Both are total: they repair, never reject.
"""

from __future__ import annotations

import heapq
import logging
from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)

DEFAULT_MAX_DISPLACEMENT = 2


def sanitize_permutation(raw: Iterable[int], n: int) -> list[int]:
    """Keep first in-range occurrences, then append missing numbers ascending."""

    if n <= 0:
        return []

    seen: set[int] = set()
    kept: list[int] = []
    for value in raw:
        if isinstance(value, bool) or not isinstance(value, int):
            continue
        if 1 <= value <= n and value not in seen:
            seen.add(value)
            kept.append(value)

    kept.extend(value for value in range(1, n + 1) if value not in seen)
    return kept


def window(task: int, n: int, max_displacement: int) -> tuple[int, int]:
    """Feasible 0-based slots for 1-based ``task`` in a list of ``n``."""

    baseline = task - 1
    return max(0, baseline - max_displacement), min(n - 1, baseline + max_displacement)


def clamp_permutation_greedy(perm: Sequence[int], max_displacement: int = DEFAULT_MAX_DISPLACEMENT) -> list[int]:
    """Bound every task's displacement from the identity ordering.

    Slots are filled left to right. A task becomes eligible once its window
    opens; among eligible tasks the one whose window closes first (the
    fewest feasible slots left) is placed, then the one proposed earlier,
    then the lower task number. Because windows open in task order and the
    identity assignment is feasible, this never leaves a task stranded.
    """

    n = len(perm)
    proposal = sanitize_permutation(perm, n)
    d = max(0, int(max_displacement))

    position = {task: index for index, task in enumerate(proposal)}
    heap: list[tuple[int, int, int]] = []
    result: list[int] = []
    next_task = 1

    for slot in range(n):
        while next_task <= n and window(next_task, n, d)[0] <= slot:
            end = window(next_task, n, d)[1]
            heapq.heappush(heap, (end, position[next_task], next_task))
            next_task += 1
        _, _, task = heapq.heappop(heap)
        result.append(task)

    if result != proposal:
        logger.debug("Clamped proposal %s to %s (max displacement %d)", proposal, result, d)
    return result


def is_within_displacement(perm: Sequence[int], max_displacement: int) -> bool:
    return all(abs(index - (task - 1)) <= max_displacement for index, task in enumerate(perm))


def safe_reorder(raw: Iterable[int], n: int, max_displacement: int = DEFAULT_MAX_DISPLACEMENT) -> list[int]:
    """Sanitize then clamp; the only way a raw proposal should reach a task list."""

    return clamp_permutation_greedy(sanitize_permutation(raw, n), max_displacement)

"""Displacement statistics for reorderings."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def _displacements(perm: Sequence[int]) -> np.ndarray:
    values = np.asarray(perm, dtype=int)
    return np.abs(np.arange(len(values)) - (values - 1))


def displacement_metrics(perm: Sequence[int]) -> dict:
    """Compute max/mean displacement and moved-task count against the identity."""

    if len(perm) == 0:
        return {"max_displacement": 0, "mean_displacement": 0.0, "moved_tasks": 0}

    shifts = _displacements(perm)
    return {
        "max_displacement": int(shifts.max()),
        "mean_displacement": float(shifts.mean()),
        "moved_tasks": int(np.count_nonzero(shifts)),
    }


def compare_orderings(proposed: Sequence[int], final: Sequence[int]) -> dict:
    """Compare a proposal with the ordering that was actually applied."""

    if len(proposed) != len(final):
        raise ValueError("Orderings must have the same length")
    matches = np.asarray(proposed, dtype=int) == np.asarray(final, dtype=int)
    return {
        "positional_agreement": float(matches.mean()) if len(matches) else 1.0,
        "repaired_tasks": int(np.count_nonzero(~matches)),
        "proposed": displacement_metrics(proposed),
        "final": displacement_metrics(final),
    }

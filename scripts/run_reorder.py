"""Replay one suggestion cycle from task, feedback and reply files."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from suggestion_engine.adapters import csv_adapter, json_adapter
from suggestion_engine.config import configure_logging, get_settings
from suggestion_engine.metrics import compare_orderings
from suggestion_engine.permutation import safe_reorder, sanitize_permutation
from suggestion_engine.prompting import build_task_ordering_prompt, to_prompt_string
from suggestion_engine.reordering import apply_order
from suggestion_engine.responses import parse_order_response
from suggestion_engine.schema import CompletionPatterns
from suggestion_engine.scoring import rank_tasks, score_components
from suggestion_engine.selection import analyze_and_prioritize
from suggestion_engine.signals import extract_signals

logger = logging.getLogger(__name__)


def _load_events(path: Path):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(str(path))
    if suffix == ".json":
        return json_adapter.parse(str(path))
    raise ValueError("Unsupported input format, expected .csv or .json")


def main() -> None:
    parser = argparse.ArgumentParser(description="Replay a suggestion-engine reorder cycle")
    parser.add_argument("--tasks", required=True, help="Path to JSON task list")
    parser.add_argument("--events", required=True, help="Path to CSV/JSON feedback log")
    parser.add_argument("--patterns", help="Path to JSON completion snapshot")
    parser.add_argument("--reply", help="Path to a recorded inference reply (text)")
    parser.add_argument("--now", help="ISO timestamp to score against (default: current time)")
    parser.add_argument("--print-prompt", action="store_true", help="Also print the ordering prompt")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)

    now = datetime.fromisoformat(args.now) if args.now else datetime.now()
    tasks = json_adapter.parse_tasks(args.tasks)
    events = _load_events(Path(args.events))
    patterns = json_adapter.load_completion_patterns(args.patterns) if args.patterns else CompletionPatterns()

    baseline = rank_tasks(tasks, now)[: settings.max_tasks]
    context = to_prompt_string(extract_signals(events, patterns, now))

    reply = Path(args.reply).read_text(encoding="utf-8") if args.reply else ""
    proposed = parse_order_response(reply)
    order = safe_reorder(proposed, len(baseline), settings.max_displacement)
    if not proposed:
        logger.info("No usable proposal, keeping baseline order")

    report = {
        "baseline": [
            {"id": task.id, "title": task.title, **score_components(task, now)} for task in baseline
        ],
        "behavior_context": context,
        "proposed": proposed,
        "order": order,
        "ordered_ids": [task.id for task in apply_order(baseline, order)],
        "comparison": compare_orderings(sanitize_permutation(proposed, len(baseline)), order),
        "suggestions": [
            {
                "id": suggestion.task.id,
                "score": suggestion.score,
                "confidence": suggestion.confidence.value,
                "reasons": list(suggestion.reasons),
            }
            for suggestion in analyze_and_prioritize(tasks, events, now).suggestions
        ],
    }
    print(json.dumps(report, indent=2))

    if args.print_prompt:
        print(build_task_ordering_prompt(baseline, context or None))


if __name__ == "__main__":
    main()

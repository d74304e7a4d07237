import json
from datetime import datetime

import pytest

from suggestion_engine.adapters.csv_adapter import parse as parse_csv
from suggestion_engine.adapters.json_adapter import (
    completion_patterns_from_dict,
    dump_completion_patterns,
    load_completion_patterns,
    parse as parse_json,
    parse_tasks,
)
from suggestion_engine.schema import CompletionPatterns, FeedbackAction, Priority, TaskCategory


def test_csv_parse_success(tmp_path):
    path = tmp_path / "events.csv"
    path.write_text(
        "task_id,timestamp,action,original_score,category,hour_of_day\n"
        "a,2025-01-01T09:00:00,started_immediately,42.5,work,9\n"
        "b,2025-01-01T21:30:00,snoozed_tomorrow,,3,\n",
        encoding="utf-8",
    )
    events = parse_csv(str(path))
    assert len(events) == 2
    assert events[0].action is FeedbackAction.STARTED_IMMEDIATELY
    assert events[0].original_score == 42.5
    assert events[0].category is TaskCategory.WORK
    assert events[1].category is TaskCategory.HEALTH
    assert events[1].hour_of_day == 21


def test_csv_parse_invalid_row(tmp_path):
    path = tmp_path / "events.csv"
    path.write_text("task_id,timestamp,action\na,bad,started_immediately\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Row 2"):
        parse_csv(str(path))


def test_csv_parse_unknown_action(tmp_path):
    path = tmp_path / "events.csv"
    path.write_text("task_id,timestamp,action\na,2025-01-01T09:00:00,done\n", encoding="utf-8")
    with pytest.raises(ValueError, match="invalid action"):
        parse_csv(str(path))


def test_csv_parse_hour_out_of_range(tmp_path):
    path = tmp_path / "events.csv"
    path.write_text(
        "task_id,timestamp,action,hour_of_day\na,2025-01-01T09:00:00,viewed_details,24\n", encoding="utf-8"
    )
    with pytest.raises(ValueError):
        parse_csv(str(path))


def test_json_parse_success(tmp_path):
    path = tmp_path / "events.json"
    payload = [
        {"task_id": "a", "timestamp": "2025-01-01T09:00:00", "action": "viewed_details", "category": "learning"},
        {"task_id": "a", "timestamp": "2025-01-01T10:00:00", "action": "skipped_wrong_time", "hour_of_day": 22},
    ]
    path.write_text(json.dumps(payload), encoding="utf-8")
    events = parse_json(str(path))
    assert len(events) == 2
    assert events[0].hour_of_day == 9
    assert events[0].category is TaskCategory.LEARNING
    assert events[1].hour_of_day == 22
    assert events[1].category is TaskCategory.UNCATEGORIZED


def test_json_parse_malformed(tmp_path):
    path = tmp_path / "events.json"
    path.write_text(
        json.dumps([{"task_id": "a", "timestamp": "bad", "action": "started_immediately"}]), encoding="utf-8"
    )
    with pytest.raises(ValueError, match="Item 1"):
        parse_json(str(path))


def test_json_parse_requires_list(tmp_path):
    path = tmp_path / "events.json"
    path.write_text(json.dumps({"events": []}), encoding="utf-8")
    with pytest.raises(ValueError):
        parse_json(str(path))


def test_completion_snapshot_round_trip(tmp_path):
    patterns = CompletionPatterns(
        last_completed_category=TaskCategory.FINANCE,
        last_completed_time=datetime(2025, 1, 5, 18, 30),
        category_time_patterns={"1_9": 6, "bogus": 2},
        category_day_patterns={"1_2": 4},
        average_completion_times={"1": 1800.0},
    )
    path = tmp_path / "patterns.json"
    path.write_text(dump_completion_patterns(patterns), encoding="utf-8")

    loaded = load_completion_patterns(str(path))

    assert loaded == patterns
    assert loaded.category_time_patterns["bogus"] == 2


def test_completion_snapshot_defaults():
    patterns = completion_patterns_from_dict({})

    assert patterns.last_completed_category is None
    assert patterns.last_completed_time is None
    assert dict(patterns.category_time_patterns) == {}


def test_completion_snapshot_requires_object():
    with pytest.raises(ValueError):
        completion_patterns_from_dict([1, 2])


def test_parse_tasks(tmp_path):
    path = tmp_path / "tasks.json"
    payload = [
        {
            "id": "t1",
            "title": "File taxes",
            "created_at": "2025-01-01T08:00:00",
            "due": "2025-01-15T17:00:00",
            "priority": "high",
            "estimated_duration": 3600,
            "category": "finance",
        },
        {"id": "t2", "title": "Stretch", "created_at": "2025-01-02T08:00:00"},
    ]
    path.write_text(json.dumps(payload), encoding="utf-8")

    tasks = parse_tasks(str(path))

    assert tasks[0].priority is Priority.HIGH
    assert tasks[0].due == datetime(2025, 1, 15, 17, 0)
    assert tasks[0].estimated_duration == 3600.0
    assert tasks[0].category is TaskCategory.FINANCE
    assert tasks[1].priority is Priority.NONE
    assert tasks[1].due is None


def test_parse_tasks_missing_title(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"id": "t1", "created_at": "2025-01-01T08:00:00"}]), encoding="utf-8")
    with pytest.raises(ValueError, match="Task 1"):
        parse_tasks(str(path))

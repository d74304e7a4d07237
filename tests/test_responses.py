import pytest

from suggestion_engine.responses import (
    BestTime,
    Confidence,
    TaskAnalysis,
    extract_json,
    normalize_minutes,
    parse_analysis_response,
    parse_duration_response,
    parse_order_response,
    parse_priority_response,
)
from suggestion_engine.schema import Priority, TaskCategory


def test_extract_json_tolerates_prose():
    assert extract_json('Here you go: {"order": [2, 1]} hope it helps') == {"order": [2, 1]}
    assert extract_json('{"a": {"b": 1}}') == {"a": {"b": 1}}
    assert extract_json("no json here") is None
    assert extract_json("") is None
    assert extract_json(None) is None
    assert extract_json("[1, 2, 3]") is None


@pytest.mark.parametrize(
    "value, expected",
    [
        (45, 45),
        (45.5, 46),
        (44.4, 44),
        (1, 5),
        (9000, 480),
        (-3, 5),
        ("45", 30),
        (None, 30),
        (True, 30),
        (float("nan"), 30),
        (float("inf"), 30),
    ],
)
def test_normalize_minutes(value, expected):
    assert normalize_minutes(value) == expected


def test_duration_response():
    estimate = parse_duration_response('{"estimated_minutes": 25, "confidence": "High", "reasoning": "Short call"}')

    assert estimate.estimated_minutes == 25
    assert estimate.confidence is Confidence.HIGH
    assert estimate.reasoning == "Short call"
    assert estimate.estimated_duration == 1500.0


def test_duration_response_fallback():
    estimate = parse_duration_response("I am not sure")

    assert estimate.estimated_minutes == 30
    assert estimate.confidence is Confidence.LOW
    assert estimate.reasoning == "Could not parse response"


def test_priority_response():
    assert parse_priority_response('{"priority": "urgent", "reasoning": "x"}').priority is Priority.URGENT
    assert parse_priority_response('{"priority": "whenever"}').priority is Priority.NONE
    assert parse_priority_response("garbage").priority is Priority.MEDIUM
    assert parse_priority_response('{"reasoning": "missing"}').priority is Priority.MEDIUM


def test_analysis_response():
    reply = """
    {"estimated_minutes": 90, "suggested_priority": "high", "best_time": "Morning",
     "category": "work", "subtasks": ["Outline", 3, "Draft", "Review", "Send"],
     "tips": "Block focus time", "refined_title": "Write Q1 report"}
    """

    analysis = parse_analysis_response(reply)

    assert analysis.estimated_minutes == 90
    assert analysis.suggested_priority is Priority.HIGH
    assert analysis.best_time is BestTime.MORNING
    assert analysis.suggested_category is TaskCategory.WORK
    assert analysis.proposed_new_category is None
    assert analysis.subtasks == ("Outline", "Draft", "Review")
    assert analysis.tips == "Block focus time"
    assert analysis.refined_title == "Write Q1 report"
    assert analysis.suggested_description is None


def test_analysis_proposes_category_only_when_uncategorized():
    proposal = '"proposed_new_category": {"name": "Gardening", "color_hex": "#00ff00"}'

    analysis = parse_analysis_response('{"category": "uncategorized", ' + proposal + "}")
    assert analysis.proposed_new_category.name == "Gardening"
    assert analysis.proposed_new_category.color_hex == "#00ff00"
    assert analysis.proposed_new_category.icon_name == "tag.fill"

    assert parse_analysis_response('{"category": "home", ' + proposal + "}").proposed_new_category is None
    blank = '{"category": "other", "proposed_new_category": {"name": "  "}}'
    assert parse_analysis_response(blank).proposed_new_category is None


def test_analysis_fallback():
    assert parse_analysis_response("sorry") == TaskAnalysis.default()
    assert TaskAnalysis.default().estimated_minutes == 30
    assert TaskAnalysis.default().suggested_priority is Priority.MEDIUM


def test_order_response():
    assert parse_order_response('Sure! {"order": [3, 1, 2], "reasoning": "due first"}') == [3, 1, 2]
    assert parse_order_response('{"order": [2.0, "1", true, null, 3]}') == [2, 3]
    assert parse_order_response('{"order": "1,2,3"}') == []
    assert parse_order_response('{"reasoning": "nothing"}') == []
    assert parse_order_response("not json") == []

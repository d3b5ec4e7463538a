# tests/test_patterns.py
from datetime import datetime

from study_tracker.models import Topic
from study_tracker.patterns import analyze_study_patterns, time_of_day
from conftest import make_bulletin, make_topic


def test_empty_input_gives_zero_pattern(now):
    pattern = analyze_study_patterns([], [], now)
    assert pattern.average_progress_per_day == 0
    assert pattern.study_frequency == 0
    assert pattern.average_session_duration == 0
    assert pattern.consistency_score == 0
    assert pattern.preferred_time_of_day is None


def test_pattern_from_timestamps(now):
    topics = [
        make_topic("t1", done=2, stale=0),
        make_topic("t2", done=1, stale=1),
        make_topic("t3", done=0),
    ]
    bulletins = [make_bulletin("b1", done=3, stale=4)]
    pattern = analyze_study_patterns(topics, bulletins, now)
    # 3 distinct study dates over 4 days, 6 completed cells
    assert pattern.study_frequency == 0.75
    assert pattern.average_progress_per_day == 2
    assert pattern.average_session_duration == 30
    assert pattern.consistency_score == 1.0
    assert pattern.preferred_time_of_day == "morning"


def test_same_day_updates_count_once(now):
    topics = [
        Topic(id="t1", title="A", checks={"x": True}, updated_at=datetime(2025, 3, 1, 9)),
        Topic(id="t2", title="B", checks={"x": True}, updated_at=datetime(2025, 3, 1, 21)),
    ]
    pattern = analyze_study_patterns(topics, [], now)
    # earliest update 2 days 1 hour ago -> 3 days elapsed, 1 study date
    assert pattern.study_frequency == 1 / 3
    assert pattern.average_progress_per_day == 2


def test_no_timestamps(now):
    pattern = analyze_study_patterns([make_topic("t1", done=3)], [], now)
    assert pattern.study_frequency == 0
    assert pattern.average_progress_per_day == 3
    assert pattern.average_session_duration == 45
    assert pattern.preferred_time_of_day is None


def test_session_duration_capped(now):
    bulletins = [make_bulletin("b1", count=20, done=20, stale=0)]
    pattern = analyze_study_patterns([], bulletins, now)
    assert pattern.average_session_duration == 120


def test_time_of_day():
    assert time_of_day(datetime(2025, 1, 1, 8)) == "morning"
    assert time_of_day(datetime(2025, 1, 1, 12)) == "afternoon"
    assert time_of_day(datetime(2025, 1, 1, 18, 30)) == "evening"

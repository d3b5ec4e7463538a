# tests/test_advisor.py
import random
from datetime import timedelta

from study_tracker.advisor import (
    BULLETIN_COMPLETION_MESSAGES, CATEGORY_CHECK_MESSAGES, COMPLETION_MESSAGES,
    bulletin_completion_message, category_check_message, completion_message,
    generate_recommendations, is_bulletin_completed, is_topic_completed,
)
from study_tracker.models import PerformancePrediction, StudyPattern
from conftest import make_topic


def _prediction(now, on_time):
    return PerformancePrediction(
        will_finish_on_time=on_time,
        estimated_completion_date=now,
        completion_percentage=50,
        days_needed=30,
        recommendation="Try to complete about 4 items a day.",
        confidence=0.3,
    )


def test_all_rules_fire_in_priority_order(categories, now):
    topics = [make_topic(f"t{i}") for i in range(11)]
    topics.append(make_topic("r1", done=1, stale=20, review_count=1))
    pattern = StudyPattern(
        average_progress_per_day=1, study_frequency=0.1,
        average_session_duration=15, consistency_score=0.2,
    )
    cards = generate_recommendations(
        topics, [], categories, pattern, _prediction(now, False), now + timedelta(days=10), now,
    )
    assert [c.priority for c in cards] == [100, 90, 70, 60, 40]
    assert cards[0].message == "Try to complete about 4 items a day."
    assert "1 day a week" in cards[1].message
    assert "11 items not started" in cards[2].message
    assert "1 topics" in cards[3].message
    assert cards[4].kind == "tip"


def test_consistent_student_gets_praise_only(categories, now):
    pattern = StudyPattern(
        average_progress_per_day=4, study_frequency=0.6,
        average_session_duration=60, consistency_score=0.8,
    )
    cards = generate_recommendations(
        [make_topic("t1", done=2, stale=1)], [], categories, pattern, _prediction(now, True), now=now,
    )
    assert len(cards) == 1
    assert cards[0].kind == "success"
    assert "4 days a week" in cards[0].message
    assert cards[0].actionable is False


def test_pace_warning_needs_exam_date(categories, now):
    pattern = StudyPattern(average_session_duration=60, consistency_score=0.5)
    cards = generate_recommendations([], [], categories, pattern, _prediction(now, False), now=now)
    assert cards == []


def test_random_messages_come_from_their_lists():
    rng = random.Random(7)
    assert completion_message(rng) in COMPLETION_MESSAGES
    assert bulletin_completion_message(rng) in BULLETIN_COMPLETION_MESSAGES
    assert category_check_message() in CATEGORY_CHECK_MESSAGES


def test_completion_checks():
    assert is_topic_completed({"a": True, "b": True}, 2)
    assert not is_topic_completed({"a": True, "b": False}, 2)
    assert is_bulletin_completed({1: True, 2: True, 3: True}, 3)
    assert not is_bulletin_completed({1: True}, 3)

"""Urgency scoring and priority tiers for topics and bulletins."""
import math
from datetime import datetime
from typing import Optional

from study_tracker.models import HIGH, LOW, MEDIUM, URGENT, Bulletin, Topic
from study_tracker.progress import bulletin_progress, topic_progress

SECONDS_PER_DAY = 86400
NEVER_UPDATED_DAYS = 999


def days_without_update(updated_at: Optional[datetime], now: datetime) -> int:
    """Whole days since the last update; never-updated items are 999 days stale."""
    if updated_at is None:
        return NEVER_UPDATED_DAYS
    return math.floor((now - updated_at).total_seconds() / SECONDS_PER_DAY)


def days_until(exam_date: Optional[datetime], now: datetime) -> Optional[int]:
    """Whole days until the exam, floored. Negative once the exam has passed."""
    if exam_date is None:
        return None
    return math.floor((exam_date - now).total_seconds() / SECONDS_PER_DAY)


def _score(
    progress: float,
    stale: int,
    days_until_exam: Optional[int],
    base: tuple,
    staleness: tuple,
    exam: tuple,
    penalty: int,
) -> int:
    score = 0

    if progress == 0:
        score += base[0]
    elif progress < 0.3:
        score += base[1]
    elif progress < 0.7:
        score += base[2]
    elif progress < 1:
        score += base[3]

    if stale > 30:
        score += staleness[0]
    elif stale > 14:
        score += staleness[1]
    elif stale > 7:
        score += staleness[2]
    elif stale > 3:
        score += staleness[3]

    if days_until_exam is not None:
        if days_until_exam < 14 and progress < 0.8:
            score += exam[0]
        elif days_until_exam < 30 and progress < 0.5:
            score += exam[1]
        elif days_until_exam < 60 and progress < 0.3:
            score += exam[2]
        elif days_until_exam < 90:
            score += exam[3]

    # Almost-done items far from the exam give little return
    if progress > 0.8 and (days_until_exam is None or days_until_exam > 60):
        score -= penalty

    return score


def topic_score(
    topic: Topic,
    category_count: int,
    days_until_exam: Optional[int],
    now: datetime,
) -> int:
    progress = topic_progress(topic, category_count)
    stale = days_without_update(topic.updated_at, now)
    score = _score(
        progress, stale, days_until_exam,
        base=(80, 60, 40, 20),
        staleness=(40, 25, 15, 5),
        exam=(60, 45, 25, 10),
        penalty=20,
    )
    if topic.review_count > 0 and stale > 21:
        score += 30
    elif topic.review_count > 0 and stale > 14:
        score += 15
    return max(0, score)


def bulletin_score(bulletin: Bulletin, days_until_exam: Optional[int], now: datetime) -> int:
    progress = bulletin_progress(bulletin)
    stale = days_without_update(bulletin.updated_at, now)
    score = _score(
        progress, stale, days_until_exam,
        base=(70, 55, 35, 15),
        staleness=(35, 20, 10, 5),
        exam=(50, 35, 20, 8),
        penalty=15,
    )
    return max(0, score)


def priority_tier(score: float) -> str:
    if score >= 180:
        return URGENT
    elif score >= 120:
        return HIGH
    elif score >= 70:
        return MEDIUM
    return LOW


def priority_reason(
    progress: float,
    stale: int,
    days_until_exam: Optional[int] = None,
    review_count: int = 0,
) -> str:
    reasons = []

    if progress == 0:
        reasons.append("Not started")
    elif progress < 0.3:
        reasons.append("Very low progress")
    elif progress < 0.7:
        reasons.append("Medium progress")

    if stale > 14:
        reasons.append(f"{stale} days without review")
    elif stale > 7:
        reasons.append(f"{stale} days without update")

    if days_until_exam is not None and days_until_exam < 30 and progress < 0.8:
        reasons.append("Exam approaching")

    if review_count > 0 and stale > 14:
        reasons.append("Needs review")

    return " • ".join(reasons) if reasons else "Continue progress"

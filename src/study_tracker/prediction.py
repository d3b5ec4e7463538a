"""Completion forecast against the exam date."""
import logging
import math
from datetime import datetime, timedelta
from typing import Optional

from study_tracker.models import Bulletin, Category, PerformancePrediction, StudyPattern, Topic
from study_tracker.progress import bulletin_progress, topic_progress
from study_tracker.scoring import SECONDS_PER_DAY

logger = logging.getLogger(__name__)

DEFAULT_CELLS_PER_DAY = 2
MIN_CELLS_PER_DAY = 0.5
FALLBACK_DAYS = 90


def remaining_work(
    topics: list[Topic], bulletins: list[Bulletin], categories: list[Category]
) -> float:
    """Unfinished cells: unchecked categories plus open exercises."""
    count = len(categories)
    topic_work = sum((1 - topic_progress(t, count)) * count for t in topics)
    bulletin_work = sum((1 - bulletin_progress(b)) * b.exercise_count for b in bulletins)
    return topic_work + bulletin_work


def predict_performance(
    topics: list[Topic],
    bulletins: list[Bulletin],
    categories: list[Category],
    exam_date: Optional[datetime] = None,
    pattern: Optional[StudyPattern] = None,
    now: Optional[datetime] = None,
) -> PerformancePrediction:
    now = now or datetime.now()

    if exam_date is None:
        return PerformancePrediction(
            will_finish_on_time=False,
            estimated_completion_date=now + timedelta(days=FALLBACK_DAYS),
            completion_percentage=0,
            days_needed=FALLBACK_DAYS,
            recommendation="Set an exam date to get an accurate prediction.",
            confidence=0,
        )

    days_left = max(0, math.ceil((exam_date - now).total_seconds() / SECONDS_PER_DAY))
    work = remaining_work(topics, bulletins, categories)

    if pattern is not None:
        rate = pattern.average_progress_per_day * pattern.consistency_score
        confidence = min(1.0, pattern.study_frequency * pattern.consistency_score * 1.5)
    else:
        rate = DEFAULT_CELLS_PER_DAY
        confidence = 0.3

    days_needed = math.ceil(work / max(MIN_CELLS_PER_DAY, rate))
    on_time = days_needed <= days_left
    # Time available over time needed, capped at 100
    percentage = min(100, days_left / max(1, days_needed) * 100)

    if on_time and percentage > 150:
        recommendation = (
            "You're doing great! 🎉 Your pace is excellent. You can ease off a little "
            "or dig deeper into the hardest topics."
        )
    elif on_time:
        recommendation = (
            "Perfect! 👍 You keep a good study pace. Keep it up and you'll reach the exam prepared."
        )
    else:
        per_day = math.ceil(work / max(1, days_left))
        recommendation = (
            f"💪 You need to speed up a bit. Try to complete about {per_day} items a day "
            "to make it in time. You can do it!"
        )

    logger.debug(
        "prediction: %.1f cells left, %d days needed, %d days left", work, days_needed, days_left
    )
    return PerformancePrediction(
        will_finish_on_time=on_time,
        estimated_completion_date=now + timedelta(days=days_needed),
        completion_percentage=percentage,
        days_needed=days_needed,
        recommendation=recommendation,
        confidence=confidence,
    )

"""Rule-based study advice and motivational messages."""
import logging
import random
from datetime import datetime, timedelta
from typing import Optional

from study_tracker.models import (
    Bulletin, Category, PerformancePrediction, Recommendation, StudyPattern, Topic,
)
from study_tracker.progress import completed_cells

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 5

COMPLETION_MESSAGES = [
    "Amazing! 🎉 Another topic done. Keep it up!",
    "Congratulations! 🌟 One more topic conquered.",
    "Great! 💪 Every finished topic brings you closer to your goal.",
    "Fantastic! 🚀 Your effort is paying off.",
    "Bravo! 👏 You showed your dedication once again.",
    "Excellent work! ⭐ You are on a very good path.",
    "You made it! 🎯 One step closer to success.",
    "Impressive! 💫 Your consistency is admirable.",
    "Well done! 🏆 Every topic counts, and this one is yours.",
    "Perfect! ✨ You keep moving forward.",
]

BULLETIN_COMPLETION_MESSAGES = [
    "Bulletin completed! 📋 Excellent practice.",
    "Every exercise done! ✏️ You are incredible.",
    "Bulletin cleared! 🎯 Your practice is getting results.",
    "Exercises completed! 💪 You keep improving.",
    "Bulletin finished! 🌟 Perfect practice.",
]

CATEGORY_CHECK_MESSAGES = [
    "Nice! ✓ One more category checked.",
    "Great! ✓ You keep moving.",
    "Perfect! ✓ Every check counts.",
    "Excellent! ✓ You are on the right track.",
    "Keep it up! ✓ Steady progress.",
]


def completion_message(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(COMPLETION_MESSAGES)


def bulletin_completion_message(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(BULLETIN_COMPLETION_MESSAGES)


def category_check_message(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(CATEGORY_CHECK_MESSAGES)


def is_topic_completed(checks: dict[str, bool], total_categories: int) -> bool:
    return sum(1 for done in checks.values() if done) == total_categories


def is_bulletin_completed(completed_exercises: dict[int, bool], total_exercises: int) -> bool:
    return sum(1 for done in completed_exercises.values() if done) == total_exercises


def generate_recommendations(
    topics: list[Topic],
    bulletins: list[Bulletin],
    categories: list[Category],
    pattern: StudyPattern,
    prediction: PerformancePrediction,
    exam_date: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> list[Recommendation]:
    """Up to five advice cards, most important first."""
    now = now or datetime.now()
    cards = []

    days_per_week = round(pattern.study_frequency * 7)
    if pattern.consistency_score < 0.3:
        day_word = "day" if days_per_week == 1 else "days"
        cards.append(Recommendation(
            kind="warning",
            title="💡 Build a study routine",
            message=(
                f"You study about {days_per_week} {day_word} a week. Consistency is your best "
                "ally: try to study on more days, even for 30 minutes."
            ),
            priority=90,
            actionable=True,
            action="Create a daily routine",
        ))
    elif pattern.consistency_score > 0.7:
        cards.append(Recommendation(
            kind="success",
            title="🌟 You are very consistent!",
            message=(
                f"You study around {days_per_week} days a week. Regularity is one of the "
                "secrets of success. Keep it up!"
            ),
            priority=20,
        ))

    if exam_date is not None and not prediction.will_finish_on_time:
        cards.append(Recommendation(
            kind="warning",
            title="⚡ Adjust your study pace",
            message=prediction.recommendation,
            priority=100,
            actionable=True,
            action="See adjusted plan",
        ))

    not_started = [i for i in [*topics, *bulletins] if completed_cells(i) == 0]
    if len(not_started) > 10:
        cards.append(Recommendation(
            kind="info",
            title="📚 Start with what matters",
            message=(
                f"You have {len(not_started)} items not started. Take it step by step, "
                "beginning with the highest priority ones."
            ),
            priority=70,
            actionable=True,
            action="See priority topics",
        ))

    stale_limit = now - timedelta(days=14)
    needs_review = [
        t for t in topics
        if t.review_count > 0 and t.updated_at is not None and t.updated_at < stale_limit
    ]
    if needs_review:
        cards.append(Recommendation(
            kind="tip",
            title="🔄 Time to review",
            message=(
                f"You have {len(needs_review)} topics you haven't revisited in a while. "
                "Reviewing matters as much as new material."
            ),
            priority=60,
            actionable=True,
            action="See topics to review",
        ))

    if pattern.average_session_duration < 30:
        cards.append(Recommendation(
            kind="tip",
            title="⏱️ Lengthen your sessions",
            message=(
                f"Your sessions last about {round(pattern.average_session_duration)} minutes. "
                "Aim for 45-60 minutes to make the most of your focus."
            ),
            priority=40,
        ))

    cards.sort(key=lambda c: c.priority, reverse=True)
    logger.debug("advisor: %d cards, keeping %d", len(cards), min(len(cards), MAX_RECOMMENDATIONS))
    return cards[:MAX_RECOMMENDATIONS]

"""Priority-bucketed study plan and its recommendation text."""
import logging
from datetime import datetime
from typing import Optional

from study_tracker.models import (
    BULLETIN, TIERS, TOPIC, Bulletin, Category, PlanStats, StudyItem, StudyPlan, Topic,
)
from study_tracker.progress import bulletin_progress, topic_progress
from study_tracker.scoring import (
    bulletin_score, days_until, days_without_update, priority_reason, priority_tier, topic_score,
)

logger = logging.getLogger(__name__)


def score_items(
    topics: list[Topic],
    bulletins: list[Bulletin],
    categories: list[Category],
    days_until_exam: Optional[int],
    now: datetime,
) -> list[StudyItem]:
    """Score every topic then every bulletin, in input order."""
    items = []
    for topic in topics:
        progress = topic_progress(topic, len(categories))
        stale = days_without_update(topic.updated_at, now)
        score = topic_score(topic, len(categories), days_until_exam, now)
        items.append(StudyItem(
            id=topic.id,
            type=TOPIC,
            title=topic.title,
            priority=priority_tier(score),
            progress=progress,
            score=score,
            reason=priority_reason(progress, stale, days_until_exam, topic.review_count),
            days_without_update=stale,
        ))
    for bulletin in bulletins:
        progress = bulletin_progress(bulletin)
        stale = days_without_update(bulletin.updated_at, now)
        score = bulletin_score(bulletin, days_until_exam, now)
        items.append(StudyItem(
            id=bulletin.id,
            type=BULLETIN,
            title=bulletin.title,
            priority=priority_tier(score),
            progress=progress,
            score=score,
            reason=priority_reason(progress, stale, days_until_exam),
            days_without_update=stale,
        ))
    return items


def generate_study_plan(
    topics: list[Topic],
    bulletins: list[Bulletin],
    categories: list[Category],
    exam_date: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> StudyPlan:
    now = now or datetime.now()
    days_left = days_until(exam_date, now)

    # sorted() is stable: equal scores keep insertion order
    items = sorted(
        score_items(topics, bulletins, categories, days_left, now),
        key=lambda item: item.score,
        reverse=True,
    )

    plan = StudyPlan()
    for item in items:
        plan.bucket(item.priority).append(item)

    total = len(items)
    plan.stats = PlanStats(
        total_items=total,
        avg_progress=sum(i.progress for i in items) / total if total else 0.0,
        items_not_started=sum(1 for i in items if i.progress == 0),
        items_in_progress=sum(1 for i in items if 0 < i.progress < 1),
        items_completed=sum(1 for i in items if i.progress == 1),
        days_until_exam=days_left,
    )
    logger.debug(
        "study plan: %d items, %s",
        total,
        ", ".join(f"{tier}={len(plan.bucket(tier))}" for tier in TIERS),
    )
    return plan


def get_study_recommendation(plan: StudyPlan) -> str:
    stats = plan.stats
    paragraphs = []

    if stats.days_until_exam is not None:
        days = stats.days_until_exam
        if days < 30:
            paragraphs.append(f"⚠️ {days} days left until the exam. Focus on the urgent topics.")
        elif days < 60:
            paragraphs.append(f"📅 {days} days left. A good moment to step up your study.")
        else:
            paragraphs.append(f"📅 You have {days} days. Keep a steady pace.")

    if plan.urgent:
        paragraphs.append(
            f"🔴 You have {len(plan.urgent)} urgent item(s) that need attention right away."
        )

    if stats.items_not_started > 5:
        paragraphs.append(
            f"📚 You have {stats.items_not_started} items not started yet. Consider beginning some."
        )

    percent = round(stats.avg_progress * 100)
    if percent < 30:
        paragraphs.append(f"💪 Your average progress is {percent}%. Keep going!")
    elif percent < 70:
        paragraphs.append(f"👍 Average progress: {percent}%. You are on the right track.")
    else:
        paragraphs.append(f"🎉 Excellent! Average progress: {percent}%.")

    return "\n\n".join(paragraphs)

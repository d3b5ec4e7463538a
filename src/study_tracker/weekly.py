"""Week-by-week study calendar.

Unfinished topics and bulletins are scored, interleaved (two topics, then a
bulletin that looks related to them, then a spaced-review slot when the plan
is long enough) and dealt out into weeks starting today. With an exam date,
the last weeks before the exam are kept free for a final review of the most
advanced material.
"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from study_tracker.config import FALLBACK_WEEKS
from study_tracker.models import BULLETIN, TOPIC, Bulletin, Category, Topic, WeekItem, WeeklyPlan
from study_tracker.progress import bulletin_progress, topic_progress
from study_tracker.scoring import (
    SECONDS_PER_DAY, bulletin_score, days_until, days_without_update, topic_score,
)

logger = logging.getLogger(__name__)

MIN_ITEMS_PER_WEEK = 3
MIN_WEEKS_FOR_REVIEW_SLOTS = 6
RELATED_LOOKAHEAD = 3
REVIEW_TOPICS_PER_WEEK = 4
REVIEW_BULLETINS_PER_WEEK = 2
FINAL_REVIEW = "Final review"
SPACED_REVIEW = "Spaced review"


@dataclass
class _WorkItem:
    id: str
    type: str
    title: str
    progress: float
    score: int
    is_review: bool = False


def titles_related(topic_title: str, bulletin_title: str) -> bool:
    """True when a topic word longer than 4 characters and a bulletin word contain one another."""
    bulletin_words = bulletin_title.lower().split()
    return any(
        len(word) > 4 and any(bw in word or word in bw for bw in bulletin_words)
        for word in topic_title.lower().split()
    )


def reserved_review_weeks(total_weeks: int) -> int:
    if total_weeks >= 12:
        return 3
    elif total_weeks >= 8:
        return 2
    elif total_weeks >= 4:
        return 1
    return 0


def work_reason(progress: float) -> str:
    if progress == 0:
        return "Not started - high priority"
    elif progress < 0.3:
        return "Low progress - needs attention"
    elif progress < 0.7:
        return "In progress - keep going"
    return "Almost done - finish it"


def _interleave(
    topic_backlog: list[_WorkItem],
    bulletin_backlog: list[_WorkItem],
    review_pool: list[_WorkItem],
    related: Callable[[str, str], bool],
) -> list[_WorkItem]:
    backlog = []
    pending = list(bulletin_backlog)
    reviews = iter(review_pool)
    next_topic = 0

    while next_topic < len(topic_backlog) or pending:
        added = topic_backlog[next_topic:next_topic + 2]
        next_topic += len(added)
        backlog.extend(added)

        if pending:
            pick = 0
            for idx, candidate in enumerate(pending[:RELATED_LOOKAHEAD]):
                if any(related(t.title, candidate.title) for t in added):
                    pick = idx
                    break
            backlog.append(pending.pop(pick))

        if review_pool:
            review = next(reviews, None)
            if review is not None:
                backlog.append(review)

    return backlog


def _week_item(work: _WorkItem) -> WeekItem:
    return WeekItem(
        id=work.id,
        type=work.type,
        title=work.title,
        priority=work.score,
        reason=SPACED_REVIEW if work.is_review else work_reason(work.progress),
        progress=work.progress,
        is_review=work.is_review,
    )


def _in_week_order(item: WeekItem) -> tuple:
    return (item.is_review, item.type != TOPIC, item.title.lower())


def generate_weekly_plan(
    topics: list[Topic],
    bulletins: list[Bulletin],
    categories: list[Category],
    exam_date: Optional[datetime] = None,
    weeks_to_generate: int = FALLBACK_WEEKS,
    now: Optional[datetime] = None,
    related: Callable[[str, str], bool] = titles_related,
) -> list[WeeklyPlan]:
    now = now or datetime.now()
    count = len(categories)

    weeks_available = weeks_to_generate
    weeks_for_review = 0
    if exam_date is not None:
        days_left = math.ceil((exam_date - now).total_seconds() / SECONDS_PER_DAY)
        total_weeks = max(1, math.ceil(days_left / 7))
        weeks_for_review = reserved_review_weeks(total_weeks)
        weeks_available = max(1, total_weeks - weeks_for_review)
    if weeks_available < 1:
        logger.debug("weekly plan: no weeks requested")
        return []

    score_days = days_until(exam_date, now)
    topic_backlog = []
    for topic in topics:
        progress = topic_progress(topic, count)
        if progress < 1:
            topic_backlog.append(_WorkItem(
                topic.id, TOPIC, topic.title, progress,
                topic_score(topic, count, score_days, now),
            ))
    bulletin_backlog = []
    for bulletin in bulletins:
        progress = bulletin_progress(bulletin)
        if progress < 1:
            bulletin_backlog.append(_WorkItem(
                bulletin.id, BULLETIN, bulletin.title, progress,
                bulletin_score(bulletin, score_days, now),
            ))
    topic_backlog.sort(key=lambda w: w.score, reverse=True)
    bulletin_backlog.sort(key=lambda w: w.score, reverse=True)

    has_time_for_reviews = weeks_available >= MIN_WEEKS_FOR_REVIEW_SLOTS
    review_pool = []
    if has_time_for_reviews:
        reviewable = [t for t in topics if 0.5 <= topic_progress(t, count) < 1]
        reviewable.sort(key=lambda t: days_without_update(t.updated_at, now), reverse=True)
        review_pool = [
            _WorkItem(t.id, TOPIC, t.title, topic_progress(t, count), 0, is_review=True)
            for t in reviewable
        ]

    backlog = _interleave(topic_backlog, bulletin_backlog, review_pool, related)

    # Review slots are part of the backlog size, so every week's share fits
    items_per_week = max(MIN_ITEMS_PER_WEEK, math.ceil(len(backlog) / weeks_available))
    if has_time_for_reviews:
        items_per_week += 1

    plans = []
    for i in range(weeks_available):
        if not backlog:
            break
        start = now + timedelta(weeks=i)
        end = start + timedelta(days=6)
        is_last = i == weeks_available - 1 or len(backlog) <= items_per_week
        if is_last and exam_date is not None:
            end = exam_date

        taken, backlog = backlog[:items_per_week], backlog[items_per_week:]
        items = sorted((_week_item(w) for w in taken), key=_in_week_order)
        if items:
            plans.append(WeeklyPlan(len(plans) + 1, start, end, items))

    if weeks_for_review > 0 and exam_date is not None:
        plans.extend(_final_review_weeks(
            topics, bulletins, count, exam_date, weeks_available, weeks_for_review,
            first_number=len(plans) + 1, now=now,
        ))

    logger.debug(
        "weekly plan: %d weeks (%d available, %d for review), %d items per week",
        len(plans), weeks_available, weeks_for_review, items_per_week,
    )
    return plans


def _final_review_weeks(
    topics: list[Topic],
    bulletins: list[Bulletin],
    count: int,
    exam_date: datetime,
    weeks_available: int,
    weeks_for_review: int,
    first_number: int,
    now: datetime,
) -> list[WeeklyPlan]:
    def stalest_first(item) -> int:
        return days_without_update(item.updated_at, now)

    review_topics = sorted(
        (t for t in topics if topic_progress(t, count) >= 0.7), key=stalest_first, reverse=True,
    )[:weeks_for_review * REVIEW_TOPICS_PER_WEEK]
    review_bulletins = sorted(
        (b for b in bulletins if bulletin_progress(b) >= 0.7), key=stalest_first, reverse=True,
    )[:weeks_for_review * REVIEW_BULLETINS_PER_WEEK]

    weeks = []
    for i in range(weeks_for_review):
        start = now + timedelta(weeks=weeks_available + i)
        end = exam_date if i == weeks_for_review - 1 else start + timedelta(days=6)

        t_slice = review_topics[i * REVIEW_TOPICS_PER_WEEK:(i + 1) * REVIEW_TOPICS_PER_WEEK]
        b_slice = review_bulletins[i * REVIEW_BULLETINS_PER_WEEK:(i + 1) * REVIEW_BULLETINS_PER_WEEK]
        items = [
            WeekItem(t.id, TOPIC, t.title, 0, FINAL_REVIEW, topic_progress(t, count), is_review=True)
            for t in t_slice
        ] + [
            WeekItem(b.id, BULLETIN, b.title, 0, FINAL_REVIEW, bulletin_progress(b), is_review=True)
            for b in b_slice
        ]
        if items:
            weeks.append(WeeklyPlan(first_number + len(weeks), start, end, items))
    return weeks

"""Study habits derived from item update timestamps."""
import logging
import math
from collections import Counter
from datetime import datetime
from typing import Optional

from study_tracker.models import Bulletin, StudyPattern, Topic
from study_tracker.progress import completed_cells
from study_tracker.scoring import SECONDS_PER_DAY

logger = logging.getLogger(__name__)

MINUTES_PER_CELL = 15
MAX_SESSION_MINUTES = 120


def time_of_day(moment: datetime) -> str:
    if moment.hour < 12:
        return "morning"
    elif moment.hour < 18:
        return "afternoon"
    return "evening"


def analyze_study_patterns(
    topics: list[Topic],
    bulletins: list[Bulletin],
    now: Optional[datetime] = None,
) -> StudyPattern:
    items = [*topics, *bulletins]
    if not items:
        return StudyPattern()
    now = now or datetime.now()

    stamps = [i.updated_at for i in items if i.updated_at is not None]
    studied_days = {s.date() for s in stamps}

    # Items without a timestamp count as updated now
    earliest = min(i.updated_at or now for i in items)
    total_days = max(1, math.ceil((now - earliest).total_seconds() / SECONDS_PER_DAY))

    study_frequency = len(studied_days) / total_days
    cells = sum(completed_cells(i) for i in items)
    per_day = cells / max(1, len(studied_days))

    preferred = None
    if stamps:
        preferred = Counter(time_of_day(s) for s in stamps).most_common(1)[0][0]

    pattern = StudyPattern(
        average_progress_per_day=per_day,
        study_frequency=study_frequency,
        average_session_duration=min(MAX_SESSION_MINUTES, per_day * MINUTES_PER_CELL),
        consistency_score=min(1.0, study_frequency * 2),
        preferred_time_of_day=preferred,
    )
    logger.debug(
        "study pattern over %d days: %d studied, %.2f cells/day",
        total_days, len(studied_days), per_day,
    )
    return pattern

from datetime import datetime, timedelta

import pytest

from study_tracker.models import Bulletin, Category, Topic

NOW = datetime(2025, 3, 3, 10, 0, 0)


@pytest.fixture
def now():
    """A frozen 'now' so staleness and exam countdowns are deterministic."""
    return NOW


@pytest.fixture
def categories():
    return [
        Category(id="summarized", name="Summarized"),
        Category(id="studied", name="Studied"),
        Category(id="reviewed", name="Reviewed"),
    ]


def days_ago(days: float) -> datetime:
    return NOW - timedelta(days=days)


def make_topic(id, title=None, done=0, stale=None, review_count=0, folder_id=None):
    """Topic with the first ``done`` default categories checked."""
    keys = ["summarized", "studied", "reviewed"]
    return Topic(
        id=id,
        title=title or f"Topic {id}",
        checks={k: i < done for i, k in enumerate(keys)},
        updated_at=days_ago(stale) if stale is not None else None,
        review_count=review_count,
        folder_id=folder_id,
    )


def make_bulletin(id, title=None, count=10, done=0, stale=None, folder_id=None):
    return Bulletin(
        id=id,
        title=title or f"Bulletin {id}",
        exercise_count=count,
        completed_exercises={n: True for n in range(1, done + 1)},
        updated_at=days_ago(stale) if stale is not None else None,
        folder_id=folder_id,
    )

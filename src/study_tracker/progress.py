"""Completion ratios for topics, bulletins, folders and the whole corpus.

Every ratio is in [0, 1] and falls back to 0 when its denominator is empty.
"""
from typing import Optional

from study_tracker.models import Bulletin, Category, Topic


def _checked(topic: Topic) -> int:
    return sum(1 for done in topic.checks.values() if done)


def _exercises_done(bulletin: Bulletin) -> int:
    return sum(1 for done in bulletin.completed_exercises.values() if done)


def completed_cells(item: Topic | Bulletin) -> int:
    """Checked categories for a topic, completed exercises for a bulletin."""
    if isinstance(item, Bulletin):
        return _exercises_done(item)
    return _checked(item)


def topic_progress(topic: Topic, total_category_count: int) -> float:
    """Share of the current categories checked on a topic.

    The denominator is the current category count, so a category added after
    the topic was created counts as incomplete. Checks for categories outside
    that count (folder-local ones) cannot push the ratio past 1.
    """
    if total_category_count <= 0:
        return 0.0
    return min(1.0, _checked(topic) / total_category_count)


def bulletin_progress(bulletin: Bulletin) -> float:
    if bulletin.exercise_count <= 0:
        return 0.0
    return min(1.0, _exercises_done(bulletin) / bulletin.exercise_count)


def category_progress(topics: list[Topic], category_id: str) -> float:
    """Share of topics with the given category checked."""
    if not topics:
        return 0.0
    done = sum(1 for t in topics if t.checks.get(category_id, False))
    return done / len(topics)


def global_progress(topics: list[Topic], categories: list[Category]) -> float:
    total = len(topics) * len(categories)
    if total == 0:
        return 0.0
    done = sum(_checked(t) for t in topics)
    return min(1.0, done / total)


def bulletins_only_progress(bulletins: list[Bulletin]) -> float:
    total = sum(max(0, b.exercise_count) for b in bulletins)
    if total == 0:
        return 0.0
    done = sum(_exercises_done(b) for b in bulletins)
    return min(1.0, done / total)


def global_progress_with_bulletins(
    topics: list[Topic], categories: list[Category], bulletins: list[Bulletin]
) -> float:
    """Topic cells and bulletin exercises pooled into one ratio."""
    totals = _totals(topics, categories, bulletins)
    if totals["total"] == 0:
        return 0.0
    return min(1.0, totals["done"] / totals["total"])


def _in_folder(items, folder_id: Optional[str]) -> list:
    return [i for i in items if i.folder_id == folder_id]


def _totals(
    topics: list[Topic], categories: list[Category], bulletins: Optional[list[Bulletin]] = None
) -> dict:
    done = sum(_checked(t) for t in topics)
    total = len(topics) * len(categories)
    for b in bulletins or []:
        done += _exercises_done(b)
        total += max(0, b.exercise_count)
    return {"done": done, "total": total}


def folder_totals(
    topics: list[Topic],
    categories: list[Category],
    folder_id: Optional[str] = None,
    bulletins: Optional[list[Bulletin]] = None,
) -> dict:
    """Raw done/total counts for a folder (None selects unfiled items)."""
    folder_bulletins = _in_folder(bulletins, folder_id) if bulletins is not None else None
    return _totals(_in_folder(topics, folder_id), categories, folder_bulletins)


def folder_progress(
    topics: list[Topic], categories: list[Category], folder_id: Optional[str] = None
) -> float:
    return global_progress(_in_folder(topics, folder_id), categories)


def folder_progress_with_bulletins(
    topics: list[Topic],
    categories: list[Category],
    bulletins: list[Bulletin],
    folder_id: Optional[str] = None,
) -> float:
    return global_progress_with_bulletins(
        _in_folder(topics, folder_id), categories, _in_folder(bulletins, folder_id)
    )

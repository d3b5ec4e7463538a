"""Tracker state and the record updates the planner relies on.

Records are never mutated in place: every update returns a new record with
``updated_at`` stamped, which is what drives staleness scoring.
"""
import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from study_tracker.config import DEFAULT_CATEGORIES, REVIEWED_CATEGORY_ID
from study_tracker.models import Bulletin, Category, Folder, Topic
from study_tracker.progress import folder_progress_with_bulletins


def make_category_id(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


def make_folder_category_id(folder_id: str, name: str) -> str:
    return f"fcat_{folder_id}_{make_category_id(name)}"


def default_categories() -> list[Category]:
    return [Category(id=cid, name=name) for cid, name in DEFAULT_CATEGORIES]


def effective_categories(
    globals_: list[Category],
    locals_: Optional[list[Category]] = None,
    order: Optional[list[str]] = None,
    hidden: Optional[list[str]] = None,
) -> list[Category]:
    """Categories shown in a folder: visible globals plus the folder's own.

    Ids listed in ``order`` come first, in that order; the rest keep their
    natural order after them.
    """
    hidden = set(hidden or [])
    present = {c.id: c for c in globals_ if c.id not in hidden}
    for c in locals_ or []:
        present[c.id] = c
    ordered = []
    for cid in order or []:
        if cid in present:
            ordered.append(present.pop(cid))
    return ordered + list(present.values())


def toggle_check(
    topic: Topic,
    category_id: str,
    now: Optional[datetime] = None,
    reviewed_category_id: str = REVIEWED_CATEGORY_ID,
) -> Topic:
    checked = not topic.checks.get(category_id, False)
    review_count = topic.review_count
    if category_id == reviewed_category_id:
        review_count = max(1, review_count) if checked else 0
    return replace(
        topic,
        checks={**topic.checks, category_id: checked},
        review_count=review_count,
        updated_at=now or datetime.now(),
    )


def increment_review(topic: Topic, now: Optional[datetime] = None) -> Topic:
    return replace(topic, review_count=topic.review_count + 1, updated_at=now or datetime.now())


def decrement_review(topic: Topic, now: Optional[datetime] = None) -> Topic:
    return replace(
        topic, review_count=max(0, topic.review_count - 1), updated_at=now or datetime.now()
    )


def rename_topic(topic: Topic, title: str, now: Optional[datetime] = None) -> Topic:
    return replace(topic, title=title.strip(), updated_at=now or datetime.now())


def set_topic_note(topic: Topic, note: str, now: Optional[datetime] = None) -> Topic:
    return replace(topic, note=note, updated_at=now or datetime.now())


def toggle_exercise(bulletin: Bulletin, number: int, now: Optional[datetime] = None) -> Bulletin:
    if not 1 <= number <= bulletin.exercise_count:
        raise ValueError(
            f"exercise {number} out of range 1..{bulletin.exercise_count} for {bulletin.id}"
        )
    done = not bulletin.completed_exercises.get(number, False)
    return replace(
        bulletin,
        completed_exercises={**bulletin.completed_exercises, number: done},
        updated_at=now or datetime.now(),
    )


@dataclass
class TrackerState:
    categories: list[Category] = field(default_factory=default_categories)
    topics: list[Topic] = field(default_factory=list)
    bulletins: list[Bulletin] = field(default_factory=list)
    folders: list[Folder] = field(default_factory=list)
    folder_categories: dict[str, list[Category]] = field(default_factory=dict)
    folder_category_order: dict[str, list[str]] = field(default_factory=dict)
    folder_hidden_globals: dict[str, list[str]] = field(default_factory=dict)
    exam_date: Optional[datetime] = None

    def folder_categories_for(self, folder_id: Optional[str]) -> list[Category]:
        if folder_id is None:
            return list(self.categories)
        return effective_categories(
            self.categories,
            self.folder_categories.get(folder_id),
            self.folder_category_order.get(folder_id),
            self.folder_hidden_globals.get(folder_id),
        )

    def folder_view_progress(self, folder_id: Optional[str]) -> float:
        """Folder progress measured against the folder's effective categories."""
        return folder_progress_with_bulletins(
            self.topics, self.folder_categories_for(folder_id), self.bulletins, folder_id
        )

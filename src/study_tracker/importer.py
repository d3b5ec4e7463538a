"""Load a tracker snapshot exported by the store (JSON or YAML)."""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import yaml

from study_tracker.models import Bulletin, Category, Folder, Topic
from study_tracker.tracker import TrackerState, default_categories

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """The snapshot file could not be read as tracker state."""


def read_file_content(file_path: str) -> dict:
    path = Path(file_path)
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotError(f"cannot read {file_path}: {e}") from e

    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SnapshotError(f"{path.name} is not valid {suffix.lstrip('.') or 'json'}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SnapshotError(f"{path.name}: expected a mapping at the top level")
    # The store persists its state under a "state" key
    return data.get("state", data)


def parse_timestamp(value) -> Optional[datetime]:
    """Epoch milliseconds (the store's format) or an ISO 8601 string."""
    if isinstance(value, bool):
        raise SnapshotError(f"invalid timestamp: {value!r}")
    if value is None or value == 0 or value == "":
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000)
    if isinstance(value, datetime):
        # YAML loads unquoted timestamps as datetimes, possibly with an offset
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError as e:
            raise SnapshotError(f"invalid timestamp: {value!r}") from e
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _get(record: dict, camel: str, snake: str, default=None):
    return record.get(camel, record.get(snake, default))


def _require(record: dict, key: str, kind: str):
    if key not in record:
        raise SnapshotError(f"{kind} record missing '{key}': {record!r}")
    return record[key]


def _category(record: dict) -> Category:
    return Category(id=str(_require(record, "id", "category")), name=record.get("name", ""))


def _topic(record: dict) -> Topic:
    return Topic(
        id=str(_require(record, "id", "topic")),
        title=_require(record, "title", "topic"),
        checks={str(k): bool(v) for k, v in (record.get("checks") or {}).items()},
        note=record.get("note"),
        updated_at=parse_timestamp(_get(record, "updatedAt", "updated_at")),
        review_count=int(_get(record, "reviewCount", "review_count", 0) or 0),
        folder_id=_get(record, "folderId", "folder_id"),
    )


def _bulletin(record: dict) -> Bulletin:
    completed = _get(record, "completedExercises", "completed_exercises") or {}
    exercise_count = _get(record, "exerciseCount", "exercise_count")
    if exercise_count is None:
        raise SnapshotError(f"bulletin record missing 'exerciseCount': {record!r}")
    try:
        completed = {int(k): bool(v) for k, v in completed.items()}
        exercise_count = int(exercise_count)
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"bad exercise data in bulletin {record.get('id')!r}: {e}") from e
    return Bulletin(
        id=str(_require(record, "id", "bulletin")),
        title=_require(record, "title", "bulletin"),
        exercise_count=exercise_count,
        completed_exercises=completed,
        note=record.get("note"),
        updated_at=parse_timestamp(_get(record, "updatedAt", "updated_at")),
        folder_id=_get(record, "folderId", "folder_id"),
    )


def load_snapshot(file_path: str) -> TrackerState:
    """Build tracker state from a snapshot file. Nothing is written back."""
    data = read_file_content(file_path)
    try:
        categories = [_category(c) for c in data["categories"]] if "categories" in data \
            else default_categories()
        folder_categories = {
            fid: [_category(c) for c in cats]
            for fid, cats in (_get(data, "folderCategories", "folder_categories") or {}).items()
        }
        state = TrackerState(
            categories=categories,
            topics=[_topic(t) for t in data.get("topics") or []],
            bulletins=[_bulletin(b) for b in data.get("bulletins") or []],
            folders=[Folder(id=str(f["id"]), name=f.get("name", "")) for f in data.get("folders") or []],
            folder_categories=folder_categories,
            folder_category_order=_get(data, "folderCategoryOrder", "folder_category_order") or {},
            folder_hidden_globals=_get(data, "folderHiddenGlobals", "folder_hidden_globals") or {},
            exam_date=parse_timestamp(_get(data, "examDate", "exam_date")),
        )
    except (AttributeError, KeyError, TypeError) as e:
        raise SnapshotError(f"malformed snapshot {Path(file_path).name}: {e}") from e

    logger.info(
        "loaded %s: %d topics, %d bulletins, %d categories",
        Path(file_path).name, len(state.topics), len(state.bulletins), len(state.categories),
    )
    return state

import json
from datetime import datetime, timedelta, timezone

import pytest

from study_tracker.importer import SnapshotError, load_snapshot, parse_timestamp, read_file_content
from study_tracker.planner import generate_study_plan


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


STORE_EXPORT = {
    "state": {
        "categories": [{"id": "resumido", "name": "Resumido"}, {"id": "estudiado", "name": "Estudiado"}],
        "topics": [
            {"id": "t_1", "title": "Atomic structure", "checks": {"resumido": True},
             "updatedAt": 1700000000000, "reviewCount": 2, "folderId": "f_1"},
            {"id": "t_2", "title": "Periodic table", "checks": {}, "reviewCount": 0},
        ],
        "bulletins": [
            {"id": "b_1", "title": "Stoichiometry", "exerciseCount": 5,
             "completedExercises": {"1": True, "3": True}},
        ],
        "folders": [{"id": "f_1", "name": "Chemistry"}],
        "folderCategories": {"f_1": [{"id": "fcat_f_1_lab", "name": "Lab"}]},
        "folderHiddenGlobals": {"f_1": ["estudiado"]},
        "examDate": "2025-06-20T09:00:00",
    },
    "version": 0,
}


def test_load_store_export_json(tmp_path):
    state = load_snapshot(_write(tmp_path, "snapshot.json", json.dumps(STORE_EXPORT)))
    assert [c.id for c in state.categories] == ["resumido", "estudiado"]
    first, second = state.topics
    assert first.updated_at == datetime.fromtimestamp(1_700_000_000)
    assert first.review_count == 2
    assert first.folder_id == "f_1"
    assert second.updated_at is None
    assert state.bulletins[0].completed_exercises == {1: True, 3: True}
    assert state.bulletins[0].exercise_count == 5
    assert state.folders[0].name == "Chemistry"
    assert state.folder_categories["f_1"][0].name == "Lab"
    assert state.folder_hidden_globals == {"f_1": ["estudiado"]}
    assert state.exam_date == datetime(2025, 6, 20, 9)


def test_load_yaml_snapshot_with_defaults(tmp_path):
    text = (
        "topics:\n"
        "  - id: t1\n"
        "    title: Optics\n"
        "    checks: {studied: true}\n"
        "    updated_at: '2025-02-01T18:30:00'\n"
        "bulletins:\n"
        "  - id: b1\n"
        "    title: Lenses\n"
        "    exercise_count: 4\n"
    )
    state = load_snapshot(_write(tmp_path, "snapshot.yaml", text))
    assert [c.id for c in state.categories] == ["summarized", "studied", "reviewed"]
    assert state.topics[0].updated_at == datetime(2025, 2, 1, 18, 30)
    assert state.bulletins[0].completed_exercises == {}
    assert state.exam_date is None


def test_empty_file_gives_empty_state(tmp_path):
    state = load_snapshot(_write(tmp_path, "empty.yml", ""))
    assert state.topics == []
    assert state.bulletins == []


def test_invalid_json_raises(tmp_path):
    with pytest.raises(SnapshotError):
        read_file_content(_write(tmp_path, "bad.json", "{not json"))


def test_top_level_list_raises(tmp_path):
    with pytest.raises(SnapshotError):
        load_snapshot(_write(tmp_path, "list.json", "[1, 2]"))


def test_missing_file_raises(tmp_path):
    with pytest.raises(SnapshotError):
        load_snapshot(str(tmp_path / "nope.json"))


def test_bulletin_without_exercise_count_raises(tmp_path):
    data = {"bulletins": [{"id": "b1", "title": "Set"}]}
    with pytest.raises(SnapshotError):
        load_snapshot(_write(tmp_path, "s.json", json.dumps(data)))


def test_topic_without_title_raises(tmp_path):
    data = {"topics": [{"id": "t1"}]}
    with pytest.raises(SnapshotError):
        load_snapshot(_write(tmp_path, "s.json", json.dumps(data)))


def test_parse_timestamp():
    assert parse_timestamp(None) is None
    assert parse_timestamp(0) is None
    assert parse_timestamp("2025-01-02") == datetime(2025, 1, 2)
    with pytest.raises(SnapshotError):
        parse_timestamp("yesterday")
    with pytest.raises(SnapshotError):
        parse_timestamp(True)


def _local(moment):
    return moment.astimezone().replace(tzinfo=None)


def test_unquoted_yaml_timestamps_with_offset_become_naive(tmp_path, now):
    text = (
        "examDate: 2025-06-20T09:00:00+02:00\n"
        "topics:\n"
        "  - id: t1\n"
        "    title: Optics\n"
        "    updatedAt: 2025-02-01T18:30:00Z\n"
    )
    state = load_snapshot(_write(tmp_path, "snapshot.yaml", text))
    updated = state.topics[0].updated_at
    assert updated.tzinfo is None
    assert updated == _local(datetime(2025, 2, 1, 18, 30, tzinfo=timezone.utc))
    assert state.exam_date.tzinfo is None
    assert state.exam_date == _local(datetime(2025, 6, 20, 9, tzinfo=timezone(timedelta(hours=2))))

    plan = generate_study_plan(state.topics, state.bulletins, state.categories, state.exam_date, now)
    assert plan.stats.total_items == 1


def test_json_iso_string_with_z_suffix(tmp_path):
    data = {"topics": [{"id": "t1", "title": "Optics", "updatedAt": "2025-02-01T18:30:00Z"}]}
    state = load_snapshot(_write(tmp_path, "s.json", json.dumps(data)))
    assert state.topics[0].updated_at == _local(datetime(2025, 2, 1, 18, 30, tzinfo=timezone.utc))


def test_parse_timestamp_rejects_both_booleans():
    for value in (True, False):
        with pytest.raises(SnapshotError):
            parse_timestamp(value)

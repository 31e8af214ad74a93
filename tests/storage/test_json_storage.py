# tests/storage/test_json_storage.py
"""Tests for the JSON file-backed record storage."""

import json
from pathlib import Path

import pytest

from goaltrack.exceptions import StorageCapacityError, StorageCorruptedError, StorageError
from goaltrack.identity import Principal
from goaltrack.models import Goal
from goaltrack.storage import JsonRecordStorage


def _goal(goal_id: str, title: str = "Learn Go") -> Goal:
    return Goal(
        owner=Principal.anonymous(), id=goal_id, title=title, description="d",
        start_date="2024-01-01", target_date="2024-02-01", created_at=1,
    )


@pytest.fixture
def goals_path(tmp_path):
    return tmp_path / "store" / "goals.json"


class TestPersistence:

    def test_missing_file_starts_empty(self, goals_path):
        storage = JsonRecordStorage(goals_path, Goal, collection="goals")
        assert storage.values() == []
        assert not goals_path.exists()

    def test_insert_creates_file(self, goals_path):
        storage = JsonRecordStorage(goals_path, Goal, collection="goals")
        storage.insert("g1", _goal("g1"))
        data = json.loads(goals_path.read_text(encoding="utf-8"))
        assert data["collection"] == "goals"
        assert data["records"]["g1"]["owner"] == "2vxsx-fae"
        assert data["records"]["g1"]["startDate"] == "2024-01-01"

    def test_survives_reopen(self, goals_path):
        storage = JsonRecordStorage(goals_path, Goal, collection="goals")
        storage.insert("g2", _goal("g2", "second"))
        storage.insert("g1", _goal("g1", "first"))
        storage.remove("g2")

        reopened = JsonRecordStorage(goals_path, Goal, collection="goals")
        assert reopened.keys() == ["g1"]
        assert reopened.get("g1") == _goal("g1", "first")

    def test_no_temp_file_left_behind(self, goals_path):
        storage = JsonRecordStorage(goals_path, Goal, collection="goals")
        storage.insert("g1", _goal("g1"))
        assert [p.name for p in goals_path.parent.iterdir()] == ["goals.json"]

    def test_remove_missing_does_not_write(self, goals_path):
        storage = JsonRecordStorage(goals_path, Goal, collection="goals")
        assert storage.remove("nope") is None
        assert not goals_path.exists()

    def test_capacity_error_leaves_file_untouched(self, goals_path):
        storage = JsonRecordStorage(goals_path, Goal, collection="goals", max_value_size=300)
        storage.insert("g1", _goal("g1"))
        before = goals_path.read_text(encoding="utf-8")
        with pytest.raises(StorageCapacityError):
            storage.insert("g2", _goal("g2", title="x" * 400))
        assert goals_path.read_text(encoding="utf-8") == before
        assert storage.keys() == ["g1"]


class TestCorruption:

    def test_invalid_json(self, goals_path):
        goals_path.parent.mkdir(parents=True)
        goals_path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageCorruptedError):
            JsonRecordStorage(goals_path, Goal, collection="goals")

    def test_missing_records_mapping(self, goals_path):
        goals_path.parent.mkdir(parents=True)
        goals_path.write_text(json.dumps({"collection": "goals"}), encoding="utf-8")
        with pytest.raises(StorageCorruptedError):
            JsonRecordStorage(goals_path, Goal, collection="goals")

    def test_wrong_collection(self, goals_path):
        goals_path.parent.mkdir(parents=True)
        goals_path.write_text(json.dumps({"collection": "milestones", "records": {}}), encoding="utf-8")
        with pytest.raises(StorageCorruptedError, match="expected 'goals'"):
            JsonRecordStorage(goals_path, Goal, collection="goals")

    def test_invalid_record_raises_on_read(self, goals_path):
        goals_path.parent.mkdir(parents=True)
        goals_path.write_text(
            json.dumps({"collection": "goals", "records": {"g1": {"id": "g1"}}}), encoding="utf-8"
        )
        storage = JsonRecordStorage(goals_path, Goal, collection="goals")
        with pytest.raises(StorageCorruptedError):
            storage.get("g1")


class TestWriteFailure:

    @pytest.fixture
    def failing_writes(self, monkeypatch):
        def _fail(*args, **kwargs):
            raise OSError("disk full")

        return lambda: monkeypatch.setattr(Path, "write_text", _fail)

    @pytest.fixture
    def storage(self, goals_path):
        storage = JsonRecordStorage(goals_path, Goal, collection="goals")
        storage.insert("a", _goal("a", "original"))
        return storage

    def test_insert_new_key_rolled_back(self, storage, failing_writes):
        failing_writes()
        with pytest.raises(StorageError, match="Failed to write"):
            storage.insert("b", _goal("b"))
        assert storage.keys() == ["a"]
        assert storage.get("b") is None

    def test_replace_restores_previous_record(self, storage, failing_writes):
        failing_writes()
        with pytest.raises(StorageError):
            storage.insert("a", _goal("a", "replacement"))
        assert storage.get("a").title == "original"

    def test_remove_rolled_back(self, storage, failing_writes):
        failing_writes()
        with pytest.raises(StorageError):
            storage.remove("a")
        assert storage.keys() == ["a"]
        assert storage.get("a") == _goal("a", "original")

    def test_file_unchanged_after_failed_write(self, storage, goals_path, failing_writes):
        before = goals_path.read_text(encoding="utf-8")
        failing_writes()
        with pytest.raises(StorageError):
            storage.insert("b", _goal("b"))
        assert JsonRecordStorage(goals_path, Goal, collection="goals").keys() == ["a"]
        assert goals_path.read_text(encoding="utf-8") == before

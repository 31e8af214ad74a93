# tests/storage/test_memory_storage.py
"""Tests for the in-memory ordered record map and the shared base behaviour."""

import pytest

from goaltrack.exceptions import StorageCapacityError
from goaltrack.models import Milestone
from goaltrack.storage import MemoryRecordStorage


def _milestone(milestone_id: str, title: str = "t") -> Milestone:
    return Milestone(
        id=milestone_id, goal_id="g", title=title, description="d",
        target_date="2024-01-01", created_at=1,
    )


@pytest.fixture
def storage():
    return MemoryRecordStorage(Milestone)


class TestMapOperations:

    def test_empty(self, storage):
        assert storage.values() == []
        assert len(storage) == 0
        assert storage.get("missing") is None
        assert storage.remove("missing") is None

    def test_insert_returns_previous(self, storage):
        assert storage.insert("a", _milestone("a", "first")) is None
        previous = storage.insert("a", _milestone("a", "second"))
        assert previous.title == "first"
        assert storage.get("a").title == "second"
        assert len(storage) == 1

    def test_values_in_key_order(self, storage):
        for key in ("c", "a", "b"):
            storage.insert(key, _milestone(key))
        assert storage.keys() == ["a", "b", "c"]
        assert [m.id for m in storage.values()] == ["a", "b", "c"]
        assert [k for k, _ in storage.items()] == ["a", "b", "c"]

    def test_remove_returns_record(self, storage):
        storage.insert("a", _milestone("a"))
        removed = storage.remove("a")
        assert removed.id == "a"
        assert "a" not in storage
        assert storage.contains_key("a") is False

    def test_get_returns_fresh_copies(self, storage):
        record = _milestone("a")
        storage.insert("a", record)
        first, second = storage.get("a"), storage.get("a")
        assert first == second == record
        assert first is not second and first is not record

    def test_clear(self, storage):
        storage.insert("a", _milestone("a"))
        storage.clear()
        assert len(storage) == 0


class TestSizeLimits:

    def test_key_too_long(self):
        storage = MemoryRecordStorage(Milestone, max_key_size=4)
        with pytest.raises(StorageCapacityError) as exc_info:
            storage.insert("toolong", _milestone("toolong"))
        assert exc_info.value.what == "key"
        assert len(storage) == 0

    def test_value_too_large(self):
        storage = MemoryRecordStorage(Milestone, max_value_size=64)
        with pytest.raises(StorageCapacityError) as exc_info:
            storage.insert("a", _milestone("a", title="x" * 100))
        assert exc_info.value.what == "value"
        assert storage.get("a") is None

    def test_default_key_limit_fits_uuid(self):
        storage = MemoryRecordStorage(Milestone)
        key = "123e4567-e89b-42d3-a456-426614174000"
        storage.insert(key, _milestone(key))
        assert storage.contains_key(key)

    def test_limits_must_be_positive(self):
        with pytest.raises(ValueError):
            MemoryRecordStorage(Milestone, max_key_size=0)

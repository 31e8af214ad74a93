# tests/conftest.py
"""
Shared fixtures for goaltrack tests.

Provides deterministic clocks and id generators, a pair of distinct
principals, and pre-wired stores over in-memory storage.
"""

import itertools
import sys
from pathlib import Path

import pytest

# Add source to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from goaltrack.clock import ManualClock
from goaltrack.identity import Principal
from goaltrack.models import Goal, Milestone
from goaltrack.service import GoalTracker
from goaltrack.storage import MemoryRecordStorage

START_NS = 1_700_000_000_000_000_000
STEP_NS = 1_000


class SequentialIds:
    """Predictable id generator: id-0001, id-0002, ..."""

    def __init__(self, prefix: str = "id") -> None:
        self._counter = itertools.count(1)
        self.prefix = prefix

    def __call__(self) -> str:
        return f"{self.prefix}-{next(self._counter):04d}"


@pytest.fixture
def clock():
    return ManualClock(start=START_NS, step=STEP_NS)


@pytest.fixture
def ids():
    return SequentialIds()


@pytest.fixture
def alice():
    return Principal(b"\x01" * 10 + b"\x02")


@pytest.fixture
def bob():
    return Principal(b"\x03" * 10 + b"\x02")


@pytest.fixture
def tracker(clock, ids):
    """GoalTracker over fresh in-memory collections."""
    return GoalTracker(
        MemoryRecordStorage(Goal),
        MemoryRecordStorage(Milestone),
        clock=clock,
        id_generator=ids,
    )


@pytest.fixture
def goal_payload():
    return {
        "title": "Learn Go",
        "description": "Work through the Go tour and build a CLI",
        "startDate": "2024-01-01",
        "targetDate": "2024-06-30",
    }


@pytest.fixture
def milestone_payload():
    return {
        "title": "Chapter 1",
        "description": "Basics: packages, variables and functions",
        "targetDate": "2024-01-01",
    }


@pytest.fixture
def start_ns():
    """First timestamp the ``clock`` fixture hands out."""
    return START_NS


@pytest.fixture
def step_ns():
    return STEP_NS

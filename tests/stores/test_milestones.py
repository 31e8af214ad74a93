# tests/stores/test_milestones.py
"""
Tests for MilestoneStore.

Milestones have no owner: create/update/complete are open to everyone, while
get/delete apply the goal-id comparison against the caller's principal text.
"""

import logging

import pytest

from goaltrack.identity import Principal
from goaltrack.result import Err, ErrorKind, Ok


@pytest.fixture
def milestone(tracker, milestone_payload):
    return tracker.add_milestone("goal-1", milestone_payload).unwrap()


class TestAddMilestone:

    def test_creates_incomplete_milestone(self, tracker, milestone_payload, start_ns):
        milestone = tracker.add_milestone("goal-1", milestone_payload).unwrap()
        assert milestone.id == "id-0001"
        assert milestone.goal_id == "goal-1"
        assert milestone.title == "Chapter 1"
        assert milestone.target_date == "2024-01-01"
        assert milestone.is_completed is False
        assert milestone.created_at == start_ns
        assert milestone.updated_at is None

    def test_goal_id_not_checked(self, tracker, milestone_payload):
        assert tracker.get_goals().unwrap() == []
        assert tracker.add_milestone("no-such-goal", milestone_payload).is_ok

    @pytest.mark.parametrize("missing", ["title", "description", "targetDate"])
    def test_requires_every_field(self, tracker, milestone_payload, missing):
        milestone_payload[missing] = ""
        assert tracker.add_milestone("goal-1", milestone_payload) == Err(
            ErrorKind.VALIDATION_ERROR, "Missing or invalid input data")
        assert tracker.get_milestones() == Ok([])


class TestUpdateAndCompletion:

    def test_update_merges_fields(self, tracker, milestone):
        updated = tracker.update_milestone(milestone.id, {"description": "Revised"}).unwrap()
        assert updated.description == "Revised"
        assert updated.title == milestone.title
        assert updated.goal_id == milestone.goal_id
        assert updated.updated_at is not None

    def test_update_missing(self, tracker):
        assert tracker.update_milestone("nope", {"title": "x"}) == Err(
            ErrorKind.NOT_FOUND, "Milestone with id:nope not found")

    def test_mark_completed_and_incomplete(self, tracker, milestone):
        done = tracker.mark_milestone_as_completed(milestone.id).unwrap()
        assert done.is_completed is True
        assert done.updated_at is not None

        undone = tracker.mark_milestone_as_incomplete(milestone.id).unwrap()
        assert undone.is_completed is False
        assert undone.updated_at > done.updated_at

        stored = tracker.get_milestones().unwrap()[0]
        assert stored == undone

    @pytest.mark.parametrize("operation", ["mark_milestone_as_completed", "mark_milestone_as_incomplete"])
    def test_mark_missing(self, tracker, operation):
        result = getattr(tracker, operation)("nope")
        assert result.kind is ErrorKind.NOT_FOUND


class TestGoalIdAccessCheck:

    @pytest.mark.parametrize("operation", ["get_milestone", "delete_milestone"])
    def test_ordinary_callers_rejected(self, tracker, alice, milestone, operation):
        result = getattr(tracker, operation)(alice, milestone.id)
        assert result == Err(ErrorKind.UNAUTHORIZED, "You are not authorized to access Milestone")
        assert tracker.get_milestones().unwrap() == [milestone]

    @pytest.mark.parametrize("operation", ["get_milestone", "delete_milestone"])
    def test_not_found_checked_first(self, tracker, alice, operation):
        result = getattr(tracker, operation)(alice, "nope")
        assert result == Err(ErrorKind.NOT_FOUND, "Milestone with id:nope not found")

    def test_caller_whose_text_equals_goal_id_passes(self, tracker, milestone_payload):
        caller = Principal.anonymous()
        milestone = tracker.add_milestone(caller.to_text(), milestone_payload).unwrap()
        assert tracker.get_milestone(caller, milestone.id) == Ok(milestone)
        assert tracker.delete_milestone(caller, milestone.id) == Ok(milestone)
        assert tracker.get_milestones() == Ok([])

    def test_warning_logged_once(self, tracker, alice, milestone, caplog):
        with caplog.at_level(logging.WARNING, logger="goaltrack.milestones"):
            tracker.get_milestone(alice, milestone.id)
            tracker.delete_milestone(alice, milestone.id)
        warnings = [r for r in caplog.records if "compares goal ids" in r.getMessage()]
        assert len(warnings) == 1

    def test_denial_logged_as_warning(self, tracker, alice, milestone, caplog):
        with caplog.at_level(logging.WARNING, logger="goaltrack.access"):
            tracker.get_milestone(alice, milestone.id)
        denials = [r for r in caplog.records if "denied access to milestone" in r.getMessage()]
        assert len(denials) == 1
        assert denials[0].levelno == logging.WARNING
        assert milestone.id in denials[0].getMessage()


class TestListingAndSearch:

    @pytest.fixture
    def milestones(self, tracker):
        specs = [
            ("g1", "Chapter 1", "Packages and variables"),
            ("g2", "Long run", "Twenty kilometres"),
            ("g1", "Chapter 2", "Flow control: for, if, switch"),
        ]
        return [
            tracker.add_milestone(goal_id, {"title": t, "description": d, "targetDate": "2024-03-01"}).unwrap()
            for goal_id, t, d in specs
        ]

    def test_empty(self, tracker):
        assert tracker.get_milestones() == Ok([])

    def test_get_milestones(self, tracker, milestones):
        assert tracker.get_milestones().unwrap() == milestones

    def test_search(self, tracker, milestones):
        assert [m.title for m in tracker.search_milestone("chapter").unwrap()] == ["Chapter 1", "Chapter 2"]
        assert [m.title for m in tracker.search_milestone("KILO").unwrap()] == ["Long run"]
        assert tracker.search_milestone("").unwrap() == milestones
        assert tracker.search_milestone("zzz") == Ok([])

    def test_by_goal(self, tracker, milestones):
        assert [m.title for m in tracker.get_milestones_by_goal("g1").unwrap()] == ["Chapter 1", "Chapter 2"]
        assert tracker.get_milestones_by_goal("missing") == Ok([])

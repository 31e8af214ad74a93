# src/goaltrack/milestones.py
"""
Milestone collection.

Milestones carry no owner: creation, editing and completion toggles are open
to any caller. ``get_milestone`` and ``delete_milestone`` apply the
goal-id/principal comparison in :func:`goaltrack.access.authorize_milestone_caller`,
which rejects callers in practice.

Every public method returns a :class:`~goaltrack.result.Result`.
"""

import logging
from typing import List, Mapping, Optional, Union

from .access import authorize_milestone_caller, search_records
from .clock import Clock, SystemClock
from .exceptions import RecordNotFoundError, StorageError
from .identity import IdGenerator, Principal, uuid4_generator
from .models import Milestone, MilestonePayload
from .result import returns_result
from .storage.base import BaseRecordStorage

logger = logging.getLogger(__name__)

PayloadLike = Union[MilestonePayload, Mapping[str, object]]


class MilestoneStore:
    """
    Owns the Milestone collection.

    Args:
        storage: Ordered map holding Milestone records keyed by id.
        clock: Source of nanosecond timestamps.
        id_generator: Source of fresh record ids.
    """

    def __init__(
        self,
        storage: BaseRecordStorage[Milestone],
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> None:
        self._storage = storage
        self._clock = clock or SystemClock()
        self._new_id = id_generator or uuid4_generator
        self._warned_goal_id_check = False

    # --- Internal helpers ---

    def find(self, milestone_id: str) -> Optional[Milestone]:
        """Unchecked lookup, used when embedding a milestone into a goal."""
        return self._storage.get(milestone_id)

    def _require(self, milestone_id: str) -> Milestone:
        milestone = self._storage.get(milestone_id)
        if milestone is None:
            raise RecordNotFoundError("Milestone", milestone_id)
        return milestone

    def _check_caller(self, milestone: Milestone, caller: Principal) -> None:
        if not self._warned_goal_id_check:
            logger.warning(
                "Milestone access compares goal ids against caller principals; "
                "this denies every caller whose principal text is not the goal id"
            )
            self._warned_goal_id_check = True
        authorize_milestone_caller(milestone, caller)

    def _touch(self, milestone: Milestone, **changes) -> Milestone:
        updated = milestone.model_copy(update={**changes, "updated_at": self._clock.now_ns()})
        self._storage.insert(updated.id, updated)
        return updated

    # --- Public operations ---

    @returns_result
    def add_milestone(self, goal_id: str, payload: PayloadLike) -> Milestone:
        """
        Create a Milestone for ``goal_id``.

        The goal id is recorded as given; it is not checked against the Goal
        collection.
        """
        payload = MilestonePayload.coerce(payload)
        payload.require_complete()

        milestone_id = self._new_id()
        if self._storage.contains_key(milestone_id):
            raise StorageError(f"Id generator returned an id already in use: '{milestone_id}'")

        milestone = Milestone(
            id=milestone_id,
            goal_id=goal_id,
            title=payload.title,
            description=payload.description,
            target_date=payload.target_date,
            is_completed=False,
            created_at=self._clock.now_ns(),
            updated_at=None,
        )
        self._storage.insert(milestone.id, milestone)
        logger.info("Created milestone '%s' for goal '%s'", milestone.id, goal_id)
        return milestone

    @returns_result
    def update_milestone(self, milestone_id: str, payload: PayloadLike) -> Milestone:
        milestone = self._require(milestone_id)
        changes = MilestonePayload.coerce(payload).changes()
        return self._touch(milestone, **changes)

    @returns_result
    def delete_milestone(self, caller: Principal, milestone_id: str) -> Milestone:
        milestone = self._require(milestone_id)
        self._check_caller(milestone, caller)
        self._storage.remove(milestone_id)
        logger.info("Deleted milestone '%s'", milestone_id)
        return milestone

    @returns_result
    def get_milestone(self, caller: Principal, milestone_id: str) -> Milestone:
        milestone = self._require(milestone_id)
        self._check_caller(milestone, caller)
        return milestone

    @returns_result
    def get_milestones(self) -> List[Milestone]:
        return self._storage.values()

    @returns_result
    def search_milestone(self, text: str) -> List[Milestone]:
        results = search_records(self._storage.values(), text)
        logger.debug("Milestone search '%s' matched %d records", text, len(results))
        return results

    @returns_result
    def get_milestones_by_goal(self, goal_id: str) -> List[Milestone]:
        return [m for m in self._storage.values() if m.goal_id == goal_id]

    @returns_result
    def mark_milestone_as_completed(self, milestone_id: str) -> Milestone:
        return self._touch(self._require(milestone_id), is_completed=True)

    @returns_result
    def mark_milestone_as_incomplete(self, milestone_id: str) -> Milestone:
        return self._touch(self._require(milestone_id), is_completed=False)

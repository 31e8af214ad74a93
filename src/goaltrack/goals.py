# src/goaltrack/goals.py
"""
Goal collection.

Every Goal is owned by the principal that created it. Reading, editing,
deleting and (un)embedding milestones are restricted to that owner; listing,
searching and per-user listing are open to any caller.

Example:
    >>> milestones = MilestoneStore(MemoryRecordStorage(Milestone))
    >>> goals = GoalStore(MemoryRecordStorage(Goal), milestones)
    >>> alice = Principal.generate()
    >>> goal = goals.add_goal(alice, {
    ...     "title": "Learn Go", "description": "Finish the tour",
    ...     "startDate": "2024-01-01", "targetDate": "2024-03-01",
    ... }).unwrap()
    >>> goals.get_goal(Principal.generate(), goal.id).kind
    <ErrorKind.UNAUTHORIZED: 'UNAUTHORIZED'>
"""

import logging
from typing import List, Mapping, Optional, Union

from .access import authorize_owner, search_records
from .clock import Clock, SystemClock
from .exceptions import RecordNotFoundError, StorageError
from .identity import IdGenerator, Principal, uuid4_generator
from .milestones import MilestoneStore
from .models import Goal, GoalPayload
from .result import returns_result
from .storage.base import BaseRecordStorage

logger = logging.getLogger(__name__)

PayloadLike = Union[GoalPayload, Mapping[str, object]]


class GoalStore:
    """
    Owns the Goal collection and embeds Milestone snapshots on request.

    Args:
        storage: Ordered map holding Goal records keyed by id.
        milestones: Milestone collection read when embedding.
        clock: Source of nanosecond timestamps.
        id_generator: Source of fresh record ids.
    """

    def __init__(
        self,
        storage: BaseRecordStorage[Goal],
        milestones: MilestoneStore,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> None:
        self._storage = storage
        self._milestones = milestones
        self._clock = clock or SystemClock()
        self._new_id = id_generator or uuid4_generator

    def _require_owned(self, caller: Principal, goal_id: str) -> Goal:
        goal = self._storage.get(goal_id)
        if goal is None:
            raise RecordNotFoundError("Goal", goal_id)
        authorize_owner(goal, caller)
        return goal

    def _touch(self, goal: Goal, **changes) -> Goal:
        updated = goal.model_copy(update={**changes, "updated_at": self._clock.now_ns()})
        self._storage.insert(updated.id, updated)
        return updated

    @returns_result
    def add_goal(self, caller: Principal, payload: PayloadLike) -> Goal:
        """
        Create a Goal owned by ``caller``.

        All of title, description, start date and target date must be
        non-empty; otherwise nothing is written and a validation error is
        returned.
        """
        payload = GoalPayload.coerce(payload)
        payload.require_complete()

        goal_id = self._new_id()
        if self._storage.contains_key(goal_id):
            raise StorageError(f"Id generator returned an id already in use: '{goal_id}'")

        goal = Goal(
            owner=caller,
            id=goal_id,
            title=payload.title,
            description=payload.description,
            start_date=payload.start_date,
            target_date=payload.target_date,
            progress=0.0,
            milestones=[],
            created_at=self._clock.now_ns(),
            updated_at=None,
        )
        self._storage.insert(goal.id, goal)
        logger.info("Created goal '%s' for %s", goal.id, caller)
        return goal

    @returns_result
    def update_goal(self, caller: Principal, goal_id: str, payload: PayloadLike) -> Goal:
        """Merge the supplied editable fields over the stored Goal."""
        goal = self._require_owned(caller, goal_id)
        changes = GoalPayload.coerce(payload).changes()
        return self._touch(goal, **changes)

    @returns_result
    def delete_goal(self, caller: Principal, goal_id: str) -> Goal:
        goal = self._require_owned(caller, goal_id)
        self._storage.remove(goal_id)
        logger.info("Deleted goal '%s'", goal_id)
        return goal

    @returns_result
    def get_goal(self, caller: Principal, goal_id: str) -> Goal:
        return self._require_owned(caller, goal_id)

    @returns_result
    def get_goals(self) -> List[Goal]:
        return self._storage.values()

    @returns_result
    def search_goal(self, text: str) -> List[Goal]:
        results = search_records(self._storage.values(), text)
        logger.debug("Goal search '%s' matched %d records", text, len(results))
        return results

    @returns_result
    def get_goals_by_user(self, owner: Principal) -> List[Goal]:
        return [goal for goal in self._storage.values() if goal.owner == owner]

    @returns_result
    def insert_milestone_into_goal(self, caller: Principal, goal_id: str, milestone_id: str) -> Goal:
        """
        Append a snapshot of the Milestone onto the Goal's ``milestones``.

        The snapshot is a copy taken now; later edits to the Milestone do not
        reach it. Embedding the same milestone twice yields two entries.
        """
        goal = self._require_owned(caller, goal_id)
        milestone = self._milestones.find(milestone_id)
        if milestone is None:
            raise RecordNotFoundError("Milestone", milestone_id)
        updated = self._touch(goal, milestones=[*goal.milestones, milestone.snapshot()])
        logger.debug("Embedded milestone '%s' into goal '%s'", milestone_id, goal_id)
        return updated

    @returns_result
    def remove_milestone_from_goal(self, caller: Principal, goal_id: str, milestone_id: str) -> Goal:
        """Drop every embedded copy of ``milestone_id``; succeeds even if none exist."""
        goal = self._require_owned(caller, goal_id)
        remaining = [m for m in goal.milestones if m.id != milestone_id]
        return self._touch(goal, milestones=remaining)

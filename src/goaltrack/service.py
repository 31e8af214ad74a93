# src/goaltrack/service.py
"""
Core API Facade for the goaltrack library.

``GoalTracker`` wires one storage backend, a clock and an id generator into a
``MilestoneStore`` and a ``GoalStore`` and exposes every operation of both.
The caller's principal is passed explicitly to each operation that needs it.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .clock import Clock, SystemClock
from .config import GoalTrackConfig, load_config
from .goals import GoalStore
from .goals import PayloadLike as GoalPayloadLike
from .identity import IdGenerator, Principal, uuid4_generator
from .milestones import MilestoneStore
from .milestones import PayloadLike as MilestonePayloadLike
from .models import Goal, Milestone
from .result import Result
from .storage import BaseRecordStorage, create_record_storage

logger = logging.getLogger(__name__)


class GoalTracker:
    """
    Main entry point for goal and milestone tracking.

    Use :meth:`create` to build one from configuration, or pass storages
    directly (useful for tests and dependency injection).
    """

    def __init__(
        self,
        goal_storage: BaseRecordStorage[Goal],
        milestone_storage: BaseRecordStorage[Milestone],
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        config: Optional[GoalTrackConfig] = None,
    ) -> None:
        self.config = config or GoalTrackConfig()
        clock = clock or SystemClock()
        id_generator = id_generator or uuid4_generator
        self._goal_storage = goal_storage
        self._milestone_storage = milestone_storage
        self.milestones = MilestoneStore(milestone_storage, clock=clock, id_generator=id_generator)
        self.goals = GoalStore(goal_storage, self.milestones, clock=clock, id_generator=id_generator)

    @classmethod
    def create(
        cls,
        config: Optional[GoalTrackConfig] = None,
        config_overrides: Optional[Dict[str, Any]] = None,
        config_file_path: Optional[str | Path] = None,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> "GoalTracker":
        """
        Build a tracker from configuration.

        Either pass a ready ``GoalTrackConfig`` or let one be loaded from
        ``config_file_path`` or ``config_overrides``.

        Raises:
            ConfigError: If configuration is invalid.
            StorageError: If a durable collection cannot be opened.
        """
        if config is None:
            config = load_config(config_dict=config_overrides, config_path=config_file_path)
        goal_storage = create_record_storage(config.storage, Goal, "goals")
        milestone_storage = create_record_storage(config.storage, Milestone, "milestones")
        logger.info("GoalTracker initialized with '%s' storage", config.storage.backend)
        return cls(goal_storage, milestone_storage, clock=clock, id_generator=id_generator, config=config)

    def close(self) -> None:
        self._goal_storage.close()
        self._milestone_storage.close()

    def __enter__(self) -> "GoalTracker":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # --- Goals ---

    def add_goal(self, caller: Principal, payload: GoalPayloadLike) -> Result[Goal]:
        return self.goals.add_goal(caller, payload)

    def update_goal(self, caller: Principal, goal_id: str, payload: GoalPayloadLike) -> Result[Goal]:
        return self.goals.update_goal(caller, goal_id, payload)

    def delete_goal(self, caller: Principal, goal_id: str) -> Result[Goal]:
        return self.goals.delete_goal(caller, goal_id)

    def get_goal(self, caller: Principal, goal_id: str) -> Result[Goal]:
        return self.goals.get_goal(caller, goal_id)

    def get_goals(self) -> Result[List[Goal]]:
        return self.goals.get_goals()

    def search_goal(self, text: str) -> Result[List[Goal]]:
        return self.goals.search_goal(text)

    def get_goals_by_user(self, owner: Principal) -> Result[List[Goal]]:
        return self.goals.get_goals_by_user(owner)

    def insert_milestone_into_goal(self, caller: Principal, goal_id: str, milestone_id: str) -> Result[Goal]:
        return self.goals.insert_milestone_into_goal(caller, goal_id, milestone_id)

    def remove_milestone_from_goal(self, caller: Principal, goal_id: str, milestone_id: str) -> Result[Goal]:
        return self.goals.remove_milestone_from_goal(caller, goal_id, milestone_id)

    # --- Milestones ---

    def add_milestone(self, goal_id: str, payload: MilestonePayloadLike) -> Result[Milestone]:
        return self.milestones.add_milestone(goal_id, payload)

    def update_milestone(self, milestone_id: str, payload: MilestonePayloadLike) -> Result[Milestone]:
        return self.milestones.update_milestone(milestone_id, payload)

    def delete_milestone(self, caller: Principal, milestone_id: str) -> Result[Milestone]:
        return self.milestones.delete_milestone(caller, milestone_id)

    def get_milestone(self, caller: Principal, milestone_id: str) -> Result[Milestone]:
        return self.milestones.get_milestone(caller, milestone_id)

    def get_milestones(self) -> Result[List[Milestone]]:
        return self.milestones.get_milestones()

    def search_milestone(self, text: str) -> Result[List[Milestone]]:
        return self.milestones.search_milestone(text)

    def get_milestones_by_goal(self, goal_id: str) -> Result[List[Milestone]]:
        return self.milestones.get_milestones_by_goal(goal_id)

    def mark_milestone_as_completed(self, milestone_id: str) -> Result[Milestone]:
        return self.milestones.mark_milestone_as_completed(milestone_id)

    def mark_milestone_as_incomplete(self, milestone_id: str) -> Result[Milestone]:
        return self.milestones.mark_milestone_as_incomplete(milestone_id)

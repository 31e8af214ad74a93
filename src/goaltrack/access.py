# src/goaltrack/access.py
"""
Authorization and search helpers shared by the Goal and Milestone stores.
"""

import logging
from typing import Iterable, List, TypeVar

from .exceptions import UnauthorizedError
from .identity import Principal
from .models import Goal, Milestone

logger = logging.getLogger(__name__)

R = TypeVar("R", Goal, Milestone)


def authorize_owner(goal: Goal, caller: Principal) -> None:
    """
    Allow only the Goal's owner through.

    Owners are compared as raw identity bytes, never via their text form.

    Raises:
        UnauthorizedError: If ``caller`` is not ``goal.owner``.
    """
    if goal.owner != caller:
        logger.warning("Principal %s denied access to goal '%s'", caller, goal.id)
        raise UnauthorizedError("Goal")


def authorize_milestone_caller(milestone: Milestone, caller: Principal) -> None:
    """
    Access check applied to Milestone get/delete.

    Compares the milestone's ``goal_id`` to the caller's principal text. A goal
    id and a principal come from different value spaces, so this denies every
    caller in practice.

    Raises:
        UnauthorizedError: Unless ``milestone.goal_id`` equals the caller text.
    """
    if milestone.goal_id != caller.to_text():
        logger.warning("Principal %s denied access to milestone '%s'", caller, milestone.id)
        raise UnauthorizedError("Milestone")


def matches_text(record: R, needle: str) -> bool:
    """Case-insensitive substring match against title or description."""
    needle = needle.lower()
    return needle in record.title.lower() or needle in record.description.lower()


def search_records(records: Iterable[R], text: str) -> List[R]:
    """All records whose title or description contains ``text``; empty text matches all."""
    return [record for record in records if matches_text(record, text)]

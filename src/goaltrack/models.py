# src/goaltrack/models.py
"""
Core data models for the goaltrack library.

This module defines the Pydantic models for the two record collections
(Goals and Milestones) and for the payloads callers send to create or edit
them. Records are frozen: every mutation builds a new record with
``model_copy(update=...)`` and writes it back to storage.

Field names are snake_case in Python and camelCase on the wire
(``startDate``, ``goalId``, ``isCompleted``, ``createdAt``...). Both forms are
accepted on input.
"""

from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError
from .identity import Principal


class Milestone(BaseModel):
    """
    A sub-unit of progress, optionally associated with a Goal by id.

    Attributes:
        id: Unique identifier within the Milestone collection.
        goal_id: Back-reference to a Goal id. Not enforced as a foreign key.
        title: Short title.
        description: Free-form description.
        target_date: Target date, stored as the caller supplied it.
        is_completed: Completion flag, toggled by the mark-as operations.
        created_at: Creation time in nanoseconds.
        updated_at: Time of the most recent mutation in nanoseconds, or None
            if the record was never mutated.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="Unique identifier for the milestone.")
    goal_id: str = Field(alias="goalId", description="Id of the goal this milestone was created for.")
    title: str
    description: str
    target_date: str = Field(alias="targetDate")
    is_completed: bool = Field(default=False, alias="isCompleted")
    created_at: int = Field(alias="createdAt", description="Creation timestamp (ns).")
    updated_at: Optional[int] = Field(default=None, alias="updatedAt", description="Last mutation timestamp (ns).")

    def snapshot(self) -> "Milestone":
        """Independent copy of this record for embedding into a Goal."""
        return self.model_copy(deep=True)


class Goal(BaseModel):
    """
    A top-level tracked objective owned by one caller.

    ``milestones`` holds snapshot copies of Milestone records taken when they
    were embedded; they are not kept in sync with the Milestone collection.
    ``progress`` is a fraction between 0.0 and 1.0. Nothing computes it yet,
    so it stays at its initial 0.0.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    owner: Principal
    id: str
    title: str
    description: str
    start_date: str = Field(alias="startDate")
    target_date: str = Field(alias="targetDate")
    progress: float = Field(default=0.0, ge=0.0, le=1.0)
    milestones: List[Milestone] = Field(default_factory=list)
    created_at: int = Field(alias="createdAt")
    updated_at: Optional[int] = Field(default=None, alias="updatedAt")

    def embedded_milestone_ids(self) -> List[str]:
        return [m.id for m in self.milestones]


class _Payload(BaseModel):
    """Common behaviour for create/update payloads."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ()

    @classmethod
    def coerce(cls, value: Union["_Payload", Mapping[str, Any]]):
        """
        Accept a payload instance or a plain mapping.

        Raises:
            ValidationError: If the mapping holds values of the wrong type.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls.model_validate(value)
        except PydanticValidationError as e:
            bad_fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            raise ValidationError(missing_fields=bad_fields) from e

    def missing_fields(self) -> List[str]:
        """Required fields that are absent or empty."""
        return [name for name in self.REQUIRED_FIELDS if not getattr(self, name)]

    def require_complete(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise ValidationError(missing_fields=missing)

    def changes(self) -> Dict[str, Any]:
        """Fields the caller actually supplied, keyed by Python field name."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class GoalPayload(_Payload):
    """Editable fields of a Goal. All four are required when creating one."""
    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ("title", "description", "start_date", "target_date")

    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[str] = Field(default=None, alias="startDate")
    target_date: Optional[str] = Field(default=None, alias="targetDate")


class MilestonePayload(_Payload):
    """Editable fields of a Milestone. All three are required when creating one."""
    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ("title", "description", "target_date")

    title: Optional[str] = None
    description: Optional[str] = None
    target_date: Optional[str] = Field(default=None, alias="targetDate")

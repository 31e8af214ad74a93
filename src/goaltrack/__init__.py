# src/goaltrack/__init__.py
"""
goaltrack - A goal-tracking record store with per-owner access control.

Callers create Goals, optionally split them into Milestones, and persist,
retrieve, search and edit both collections. Every operation returns an
``Ok``/``Err`` result instead of raising.
"""

from importlib.metadata import PackageNotFoundError, version

from .clock import Clock, ManualClock, SystemClock
from .config import GoalTrackConfig, LoggingConfig, StorageConfig, load_config
from .exceptions import (
    ConfigError,
    GoalTrackError,
    RecordNotFoundError,
    StorageCapacityError,
    StorageCorruptedError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)
from .goals import GoalStore
from .identity import IdGenerator, Principal, uuid4_generator
from .milestones import MilestoneStore
from .models import Goal, GoalPayload, Milestone, MilestonePayload
from .result import Err, ErrorKind, Ok, Result
from .service import GoalTracker
from .storage import JsonRecordStorage, MemoryRecordStorage

try:
    __version__ = version("goaltrack")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "Clock",
    "ConfigError",
    "Err",
    "ErrorKind",
    "Goal",
    "GoalPayload",
    "GoalStore",
    "GoalTrackConfig",
    "GoalTrackError",
    "GoalTracker",
    "IdGenerator",
    "JsonRecordStorage",
    "LoggingConfig",
    "ManualClock",
    "MemoryRecordStorage",
    "Milestone",
    "MilestonePayload",
    "MilestoneStore",
    "Ok",
    "Principal",
    "RecordNotFoundError",
    "Result",
    "StorageCapacityError",
    "StorageConfig",
    "StorageCorruptedError",
    "StorageError",
    "SystemClock",
    "UnauthorizedError",
    "ValidationError",
    "load_config",
    "uuid4_generator",
]

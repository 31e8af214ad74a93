# src/goaltrack/storage/__init__.py
"""
Storage module for the goaltrack library.

Provides the ordered key-value substrate the Goal and Milestone stores are
built on, with volatile (in-memory) and durable (JSON file) backends.
"""

from .base import DEFAULT_MAX_KEY_SIZE, DEFAULT_MAX_VALUE_SIZE, BaseRecordStorage
from .json_storage import JsonRecordStorage
from .manager import STORAGE_MAP, create_record_storage
from .memory import MemoryRecordStorage

__all__ = [
    "DEFAULT_MAX_KEY_SIZE",
    "DEFAULT_MAX_VALUE_SIZE",
    "BaseRecordStorage",
    "JsonRecordStorage",
    "MemoryRecordStorage",
    "STORAGE_MAP",
    "create_record_storage",
]

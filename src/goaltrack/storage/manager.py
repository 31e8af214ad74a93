# src/goaltrack/storage/manager.py
"""
Factory for record storage backends.

Maps the configured backend name to a storage class and opens one storage per
collection (goals, milestones) with the configured size limits.
"""

import logging
from typing import TYPE_CHECKING, Dict, Type

from ..exceptions import ConfigError
from .base import BaseRecordStorage
from .json_storage import JsonRecordStorage
from .memory import MemoryRecordStorage

if TYPE_CHECKING:
    from ..config.models import StorageConfig

logger = logging.getLogger(__name__)

# --- Mapping from config backend string to class ---
STORAGE_MAP: Dict[str, Type[BaseRecordStorage]] = {
    "memory": MemoryRecordStorage,
    "json": JsonRecordStorage,
}


def create_record_storage(config: "StorageConfig", model_type, collection: str) -> BaseRecordStorage:
    """
    Open the storage for one collection.

    Args:
        config: Storage section of the goaltrack configuration.
        model_type: Pydantic record class held by the collection.
        collection: Collection name; for the json backend this is also the
            file stem inside ``config.path``.

    Raises:
        ConfigError: If the backend name is not supported.
    """
    backend = config.backend.lower()
    if backend not in STORAGE_MAP:
        raise ConfigError(f"Unsupported storage backend configured: '{config.backend}'. "
                          f"Available backends: {list(STORAGE_MAP.keys())}")

    limits = {"max_key_size": config.max_key_size, "max_value_size": config.max_value_size}
    if backend == "json":
        path = config.goals_file.parent / f"{collection}.json"
        storage = JsonRecordStorage(path, model_type, collection=collection, **limits)
        logger.info("Opened json storage for '%s' at %s", collection, path)
    else:
        storage = MemoryRecordStorage(model_type, **limits)
        logger.info("Opened memory storage for '%s'", collection)
    return storage

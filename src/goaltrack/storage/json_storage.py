# src/goaltrack/storage/json_storage.py
"""
JSON file-based record storage.

Each collection lives in a single JSON file of the form::

    {"collection": "goals", "records": {"<id>": {...record...}, ...}}

The file is read once when the storage is opened and rewritten in full after
every mutation. Writes go to a temporary file that is then renamed over the
original, so a crash mid-write never leaves a truncated collection behind.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from ..exceptions import StorageCorruptedError, StorageError
from .base import BaseRecordStorage, M

logger = logging.getLogger(__name__)


class JsonRecordStorage(BaseRecordStorage[M]):
    """
    Durable record storage backed by one JSON file.

    Args:
        path: Location of the collection file. ``~`` is expanded and missing
            parent directories are created on first write.
        model_type: Pydantic model class stored in this collection.
        collection: Name recorded in the file, checked on load.
    """

    def __init__(self, path, model_type, collection: Optional[str] = None, **limits) -> None:
        super().__init__(model_type, **limits)
        self._path = Path(os.path.expanduser(str(path)))
        self._collection = collection or model_type.__name__.lower()
        self._data: Dict[str, bytes] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        if not self._path.exists():
            logger.debug("No collection file at %s; starting empty", self._path)
            return
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.error("Error decoding collection file %s: %s", self._path, e)
            raise StorageCorruptedError(f"Corrupted collection file '{self._path}': {e}") from e
        except OSError as e:
            logger.error("Error reading collection file %s: %s", self._path, e)
            raise StorageError(f"Failed to read collection file '{self._path}': {e}") from e

        if not isinstance(raw, dict) or not isinstance(raw.get("records"), dict):
            raise StorageCorruptedError(f"Collection file '{self._path}' has no 'records' mapping")
        stored_collection = raw.get("collection")
        if stored_collection and stored_collection != self._collection:
            raise StorageCorruptedError(
                f"Collection file '{self._path}' holds '{stored_collection}', expected '{self._collection}'"
            )

        self._data = {
            key: json.dumps(value, separators=(",", ":")).encode("utf-8")
            for key, value in raw["records"].items()
        }
        logger.info("Loaded %d %s records from %s", len(self._data), self._collection, self._path)

    def _write_all(self) -> None:
        """Atomically rewrite the collection file."""
        payload = {
            "collection": self._collection,
            "records": {key: json.loads(data) for key, data in sorted(self._data.items())},
        }
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as e:
            logger.error("Error writing collection file %s: %s", self._path, e)
            raise StorageError(f"Failed to write collection file '{self._path}': {e}") from e

    def _put_raw(self, key: str, data: bytes) -> Optional[bytes]:
        previous = self._data.get(key)
        self._data[key] = data
        try:
            self._write_all()
        except StorageError:
            if previous is None:
                del self._data[key]
            else:
                self._data[key] = previous
            raise
        return previous

    def _get_raw(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def _remove_raw(self, key: str) -> Optional[bytes]:
        if key not in self._data:
            return None
        previous = self._data.pop(key)
        try:
            self._write_all()
        except StorageError:
            self._data[key] = previous
            raise
        return previous

    def _iter_raw(self) -> Iterator[Tuple[str, bytes]]:
        for key in sorted(self._data):
            yield key, self._data[key]

    def __len__(self) -> int:
        return len(self._data)

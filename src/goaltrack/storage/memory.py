# src/goaltrack/storage/memory.py
"""
Volatile in-process record storage.

Useful for tests, embedding goaltrack in a longer-lived process that handles
its own persistence, or as the substrate for a single CLI invocation.
"""

from typing import Dict, Iterator, Optional, Tuple

from .base import BaseRecordStorage, M


class MemoryRecordStorage(BaseRecordStorage[M]):
    """Keeps encoded records in a dict; iteration is in sorted key order."""

    def __init__(self, model_type, **limits) -> None:
        super().__init__(model_type, **limits)
        self._data: Dict[str, bytes] = {}

    def _put_raw(self, key: str, data: bytes) -> Optional[bytes]:
        previous = self._data.get(key)
        self._data[key] = data
        return previous

    def _get_raw(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def _remove_raw(self, key: str) -> Optional[bytes]:
        return self._data.pop(key, None)

    def _iter_raw(self) -> Iterator[Tuple[str, bytes]]:
        for key in sorted(self._data):
            yield key, self._data[key]

    def __len__(self) -> int:
        return len(self._data)

    def clear(self) -> None:
        self._data.clear()

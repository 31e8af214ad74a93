# src/goaltrack/storage/base.py
"""
Abstract Base Class for record storage backends.

A record storage is an ordered key-value map from string ids to one Pydantic
record type. Backends only implement the raw byte-level primitives; this base
class owns encoding, decoding and the key/value size limits fixed at
construction time. Because values are stored encoded, every ``get`` returns a
fresh record that shares nothing with what was inserted.
"""

import abc
import logging
from typing import Generic, Iterator, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import StorageCapacityError, StorageCorruptedError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

DEFAULT_MAX_KEY_SIZE = 44
DEFAULT_MAX_VALUE_SIZE = 64 * 1024


class BaseRecordStorage(abc.ABC, Generic[M]):
    """
    Ordered map of ``str`` keys to records of ``model_type``.

    Args:
        model_type: Pydantic model class stored in this map.
        max_key_size: Maximum UTF-8 length of a key, in bytes.
        max_value_size: Maximum length of an encoded record, in bytes.
    """

    def __init__(
        self,
        model_type: Type[M],
        max_key_size: int = DEFAULT_MAX_KEY_SIZE,
        max_value_size: int = DEFAULT_MAX_VALUE_SIZE,
    ) -> None:
        if max_key_size <= 0 or max_value_size <= 0:
            raise ValueError("Storage size limits must be positive")
        self.model_type = model_type
        self.max_key_size = max_key_size
        self.max_value_size = max_value_size

    # --- Backend primitives ---

    @abc.abstractmethod
    def _put_raw(self, key: str, data: bytes) -> Optional[bytes]:
        """Store ``data`` under ``key``; return the previous bytes, if any."""

    @abc.abstractmethod
    def _get_raw(self, key: str) -> Optional[bytes]:
        """Return the bytes stored under ``key``, or None."""

    @abc.abstractmethod
    def _remove_raw(self, key: str) -> Optional[bytes]:
        """Delete ``key``; return the removed bytes, or None if absent."""

    @abc.abstractmethod
    def _iter_raw(self) -> Iterator[Tuple[str, bytes]]:
        """Yield ``(key, bytes)`` pairs in ascending key order."""

    def close(self) -> None:
        """Release backend resources. Default is a no-op."""

    # --- Public map interface ---

    def insert(self, key: str, record: M) -> Optional[M]:
        """
        Insert or replace the record under ``key``.

        Returns:
            The record previously stored under ``key``, or None.

        Raises:
            StorageCapacityError: If the key or encoded record is too large.
                The map is left unchanged.
        """
        self._check_key(key)
        data = self._encode(record)
        previous = self._put_raw(key, data)
        logger.debug("Stored %s '%s' (%d bytes)", self.model_type.__name__, key, len(data))
        return self._decode(previous) if previous is not None else None

    def get(self, key: str) -> Optional[M]:
        data = self._get_raw(key)
        return self._decode(data) if data is not None else None

    def remove(self, key: str) -> Optional[M]:
        data = self._remove_raw(key)
        if data is None:
            return None
        logger.debug("Removed %s '%s'", self.model_type.__name__, key)
        return self._decode(data)

    def contains_key(self, key: str) -> bool:
        return self._get_raw(key) is not None

    def keys(self) -> List[str]:
        return [key for key, _ in self._iter_raw()]

    def values(self) -> List[M]:
        return [self._decode(data) for _, data in self._iter_raw()]

    def items(self) -> List[Tuple[str, M]]:
        return [(key, self._decode(data)) for key, data in self._iter_raw()]

    def __len__(self) -> int:
        return sum(1 for _ in self._iter_raw())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains_key(key)

    # --- Encoding ---

    def _check_key(self, key: str) -> None:
        size = len(key.encode("utf-8"))
        if size > self.max_key_size:
            raise StorageCapacityError("key", size, self.max_key_size)

    def _encode(self, record: M) -> bytes:
        data = record.model_dump_json(by_alias=True).encode("utf-8")
        if len(data) > self.max_value_size:
            raise StorageCapacityError("value", len(data), self.max_value_size)
        return data

    def _decode(self, data: bytes) -> M:
        try:
            return self.model_type.model_validate_json(data)
        except PydanticValidationError as e:
            logger.error("Stored %s record failed validation: %s", self.model_type.__name__, e)
            raise StorageCorruptedError(f"Invalid stored {self.model_type.__name__} record: {e}") from e

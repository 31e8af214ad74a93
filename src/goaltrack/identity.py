# src/goaltrack/identity.py
"""
Caller identity and record id generation.

A :class:`Principal` is an opaque identity value over raw bytes. Two principals
are equal exactly when their bytes are equal; the textual form (CRC32 checksum
plus base32, grouped in dash-separated runs of five characters) exists only for
display, configuration and the CLI, and is never used for owner comparison.

Example:
    >>> p = Principal.from_text("2vxsx-fae")
    >>> p == Principal.anonymous()
    True
"""

from __future__ import annotations

import base64
import binascii
import secrets
import uuid
import zlib
from typing import Any, Protocol, runtime_checkable

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

MAX_PRINCIPAL_LENGTH = 29
_ANONYMOUS_TAG = b"\x04"
_SELF_AUTHENTICATING_TAG = b"\x02"


class Principal:
    """
    Opaque, unforgeable identity of a calling entity.

    Args:
        raw: Identity bytes, at most 29 bytes long.

    Raises:
        TypeError: If ``raw`` is not bytes.
        ValueError: If ``raw`` is too long.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes) -> None:
        if not isinstance(raw, (bytes, bytearray)):
            raise TypeError(f"Principal requires bytes, got {type(raw).__name__}")
        if len(raw) > MAX_PRINCIPAL_LENGTH:
            raise ValueError(
                f"Principal is {len(raw)} bytes long, maximum is {MAX_PRINCIPAL_LENGTH}"
            )
        self._raw = bytes(raw)

    @property
    def raw(self) -> bytes:
        return self._raw

    @classmethod
    def anonymous(cls) -> Principal:
        """The identity used for unauthenticated callers."""
        return cls(_ANONYMOUS_TAG)

    @classmethod
    def generate(cls) -> Principal:
        """A fresh random self-authenticating style principal."""
        return cls(secrets.token_bytes(28) + _SELF_AUTHENTICATING_TAG)

    @classmethod
    def from_text(cls, text: str) -> Principal:
        """
        Parse the canonical textual form.

        Raises:
            ValueError: If the text is not valid base32, fails the checksum,
                or is not in canonical (lowercase, grouped) form.
        """
        compact = text.replace("-", "").upper()
        padded = compact + "=" * (-len(compact) % 8)
        try:
            data = base64.b32decode(padded)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid principal text '{text}': {e}") from e
        if len(data) < 4:
            raise ValueError(f"Invalid principal text '{text}': too short")

        checksum, raw = data[:4], data[4:]
        if zlib.crc32(raw).to_bytes(4, "big") != checksum:
            raise ValueError(f"Invalid principal text '{text}': checksum mismatch")

        principal = cls(raw)
        if principal.to_text() != text:
            raise ValueError(f"Principal text '{text}' is not in canonical form")
        return principal

    def to_text(self) -> str:
        checksum = zlib.crc32(self._raw).to_bytes(4, "big")
        encoded = base64.b32encode(checksum + self._raw).decode("ascii").rstrip("=").lower()
        return "-".join(encoded[i:i + 5] for i in range(0, len(encoded), 5))

    def is_anonymous(self) -> bool:
        return self._raw == _ANONYMOUS_TAG

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Principal):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"Principal('{self.to_text()}')"

    @classmethod
    def _coerce(cls, value: Any) -> Principal:
        if isinstance(value, Principal):
            return value
        if isinstance(value, str):
            return cls.from_text(value)
        if isinstance(value, (bytes, bytearray)):
            return cls(value)
        raise ValueError(f"Cannot interpret {type(value).__name__} as a Principal")

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        # Accept Principal, canonical text or raw bytes; always serialize as text.
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda p: p.to_text()
            ),
        )


@runtime_checkable
class IdGenerator(Protocol):
    """Produces collision-free record ids."""

    def __call__(self) -> str: ...


def uuid4_generator() -> str:
    """Default id generator: a random UUID4 string (36 characters)."""
    return str(uuid.uuid4())

"""Type aliases and value types for redis-typed.

Keys, fields, members and values are binary strings throughout. The small
tagged types below carry the optional flags of write commands so that the
command layer can place them on the wire without guessing.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum, StrEnum
from typing import Any, NamedTuple, Protocol, runtime_checkable

# =============================================================================
# Wire-level types
# =============================================================================

# Binary string - matches the bytes-like part of redis.typing.KeyT
type KeyT = bytes | bytearray | memoryview

# Untyped RESP2 reply: null, integer, bulk/status string, or array of those
type Reply = None | int | bytes | list[Reply]


@runtime_checkable
class ConnectionProtocol(Protocol):
    """What the command layer needs from a connection: one request, one reply."""

    async def execute(self, *args: Any) -> Reply: ...


class KeyType(StrEnum):
    """Redis key data types (used by the ``SCAN ... TYPE`` filter)."""

    STRING = "string"
    LIST = "list"
    SET = "set"
    HASH = "hash"
    ZSET = "zset"
    STREAM = "stream"


# =============================================================================
# Write options
# =============================================================================


class ExpireUnit(StrEnum):
    """Expiry flag of ``SET``."""

    SECONDS = "EX"
    MILLISECONDS = "PX"
    UNIX_SECONDS = "EXAT"
    UNIX_MILLISECONDS = "PXAT"
    KEEP_TTL = "KEEPTTL"


@dataclass(frozen=True)
class Expire:
    """Expire directive attached to a write.

    Build one with the classmethods rather than the constructor::

        Expire.seconds(10)
        Expire.milliseconds(timedelta(minutes=1))
        Expire.unix_seconds(datetime(2030, 1, 1, tzinfo=UTC))
        Expire.keep_ttl()
    """

    unit: ExpireUnit
    value: int | None = None

    def __post_init__(self) -> None:
        if self.unit is ExpireUnit.KEEP_TTL:
            if self.value is not None:
                raise ValueError("KEEPTTL takes no value")
            return
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Expire value must be an int, got {type(self.value).__name__}")
        if self.value <= 0:
            raise ValueError(f"Expire value must be positive, got {self.value}")

    @classmethod
    def seconds(cls, value: int | timedelta) -> Expire:
        if isinstance(value, timedelta):
            value = int(value.total_seconds())
        return cls(ExpireUnit.SECONDS, value)

    @classmethod
    def milliseconds(cls, value: int | timedelta) -> Expire:
        if isinstance(value, timedelta):
            value = int(value.total_seconds() * 1000)
        return cls(ExpireUnit.MILLISECONDS, value)

    @classmethod
    def unix_seconds(cls, when: int | datetime) -> Expire:
        if isinstance(when, datetime):
            when = int(when.timestamp())
        return cls(ExpireUnit.UNIX_SECONDS, when)

    @classmethod
    def unix_milliseconds(cls, when: int | datetime) -> Expire:
        if isinstance(when, datetime):
            when = int(when.timestamp() * 1000)
        return cls(ExpireUnit.UNIX_MILLISECONDS, when)

    @classmethod
    def keep_ttl(cls) -> Expire:
        return cls(ExpireUnit.KEEP_TTL)

    def to_args(self) -> list[str | int]:
        if self.value is None:
            return [self.unit.value]
        return [self.unit.value, self.value]


class WriteCondition(StrEnum):
    """Write condition for ``SET`` and write mode for ``ZADD``.

    ``ALWAYS`` adds no flag to the request.
    """

    ALWAYS = ""
    IF_EXISTS = "XX"
    IF_ABSENT = "NX"


class ZAddReturn(StrEnum):
    """What ``ZADD`` counts in its reply."""

    ADDED = ""
    CHANGED = "CH"


class Block(Enum):
    """Timeout variant for blocking pops that wait without limit."""

    FOREVER = "forever"


# =============================================================================
# Result records
# =============================================================================


class MemberScore(NamedTuple):
    """A sorted set member with its score."""

    member: bytes
    score: float


class HashEntry(NamedTuple):
    """A hash field with its value."""

    key: bytes
    value: bytes


class PoppedItem(NamedTuple):
    """Result of a blocking pop: the list that yielded and the element."""

    key: bytes
    value: bytes


class Limit(NamedTuple):
    """``LIMIT offset count`` of range-by-score queries."""

    offset: int
    count: int

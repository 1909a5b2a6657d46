from __future__ import annotations

from typing import TYPE_CHECKING, Any

from redis_typed.codec import as_key
from redis_typed.decoders import (
    decode_bytes_list,
    decode_int,
    decode_int_ignored,
    decode_ok,
    decode_optional_bytes,
    decode_optional_bytes_list,
    decode_set,
    scan_page_decoder,
)
from redis_typed.operation import Operation
from redis_typed.scan import SCAN_START, ScanStream
from redis_typed.types import Expire, KeyType, WriteCondition

if TYPE_CHECKING:
    from collections.abc import Iterable

    from redis_typed.types import KeyT


class StringCommandsMixin:
    """String values and keyspace commands."""

    # Type hints for base class attributes
    _execute: Any
    _as_keys: Any
    _as_int: Any
    _scan_options: Any

    def get(self, key: KeyT) -> Operation[bytes | None]:
        """Get the value of ``key``, or None if it does not exist."""
        return self._execute(decode_optional_bytes, "GET", as_key(key))

    def set(
        self,
        key: KeyT,
        value: KeyT,
        expire: Expire | None = None,
        condition: WriteCondition = WriteCondition.ALWAYS,
    ) -> Operation[bool]:
        """Set ``key`` to ``value``.

        Args:
            key: The key
            value: The value
            expire: Optional expire directive (``EX``/``PX``/``EXAT``/``PXAT``/``KEEPTTL``)
            condition: ``IF_ABSENT`` (NX) or ``IF_EXISTS`` (XX) to make the write conditional

        Returns:
            True if the value was written, False if the condition was not met.
            An unconditional set always returns True.
        """
        args: list[Any] = ["SET", as_key(key), as_key(value)]
        if expire is not None:
            if not isinstance(expire, Expire):
                raise TypeError(f"expire must be an Expire, got {type(expire).__name__}")
            args.extend(expire.to_args())
        condition = WriteCondition(condition)
        if condition is not WriteCondition.ALWAYS:
            args.append(condition.value)
        return self._execute(decode_set, *args)

    def incr(self, key: KeyT, delta: int = 1) -> Operation[int]:
        """Increment the integer at ``key`` by ``delta``.

        A missing key counts as 0, so the first ``incr`` returns ``delta``.
        """
        delta = self._as_int("delta", delta)
        if delta == 1:
            return self._execute(decode_int, "INCR", as_key(key))
        return self._execute(decode_int, "INCRBY", as_key(key), delta)

    def mget(self, keys: Iterable[KeyT]) -> Operation[list[bytes | None]]:
        """Get several values; one slot per key, None where a key is missing."""
        return self._execute(decode_optional_bytes_list, "MGET", *self._as_keys(keys))

    def delete(self, keys: Iterable[KeyT]) -> Operation[None]:
        """Delete keys. An empty ``keys`` completes without a round trip."""
        nkeys = self._as_keys(keys, allow_empty=True)
        if not nkeys:
            return Operation.resolved(None)
        return self._execute(decode_int_ignored, "DEL", *nkeys)

    def keys(self, pattern: KeyT) -> Operation[list[bytes]]:
        """Get all keys matching a glob-style ``pattern`` (unordered)."""
        return self._execute(decode_bytes_list, "KEYS", as_key(pattern))

    def flushdb(self) -> Operation[None]:
        """Remove every key of the selected database."""
        return self._execute(decode_ok, "FLUSHDB")

    def scan(
        self,
        *,
        match: KeyT | None = None,
        count: int | None = None,
        key_type: KeyType | str | None = None,
        cursor: KeyT = SCAN_START,
    ) -> ScanStream[bytes]:
        """Stream the keyspace in batches using ``SCAN``.

        Args:
            match: Glob-style pattern to filter keys
            count: Hint for number of keys per batch
            key_type: Only return keys holding this type
            cursor: Resume from a cursor of an earlier batch

        Returns:
            A lazy stream of batches of keys; see ``redis_typed.scan``.
        """
        tail = self._scan_options(match, count)
        if key_type is not None:
            tail.extend(["TYPE", KeyType(key_type).value])
        decoder = scan_page_decoder(decode_bytes_list)
        return ScanStream(lambda c: self._execute(decoder, "SCAN", c, *tail), cursor=cursor)

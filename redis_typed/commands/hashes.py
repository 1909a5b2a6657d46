from __future__ import annotations

from typing import TYPE_CHECKING, Any

from redis_typed.codec import as_key
from redis_typed.decoders import (
    decode_hash_entries,
    decode_int,
    decode_optional_bytes,
    scan_page_decoder,
)
from redis_typed.scan import SCAN_START, ScanStream

if TYPE_CHECKING:
    from redis_typed.operation import Operation
    from redis_typed.types import HashEntry, KeyT


class HashCommandsMixin:
    """Hash (field/value map) commands."""

    # Type hints for base class attributes
    _execute: Any
    _scan_options: Any

    def hset(self, key: KeyT, field: KeyT, value: KeyT) -> Operation[int]:
        """Set one hash field.

        Returns:
            1 if the field was created, 0 if an existing field was overwritten.
        """
        return self._execute(decode_int, "HSET", as_key(key), as_key(field), as_key(value))

    def hget(self, key: KeyT, field: KeyT) -> Operation[bytes | None]:
        """Get a hash field, or None if the field or hash does not exist."""
        return self._execute(decode_optional_bytes, "HGET", as_key(key), as_key(field))

    def hgetall(self, key: KeyT) -> Operation[list[HashEntry]]:
        """Get all fields and values of a hash, in the server's order."""
        return self._execute(decode_hash_entries, "HGETALL", as_key(key))

    def hscan(
        self,
        key: KeyT,
        *,
        match: KeyT | None = None,
        count: int | None = None,
        cursor: KeyT = SCAN_START,
    ) -> ScanStream[HashEntry]:
        """Stream the fields of a hash in batches using ``HSCAN``."""
        nkey = as_key(key)
        tail = self._scan_options(match, count)
        decoder = scan_page_decoder(decode_hash_entries)
        return ScanStream(lambda c: self._execute(decoder, "HSCAN", nkey, c, *tail), cursor=cursor)

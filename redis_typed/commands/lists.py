from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from redis_typed.codec import as_key
from redis_typed.decoders import (
    decode_bytes_list,
    decode_int,
    decode_ok,
    decode_optional_bytes,
    decode_popped,
)
from redis_typed.types import Block

if TYPE_CHECKING:
    from collections.abc import Iterable

    from redis_typed.operation import Operation
    from redis_typed.types import KeyT, PoppedItem


class ListCommandsMixin:
    """List commands, including the blocking pops."""

    # Type hints for base class attributes
    _execute: Any
    _as_keys: Any
    _as_int: Any

    def lpush(self, key: KeyT, value: KeyT) -> Operation[int]:
        """Push a value to the head of a list; returns the new length."""
        return self._execute(decode_int, "LPUSH", as_key(key), as_key(value))

    def rpush(self, key: KeyT, value: KeyT) -> Operation[int]:
        """Push a value to the tail of a list; returns the new length."""
        return self._execute(decode_int, "RPUSH", as_key(key), as_key(value))

    def lpop(self, key: KeyT) -> Operation[bytes | None]:
        """Pop from the head of a list without blocking; None if empty."""
        return self._execute(decode_optional_bytes, "LPOP", as_key(key))

    def rpop(self, key: KeyT) -> Operation[bytes | None]:
        """Pop from the tail of a list without blocking; None if empty."""
        return self._execute(decode_optional_bytes, "RPOP", as_key(key))

    def lrange(self, key: KeyT, start: int, stop: int) -> Operation[list[bytes]]:
        """Get elements ``start`` through ``stop`` inclusive; negative indexes count from the end."""
        start = self._as_int("start", start)
        stop = self._as_int("stop", stop)
        return self._execute(decode_bytes_list, "LRANGE", as_key(key), start, stop)

    def ltrim(self, key: KeyT, start: int, stop: int) -> Operation[None]:
        """Keep only elements ``start`` through ``stop``; an empty range empties the list."""
        start = self._as_int("start", start)
        stop = self._as_int("stop", stop)
        return self._execute(decode_ok, "LTRIM", as_key(key), start, stop)

    def blpop(self, keys: Iterable[KeyT], timeout: float | Block) -> Operation[PoppedItem | None]:
        """Pop from the head of the first non-empty list, waiting if all are empty.

        Args:
            keys: Lists to pop from, checked in order
            timeout: Seconds to wait (> 0), or ``Block.FOREVER``. The server
                enforces it; use ``lpop`` for a pop that never waits.

        Returns:
            ``PoppedItem(key, value)`` naming the list that yielded, or None
            if the timeout expired.

        Cancelling the operation only stops the caller waiting: the request
        stays blocked on the server and may still pop an element.
        """
        return self._blocking_pop("BLPOP", keys, timeout)

    def brpop(self, keys: Iterable[KeyT], timeout: float | Block) -> Operation[PoppedItem | None]:
        """Pop from the tail of the first non-empty list, waiting if all are empty.

        Same arguments and result as ``blpop``.
        """
        return self._blocking_pop("BRPOP", keys, timeout)

    def _blocking_pop(
        self,
        command: str,
        keys: Iterable[KeyT],
        timeout: float | Block,
    ) -> Operation[PoppedItem | None]:
        nkeys = self._as_keys(keys)
        return self._execute(decode_popped, command, *nkeys, self._wire_timeout(timeout))

    @staticmethod
    def _wire_timeout(timeout: float | Block) -> int | float:
        # 0 means "forever" on the wire, so it is only reachable via Block.FOREVER
        if timeout is Block.FOREVER:
            return 0
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise TypeError(f"timeout must be a number of seconds or Block.FOREVER, got {type(timeout).__name__}")
        if math.isinf(timeout):
            raise ValueError("Use Block.FOREVER to wait without a timeout")
        if not timeout > 0:
            msg = f"timeout must be positive, got {timeout}; use lpop/rpop to pop without waiting"
            raise ValueError(msg)
        return timeout

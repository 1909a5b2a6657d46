from __future__ import annotations

from typing import TYPE_CHECKING, Any

from redis_typed.codec import as_key
from redis_typed.operation import Command, Operation

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from redis_typed.types import ConnectionProtocol, KeyT, Reply


class CommandsBase:
    """Base of the typed command surface.

    Every command method validates its arguments, builds the wire request,
    pairs it with the decoder for its reply and starts it as an
    ``Operation``. Argument errors (``TypeError``/``ValueError``) are raised
    before anything is sent.

    The client borrows the connection: it never opens or closes it.
    """

    def __init__(self, connection: ConnectionProtocol) -> None:
        self._connection = connection

    @property
    def connection(self) -> ConnectionProtocol:
        return self._connection

    def _execute[T](self, decoder: Callable[[Reply], T], *args: Any) -> Operation[T]:
        return Operation.start(self._connection.execute, Command(args, decoder))

    # --- Argument helpers ---

    @staticmethod
    def _as_keys(keys: Iterable[KeyT], *, allow_empty: bool = False, what: str = "keys") -> list[bytes]:
        if isinstance(keys, (bytes, bytearray, memoryview, str)):
            raise TypeError(f"{what} must be a sequence of binary strings, not a single value")
        nkeys = [as_key(k) for k in keys]
        if not nkeys and not allow_empty:
            raise ValueError(f"At least one of {what} is required")
        return nkeys

    @staticmethod
    def _as_int(name: str, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{name} must be an int, got {type(value).__name__}")
        return value

    def _scan_options(self, match: KeyT | None, count: int | None) -> list[Any]:
        options: list[Any] = []
        if match is not None:
            options.extend(["MATCH", as_key(match)])
        if count is not None:
            count = self._as_int("count", count)
            if count <= 0:
                raise ValueError(f"count must be positive, got {count}")
            options.extend(["COUNT", count])
        return options

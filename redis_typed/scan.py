"""Lazy streams over the server's cursor-based scans.

A ``ScanStream`` turns ``SCAN``, ``HSCAN`` and ``ZSCAN`` into an async
iterator of batches, one round trip per batch::

    async for batch in client.scan(match=b"user:*", count=500):
        for key in batch.items:
            ...

The server's cursor protocol gives these guarantees and no more: every
element present for the whole scan is returned at least once, elements may be
returned more than once, and elements added or removed while scanning may or
may not show up. Batches are passed through as received, duplicates
included, and may be empty while the cursor is still live. Callers needing a
snapshot deduplicate themselves.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from redis_typed.codec import as_key

if TYPE_CHECKING:
    from collections.abc import Callable

    from redis_typed.decoders import ScanPage
    from redis_typed.operation import Operation
    from redis_typed.types import KeyT

logger = logging.getLogger(__name__)

# Cursor that starts a scan, and that the server returns when the scan is over
SCAN_START = b"0"


@dataclass(frozen=True)
class Batch[T]:
    """Items from one round trip, with the cursor that continues after them.

    Pass ``cursor`` back as ``cursor=`` to the same scan command to resume
    from this point with a new stream.
    """

    items: list[T]
    cursor: bytes

    @property
    def is_last(self) -> bool:
        return self.cursor == SCAN_START


class ScanStream[T]:
    """Non-restartable async iterator of scan batches.

    Nothing is sent until the first batch is requested. Iteration ends with
    ``StopAsyncIteration`` once the server returns the final cursor. Any
    error is raised from the ``__anext__`` call that hit it and ends the
    stream; ``failed`` records which way it ended.

    A stream may be dropped at any point: no connection state is held
    between batches. ``aclose`` additionally cancels a batch in flight.
    """

    def __init__(
        self,
        fetch: Callable[[bytes], Operation[ScanPage[T]]],
        *,
        cursor: KeyT = SCAN_START,
    ) -> None:
        self._fetch = fetch
        self._cursor = as_key(cursor)
        self._pending: Operation[ScanPage[T]] | None = None
        self._finished = False
        self._failed = False
        self._aborted = False
        self._round_trips = 0

    @property
    def cursor(self) -> bytes:
        """Cursor the next batch will be requested with."""
        return self._cursor

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def failed(self) -> bool:
        """True when the stream ended because of an error."""
        return self._failed

    def __aiter__(self) -> ScanStream[T]:
        return self

    async def __anext__(self) -> Batch[T]:
        if self._finished:
            raise StopAsyncIteration
        if self._pending is not None:
            raise RuntimeError("A scan batch is already being fetched")

        pending = self._pending = self._fetch(self._cursor)
        try:
            page = await pending
        except asyncio.CancelledError:
            self._finished = True
            if self._aborted:
                # aclose() from elsewhere: end quietly
                raise StopAsyncIteration from None
            raise
        except BaseException:
            self._finished = True
            self._failed = True
            raise
        finally:
            self._pending = None

        self._round_trips += 1
        self._cursor = page.cursor
        if page.cursor == SCAN_START:
            self._finished = True
            logger.debug("Scan finished after %d round trips", self._round_trips)
        return Batch(page.items, page.cursor)

    async def aclose(self) -> None:
        """Abandon the stream, cancelling a batch request in flight."""
        self._finished = True
        self._aborted = True
        if self._pending is not None:
            self._pending.cancel()

    async def collect(self) -> list[T]:
        """Drain the remaining batches into one list (duplicates kept)."""
        items: list[T] = []
        async for batch in self:
            items.extend(batch.items)
        return items

    def __repr__(self) -> str:
        state = "failed" if self._failed else "finished" if self._finished else "open"
        return f"<ScanStream cursor={self._cursor!r} {state}>"

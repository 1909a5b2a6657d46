"""Cancellable asynchronous command execution.

Every command runs as one ``Operation``: one request, exactly one reply, and
exactly one outcome delivered to the caller, unless the caller cancels first.

Cancelling an operation detaches the caller from it. It does not take the
request back: if the request was sent, the server still executes it. The
round trip keeps running in the background until its reply has been read and
discarded, so the pooled connection goes back to the pool in a clean state
and replies to later requests are never mismatched.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from redis_typed.exceptions import DecodeError, TransportError

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine, Generator

    from redis_typed.types import Reply

logger = logging.getLogger(__name__)

# Round trips outlive the operations that started them once cancelled.
# The event loop only keeps weak references to tasks, so hold them here.
_background_round_trips: set[asyncio.Task[Any]] = set()


@dataclass(frozen=True)
class Command[T]:
    """A wire request paired with the decoder for its reply."""

    args: tuple[Any, ...]
    decoder: Callable[[Reply], T]

    @property
    def name(self) -> str:
        return str(self.args[0]) if self.args else ""


class Operation[T]:
    """Handle to one in-flight command.

    Await it for the decoded result, or register callbacks with
    ``subscribe``. Either way, ``cancel`` before completion guarantees that
    no result and no error is delivered afterwards.

    Example::

        op = client.blpop([b"jobs"], timeout=30)
        ...
        op.cancel()  # the caller stops waiting; the server may still pop
    """

    def __init__(self, future: asyncio.Future[T], name: str = "") -> None:
        self._future = future
        self._name = name

    @classmethod
    def start(
        cls,
        execute: Callable[..., Coroutine[Any, Any, Reply]],
        command: Command[T],
    ) -> Operation[T]:
        """Send ``command`` through ``execute`` right away and decode its reply.

        Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        operation = cls(loop.create_future(), command.name)
        task = loop.create_task(execute(*command.args))
        _background_round_trips.add(task)
        task.add_done_callback(_background_round_trips.discard)
        task.add_done_callback(lambda t: operation._complete(t, command.decoder))
        return operation

    @classmethod
    def resolved(cls, value: T) -> Operation[T]:
        """An operation that already succeeded without touching the wire."""
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        future.set_result(value)
        return cls(future)

    def _complete(self, task: asyncio.Task[Reply], decoder: Callable[[Reply], T]) -> None:
        if self._future.done():
            # Cancelled by the caller: consume the outcome so it isn't reported
            # as never retrieved, and drop it.
            if not task.cancelled() and task.exception() is not None:
                logger.debug("Discarding error of cancelled %s: %r", self._name, task.exception())
            else:
                logger.debug("Discarding reply of cancelled %s", self._name)
            return

        if task.cancelled():
            self._future.set_exception(TransportError(f"{self._name} round trip was cancelled"))
            return
        exc = task.exception()
        if exc is not None:
            self._future.set_exception(exc)
            return
        try:
            value = decoder(task.result())
        except DecodeError as e:
            self._future.set_exception(e)
        except Exception as e:
            error = DecodeError(f"Cannot decode {self._name} reply: {e!r}", reply=task.result())
            error.__cause__ = e
            self._future.set_exception(error)
        else:
            self._future.set_result(value)

    # =========================================================================
    # Caller side
    # =========================================================================

    def __await__(self) -> Generator[Any, None, T]:
        return self._future.__await__()

    def subscribe(
        self,
        on_success: Callable[[T], object],
        on_failure: Callable[[BaseException], object],
    ) -> None:
        """Call exactly one of the handlers when the operation completes.

        Neither handler is called if the operation is cancelled first.
        """

        def _dispatch(future: asyncio.Future[T]) -> None:
            if future.cancelled():
                return
            exc = future.exception()
            if exc is not None:
                on_failure(exc)
            else:
                on_success(future.result())

        self._future.add_done_callback(_dispatch)

    def cancel(self) -> bool:
        """Stop waiting for the reply.

        Returns:
            True if this call cancelled the operation, False if it had
            already completed or been cancelled.
        """
        if self._future.done():
            return False
        logger.debug("Cancelling %s", self._name)
        return self._future.cancel()

    def done(self) -> bool:
        return self._future.done()

    def cancelled(self) -> bool:
        return self._future.cancelled()

    def __repr__(self) -> str:
        if self._future.cancelled():
            state = "cancelled"
        elif self._future.done():
            state = "done"
        else:
            state = "pending"
        return f"<Operation {self._name or '-'} {state}>"

"""A connection that replays canned replies instead of talking to a server."""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Any

import pytest

from redis_typed import Client
from redis_typed.operation import _background_round_trips
from redis_typed.types import Reply


class Gate:
    """A reply that is held back until ``open`` is called."""

    def __init__(self, reply: Reply | BaseException = None) -> None:
        self.reply = reply
        self.opened = asyncio.Event()

    def open(self) -> None:
        self.opened.set()


class ScriptedConnection:
    """Records every request and answers with the next scripted reply.

    A scripted exception instance is raised instead of returned.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.answered: list[tuple[Any, ...]] = []
        self._replies: deque[Reply | BaseException | Gate] = deque()

    def reply(self, *replies: Reply | BaseException | Gate) -> None:
        self._replies.extend(replies)

    def hold(self, reply: Reply | BaseException = None) -> Gate:
        gate = Gate(reply)
        self._replies.append(gate)
        return gate

    @property
    def last_call(self) -> tuple[Any, ...]:
        return self.calls[-1]

    async def execute(self, *args: Any) -> Reply:
        self.calls.append(args)
        reply = self._replies.popleft()
        if isinstance(reply, Gate):
            await reply.opened.wait()
            reply = reply.reply
        self.answered.append(args)
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture
def scripted() -> ScriptedConnection:
    return ScriptedConnection()


@pytest.fixture
def fake_client(scripted: ScriptedConnection) -> Client:
    """Client whose requests are answered by the ``scripted`` connection."""
    return Client(scripted)


async def drain_round_trips() -> None:
    """Wait until every round trip started so far has finished."""
    await asyncio.gather(*list(_background_round_trips), return_exceptions=True)
    await asyncio.sleep(0)

"""Live connection and client fixtures."""

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

import pytest_asyncio

from redis_typed import Client, KeyValueConnection, RedisConnection, ValkeyConnection

if TYPE_CHECKING:
    from tests.fixtures.containers import RedisContainerInfo

# Connection classes keyed by client library
CONNECTION_CLASSES: dict[str, type[KeyValueConnection]] = {
    "redis": RedisConnection,
    "valkey": ValkeyConnection,
}


@pytest_asyncio.fixture
async def connection(redis_container: "RedisContainerInfo") -> AsyncIterator[KeyValueConnection]:
    """Connection to the test container, disconnected after the test."""
    connection_class = CONNECTION_CLASSES[redis_container.client_library]
    async with await connection_class.connect(redis_container.url) as conn:
        yield conn


@pytest_asyncio.fixture
async def client(connection: KeyValueConnection) -> AsyncIterator[Client]:
    """Client on an empty database."""
    client = Client(connection)
    await client.flushdb()
    yield client
    if not connection.closed:
        await client.flushdb()

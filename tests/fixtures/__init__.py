"""Test fixtures for redis-typed."""

from tests.fixtures.client import client, connection
from tests.fixtures.containers import (
    RedisContainerInfo,
    redis_container,
    redis_container_factory,
    redis_images,
)
from tests.fixtures.scripted import Gate, ScriptedConnection, fake_client, scripted

__all__ = [
    "Gate",
    "RedisContainerInfo",
    "ScriptedConnection",
    "client",
    "connection",
    "fake_client",
    "redis_container",
    "redis_container_factory",
    "redis_images",
    "scripted",
]

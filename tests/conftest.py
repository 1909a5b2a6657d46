"""Pytest configuration for redis-typed tests."""

import sys
from pathlib import Path

from tests.fixtures import (
    client,
    connection,
    fake_client,
    redis_container,
    redis_container_factory,
    redis_images,
    scripted,
)

# Re-export fixtures so pytest can discover them
__all__ = [
    "client",
    "connection",
    "fake_client",
    "redis_container",
    "redis_container_factory",
    "redis_images",
    "scripted",
]


def pytest_configure(config):
    """Add tests directory to Python path."""
    sys.path.insert(0, str(Path(__file__).absolute().parent))

VERSION = (0, 1, 0)
__version__ = ".".join(map(str, VERSION))

from redis_typed.codec import Encoding, as_key, to_bytes, to_text  # noqa: E402
from redis_typed.commands import Client  # noqa: E402
from redis_typed.connection import KeyValueConnection, RedisConnection, ValkeyConnection  # noqa: E402
from redis_typed.exceptions import DecodeError, RedisTypedError, StoreError, TransportError  # noqa: E402
from redis_typed.operation import Operation  # noqa: E402
from redis_typed.scan import SCAN_START, Batch, ScanStream  # noqa: E402
from redis_typed.scores import LexBound, ScoreBound  # noqa: E402
from redis_typed.types import (  # noqa: E402
    Block,
    Expire,
    HashEntry,
    KeyType,
    Limit,
    MemberScore,
    PoppedItem,
    WriteCondition,
    ZAddReturn,
)


async def connect(url: str, **options) -> Client:
    """Open a ``RedisConnection`` to ``url`` and wrap it in a ``Client``.

    The caller owns the connection: close it with
    ``await client.connection.disconnect()``.
    """
    connection = await RedisConnection.connect(url, **options)
    return Client(connection)


__all__ = [
    "SCAN_START",
    "VERSION",
    "Batch",
    "Block",
    "Client",
    "DecodeError",
    "Encoding",
    "Expire",
    "HashEntry",
    "KeyType",
    "KeyValueConnection",
    "LexBound",
    "Limit",
    "MemberScore",
    "Operation",
    "PoppedItem",
    "RedisConnection",
    "RedisTypedError",
    "ScanStream",
    "ScoreBound",
    "StoreError",
    "TransportError",
    "ValkeyConnection",
    "WriteCondition",
    "ZAddReturn",
    "__version__",
    "as_key",
    "connect",
    "to_bytes",
    "to_text",
]

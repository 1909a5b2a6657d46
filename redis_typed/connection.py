"""Connections for Redis-compatible servers.

Architecture:
- KeyValueConnection: base class with all logic, library-agnostic
- RedisConnection: sets class attributes for redis-py
- ValkeyConnection: sets class attributes for valkey-py

A connection wraps an asyncio client of the selected library. The library
owns sockets, RESP parsing and pooling; ``execute`` borrows one pooled
socket per request, so any number of commands (blocking ones included) may
be in flight on one ``KeyValueConnection`` at the same time.

Replies are requested raw: ``decode_responses`` off and RESP2, so every reply
is ``None``, ``int``, ``bytes`` or a list of those.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Self

from redis_typed.exceptions import (
    DecodeError,
    StoreError,
    TransportError,
    _library_exceptions,
    _protocol_exceptions,
    _response_exceptions,
    _transport_exceptions,
)

if TYPE_CHECKING:
    from types import TracebackType

    from redis_typed.types import Reply

# Try to import redis-py and/or valkey-py
_REDIS_AVAILABLE = False
_VALKEY_AVAILABLE = False

try:
    import redis.asyncio

    _REDIS_AVAILABLE = True
except ImportError:
    redis = None  # type: ignore[assignment]

try:
    import valkey.asyncio

    _VALKEY_AVAILABLE = True
except ImportError:
    valkey = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)


# =============================================================================
# KeyValueConnection - base class (library-agnostic)
# =============================================================================


class KeyValueConnection:
    """One session with the server, owned by the caller.

    Subclasses must set:
    - _lib: The library module (e.g., redis or valkey)
    - _client_class: The asyncio client class (e.g., redis.asyncio.Redis)
    - _pool_class: The asyncio connection pool class

    Commands borrow the connection; only its owner calls ``disconnect``.
    """

    # Class attributes - subclasses override these
    _lib: Any = None
    _client_class: type | None = None
    _pool_class: type | None = None

    def __init__(self, client: Any) -> None:
        """Wrap an already constructed asyncio client.

        Args:
            client: A ``redis.asyncio.Redis`` (or valkey equivalent). Its pool
                must not decode responses and must speak RESP2.
        """
        self._check_pool_options(client.connection_pool.connection_kwargs)
        self._client = client
        self._closed = False

    @staticmethod
    def _check_pool_options(kwargs: dict[str, Any]) -> None:
        if kwargs.get("decode_responses"):
            raise ValueError("decode_responses must be off: keys and values are binary strings")
        if int(kwargs.get("protocol") or 2) != 2:  # noqa: PLR2004
            raise ValueError("Only RESP2 replies are supported (protocol=2)")

    @classmethod
    async def connect(
        cls,
        url: str,
        *,
        pool_class: type | None = None,
        parser_class: type | None = None,
        **options: Any,
    ) -> Self:
        """Open a connection and check that the server answers.

        Args:
            url: Server URL, e.g. ``redis://localhost:6379/0``
            pool_class: Connection pool class (defaults to the library's)
            parser_class: Parser class passed to the pool
            **options: Additional options passed to the connection pool
                (``socket_timeout``, ``max_connections``, ``password``...)

        Raises:
            TransportError: If the server cannot be reached.
        """
        pool_class = pool_class or cls._pool_class
        if pool_class is None or cls._client_class is None:
            msg = "Subclasses must set _pool_class and _client_class. Use RedisConnection or ValkeyConnection."
            raise RuntimeError(msg)

        pool_options = {**options, "decode_responses": False, "protocol": 2}
        if parser_class is not None:
            pool_options["parser_class"] = parser_class
        pool = pool_class.from_url(url, **pool_options)  # type: ignore[attr-defined]

        connection = cls(cls._client_class(connection_pool=pool))
        try:
            await connection.execute("PING")
        except BaseException:
            await connection.disconnect()
            raise
        logger.debug("Connected to %s", url)
        return connection

    async def _checkout(self, pool: Any, command_name: str) -> Any:
        return await pool.get_connection()

    async def execute(self, *args: Any) -> Reply:
        """Send one request and return its raw reply.

        Raises:
            StoreError: If the server replied with an error.
            DecodeError: If the reply could not be parsed.
            TransportError: If the connection failed or is closed, or the
                library failed in any other way.
        """
        if self._closed:
            raise TransportError("Connection is closed")
        pool = self._client.connection_pool

        try:
            conn = await self._checkout(pool, str(args[0]))
            try:
                await conn.send_command(*args)
                return await conn.read_response()
            finally:
                await pool.release(conn)
        except _response_exceptions as e:
            raise StoreError(str(e)) from e
        except _transport_exceptions as e:
            raise TransportError(str(e) or type(e).__name__) from e
        except _protocol_exceptions as e:
            raise DecodeError(f"Unparseable reply to {args[0]}: {e}") from e
        except _library_exceptions as e:
            raise TransportError(str(e) or type(e).__name__) from e
        except Exception as e:
            # Whatever the library raises once its sockets are torn down
            if self._closed:
                raise TransportError("Connection was closed while waiting for a reply") from e
            raise

    async def disconnect(self) -> None:
        """Close every pooled socket.

        Operations still waiting for a reply fail with ``TransportError``.
        """
        if self._closed:
            return
        self._closed = True
        await self._client.aclose()
        await self._client.connection_pool.disconnect()
        logger.debug("Disconnected")

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.disconnect()


# =============================================================================
# RedisConnection - concrete implementation for redis-py
# =============================================================================

if _REDIS_AVAILABLE:

    class RedisConnection(KeyValueConnection):
        """Connection using redis-py's asyncio client."""

        _lib = redis
        _client_class = redis.asyncio.Redis
        _pool_class = redis.asyncio.ConnectionPool

else:

    class RedisConnection(KeyValueConnection):  # type: ignore[no-redef]
        """Connection using redis-py (not installed)."""

        def __init__(self, *args: Any, **kwargs: Any) -> None:
            msg = "RedisConnection requires redis-py. Install with: pip install redis"
            raise ImportError(msg)


# =============================================================================
# ValkeyConnection - concrete implementation for valkey-py
# =============================================================================

if _VALKEY_AVAILABLE:

    class ValkeyConnection(KeyValueConnection):
        """Connection using valkey-py's asyncio client."""

        _lib = valkey
        _client_class = valkey.asyncio.Valkey
        _pool_class = valkey.asyncio.ConnectionPool

        async def _checkout(self, pool: Any, command_name: str) -> Any:
            return await pool.get_connection(command_name)

else:

    class ValkeyConnection(KeyValueConnection):  # type: ignore[no-redef]
        """Connection using valkey-py (not installed)."""

        def __init__(self, *args: Any, **kwargs: Any) -> None:
            raise ImportError("ValkeyConnection requires valkey-py. Install with: pip install valkey")


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    "_REDIS_AVAILABLE",
    "_VALKEY_AVAILABLE",
    "KeyValueConnection",
    "RedisConnection",
    "ValkeyConnection",
]

"""Exceptions for redis-typed.

Three failure kinds reach callers of a command:

- ``TransportError``: the connection itself failed (disconnect, network fault,
  socket timeout). Fatal to every operation in flight on that connection.
- ``StoreError``: the server rejected a well-formed request (wrong type,
  syntax). Carries the server's raw message.
- ``DecodeError``: a reply did not have the shape the command expects, or
  bytes were not valid text in the requested encoding.

A conditional write that did not happen, or a lookup that found nothing, is a
normal result (``False`` / ``None``), never one of these.
"""

import socket

# Build exception tuples from available libraries (redis-py / valkey-py).
# These are used by the connection layer to translate library errors.
_transport_list: list[type[Exception]] = [socket.timeout, ConnectionError]
_response_list: list[type[Exception]] = []
_protocol_list: list[type[Exception]] = []
_library_list: list[type[Exception]] = []

try:
    from redis.exceptions import ConnectionError as RedisConnectionError
    from redis.exceptions import InvalidResponse as RedisInvalidResponse
    from redis.exceptions import RedisError
    from redis.exceptions import ResponseError as RedisResponseError
    from redis.exceptions import TimeoutError as RedisTimeoutError

    _transport_list.extend([RedisConnectionError, RedisTimeoutError])
    _response_list.append(RedisResponseError)
    _protocol_list.append(RedisInvalidResponse)
    _library_list.append(RedisError)
except ImportError:
    pass

try:
    from valkey.exceptions import ConnectionError as ValkeyConnectionError
    from valkey.exceptions import InvalidResponse as ValkeyInvalidResponse
    from valkey.exceptions import ResponseError as ValkeyResponseError
    from valkey.exceptions import TimeoutError as ValkeyTimeoutError
    from valkey.exceptions import ValkeyError

    _transport_list.extend([ValkeyConnectionError, ValkeyTimeoutError])
    _response_list.append(ValkeyResponseError)
    _protocol_list.append(ValkeyInvalidResponse)
    _library_list.append(ValkeyError)
except ImportError:
    pass

_transport_exceptions = tuple(_transport_list)
_response_exceptions = tuple(_response_list)
# Unparseable bytes on the wire
_protocol_exceptions = tuple(_protocol_list)
# Anything else the libraries raise
_library_exceptions = tuple(_library_list)


class RedisTypedError(Exception):
    """Base class for all errors raised by redis-typed operations."""


class TransportError(RedisTypedError):
    """Raised when the underlying connection fails.

    Not retried by this library; reconnect and retry policy belongs to the
    caller.
    """


class StoreError(RedisTypedError):
    """Raised when the server replies with an error.

    Attributes:
        message: The server's error message, unmodified (e.g.
            ``"WRONGTYPE Operation against a key holding the wrong kind of value"``).

    Example:
        Telling a type clash apart from other server errors::

            try:
                await client.lpush(b"counter", b"x")
            except StoreError as e:
                if e.message.startswith("WRONGTYPE"):
                    ...
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DecodeError(RedisTypedError):
    """Raised when a reply cannot be decoded into the expected result.

    A reply of the wrong shape points at a protocol or codec mismatch and is
    always fatal to that single call.

    Attributes:
        reply: The offending raw reply (or byte string), when available.
    """

    def __init__(self, message: str, reply: object = None) -> None:
        self.reply = reply
        super().__init__(message)

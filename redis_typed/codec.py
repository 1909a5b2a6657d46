"""Conversion between binary strings and text.

Commands only ever take and return bytes. Callers that want text convert at
their edge with an explicit encoding::

    from redis_typed.codec import Encoding, to_bytes, to_text

    await client.set(to_bytes("héllo", Encoding.UTF8), b"1")
    name = to_text(await client.get(b"user:1:name"), Encoding.UTF8)
"""

from __future__ import annotations

import codecs
from enum import StrEnum
from typing import Any

from redis_typed.exceptions import DecodeError


class Encoding(StrEnum):
    """Named encodings understood by ``to_bytes`` and ``to_text``.

    ``BINARY`` is raw passthrough: byte ``n`` maps to code point ``n``.
    """

    UTF8 = "utf-8"
    ASCII = "ascii"
    LATIN1 = "latin-1"
    BINARY = "binary"


def _codec_name(encoding: Encoding | str) -> str:
    name = "latin-1" if encoding == Encoding.BINARY else str(encoding)
    try:
        return codecs.lookup(name).name
    except LookupError:
        raise ValueError(f"Unknown encoding: {encoding!r}") from None


def to_bytes(text: str, encoding: Encoding | str) -> bytes:
    """Encode text into a binary string."""
    if not isinstance(text, str):
        raise TypeError(f"Expected str, got {type(text).__name__}")
    name = _codec_name(encoding)
    try:
        return text.encode(name)
    except UnicodeEncodeError as e:
        raise ValueError(f"Text is not representable in {encoding}: {e.reason}") from e


def to_text(data: bytes | bytearray | memoryview, encoding: Encoding | str) -> str:
    """Decode a binary string into text.

    Raises:
        DecodeError: If ``data`` is not valid in ``encoding``.
    """
    name = _codec_name(encoding)
    try:
        return bytes(data).decode(name)
    except UnicodeDecodeError as e:
        raise DecodeError(f"Invalid {encoding} byte sequence at offset {e.start}", reply=bytes(data)) from e


def as_key(value: Any) -> bytes:
    """Normalise a bytes-like argument to ``bytes``.

    Text is rejected: the command layer never picks an encoding on the
    caller's behalf.
    """
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        msg = "Expected a binary string, got str; convert it with redis_typed.codec.to_bytes()"
        raise TypeError(msg)
    raise TypeError(f"Expected a binary string, got {type(value).__name__}")

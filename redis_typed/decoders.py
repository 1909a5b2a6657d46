"""Reply decoders, one per reply shape.

Each decoder takes the raw RESP2 reply of one command and returns the typed
result, raising ``DecodeError`` when the reply has an unexpected shape. Error
replies never get here: the connection turns them into ``StoreError`` first.

Decoders are attached to each command individually (see
``redis_typed.operation.Command``), so nothing here is registered globally.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from redis_typed.exceptions import DecodeError
from redis_typed.scores import pair_member_scores, parse_score
from redis_typed.types import HashEntry, MemberScore, PoppedItem

if TYPE_CHECKING:
    from collections.abc import Callable

    from redis_typed.types import Reply


def _shape_error(expected: str, reply: Reply) -> DecodeError:
    return DecodeError(f"Expected {expected}, got {type(reply).__name__}", reply=reply)


def _expect_list(reply: Reply) -> list[Reply]:
    if not isinstance(reply, list):
        raise _shape_error("an array", reply)
    return reply


# =============================================================================
# Scalars
# =============================================================================


def decode_optional_bytes(reply: Reply) -> bytes | None:
    if reply is None or isinstance(reply, bytes):
        return reply
    raise _shape_error("a bulk string or null", reply)


def decode_int(reply: Reply) -> int:
    # bool is an int subclass; no RESP2 parser produces one
    if isinstance(reply, int) and not isinstance(reply, bool):
        return reply
    raise _shape_error("an integer", reply)


def decode_int_ignored(reply: Reply) -> None:
    """Check for an integer reply whose value the caller doesn't need."""
    decode_int(reply)


def decode_optional_int(reply: Reply) -> int | None:
    if reply is None:
        return None
    return decode_int(reply)


def decode_ok(reply: Reply) -> None:
    if reply != b"OK":
        raise _shape_error("OK", reply)


def decode_set(reply: Reply) -> bool:
    """Decode ``SET``: ``OK`` when written, null when NX/XX was not met."""
    if reply is None:
        return False
    decode_ok(reply)
    return True


def decode_score(reply: Reply) -> float:
    return parse_score(reply)


def decode_optional_score(reply: Reply) -> float | None:
    if reply is None:
        return None
    return parse_score(reply)


# =============================================================================
# Arrays
# =============================================================================


def decode_bytes_list(reply: Reply) -> list[bytes]:
    items = _expect_list(reply)
    for item in items:
        if not isinstance(item, bytes):
            raise _shape_error("an array of bulk strings", item)
    return items  # type: ignore[return-value]


def decode_optional_bytes_list(reply: Reply) -> list[bytes | None]:
    return [decode_optional_bytes(item) for item in _expect_list(reply)]


def decode_hash_entries(reply: Reply) -> list[HashEntry]:
    """Pair a flat ``[field, value, field, value, ...]`` array positionally."""
    flat = decode_bytes_list(reply)
    if len(flat) % 2:
        raise DecodeError(f"Expected an even number of elements, got {len(flat)}", reply=reply)
    it = iter(flat)
    return [HashEntry(field, value) for field, value in zip(it, it, strict=True)]


def decode_member_scores(reply: Reply) -> list[MemberScore]:
    return pair_member_scores(_expect_list(reply))


def decode_popped(reply: Reply) -> PoppedItem | None:
    """Decode ``BLPOP``/``BRPOP``: null on timeout, else ``[key, value]``."""
    if reply is None:
        return None
    items = decode_bytes_list(reply)
    if len(items) != 2:  # noqa: PLR2004
        raise DecodeError(f"Expected a [key, value] pair, got {len(items)} elements", reply=reply)
    return PoppedItem(items[0], items[1])


# =============================================================================
# Scan pages
# =============================================================================


@dataclass(frozen=True)
class ScanPage[T]:
    """One decoded ``SCAN``-family reply."""

    cursor: bytes
    items: list[T]


def scan_page_decoder[T](decode_items: Callable[[Reply], list[T]]) -> Callable[[Reply], ScanPage[T]]:
    """Build the decoder for a ``[cursor, [items...]]`` reply."""

    def decode(reply: Reply) -> ScanPage[T]:
        page = _expect_list(reply)
        if len(page) != 2:  # noqa: PLR2004
            raise DecodeError(f"Expected [cursor, items], got {len(page)} elements", reply=reply)
        cursor, items = page
        if not isinstance(cursor, bytes) or not cursor.isdigit():
            raise DecodeError(f"Malformed scan cursor {cursor!r}", reply=reply)
        return ScanPage(cursor, decode_items(items))

    return decode

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from redis_typed.codec import as_key
from redis_typed.decoders import (
    decode_int,
    decode_member_scores,
    decode_optional_int,
    decode_optional_score,
    decode_score,
    scan_page_decoder,
)
from redis_typed.scan import SCAN_START, ScanStream
from redis_typed.scores import LexBound, ScoreBound, encode_score, flatten_members
from redis_typed.types import WriteCondition, ZAddReturn

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from redis_typed.operation import Operation
    from redis_typed.types import KeyT, Limit, MemberScore


def _check_bound[B](name: str, bound: B, kind: type[B]) -> B:
    if not isinstance(bound, kind):
        raise TypeError(f"{name} must be a {kind.__name__}, got {type(bound).__name__}")
    return bound


class SortedSetCommandsMixin:
    """Sorted set (ZSET) commands.

    Range results are lists of ``MemberScore`` in the order the server sent
    them; members with equal scores stay in the server's lexicographic order.
    """

    # Type hints for base class attributes
    _execute: Any
    _as_keys: Any
    _as_int: Any
    _scan_options: Any

    def zadd(
        self,
        key: KeyT,
        members: Sequence[MemberScore] | Mapping[KeyT, float],
        *,
        mode: WriteCondition = WriteCondition.ALWAYS,
        returning: ZAddReturn = ZAddReturn.ADDED,
    ) -> Operation[int]:
        """Add members with scores.

        Args:
            key: The sorted set key
            members: ``MemberScore`` pairs (or a member -> score mapping); not empty
            mode: ``IF_EXISTS`` (XX) only updates, ``IF_ABSENT`` (NX) only adds
            returning: Count members ``ADDED`` or members ``CHANGED`` (CH)

        Returns:
            Number of members added, or changed when ``returning=CHANGED``.
        """
        flat = flatten_members(members)
        if not flat:
            raise ValueError("At least one member is required")
        args: list[Any] = ["ZADD", as_key(key)]
        mode = WriteCondition(mode)
        if mode is not WriteCondition.ALWAYS:
            args.append(mode.value)
        returning = ZAddReturn(returning)
        if returning is not ZAddReturn.ADDED:
            args.append(returning.value)
        args.extend(flat)
        return self._execute(decode_int, *args)

    def zscore(self, key: KeyT, member: KeyT) -> Operation[float | None]:
        """Get the score of a member, or None if it is not in the set."""
        return self._execute(decode_optional_score, "ZSCORE", as_key(key), as_key(member))

    def zrange(self, key: KeyT, start: int, stop: int) -> Operation[list[MemberScore]]:
        """Get members by rank (ascending score), with scores."""
        start = self._as_int("start", start)
        stop = self._as_int("stop", stop)
        return self._execute(decode_member_scores, "ZRANGE", as_key(key), start, stop, "WITHSCORES")

    def zrangebyscore(
        self,
        key: KeyT,
        min: ScoreBound,  # noqa: A002
        max: ScoreBound,  # noqa: A002
        limit: Limit | None = None,
    ) -> Operation[list[MemberScore]]:
        """Get members with scores between ``min`` and ``max``, lowest first."""
        min = _check_bound("min", min, ScoreBound)  # noqa: A001
        max = _check_bound("max", max, ScoreBound)  # noqa: A001
        return self._range_by_score("ZRANGEBYSCORE", key, min, max, limit)

    def zrevrangebyscore(
        self,
        key: KeyT,
        min: ScoreBound,  # noqa: A002
        max: ScoreBound,  # noqa: A002
        limit: Limit | None = None,
    ) -> Operation[list[MemberScore]]:
        """Get members with scores between ``min`` and ``max``, highest first.

        The server takes the upper bound first; the arguments here keep the
        ``min, max`` order of ``zrangebyscore``.
        """
        min = _check_bound("min", min, ScoreBound)  # noqa: A001
        max = _check_bound("max", max, ScoreBound)  # noqa: A001
        return self._range_by_score("ZREVRANGEBYSCORE", key, max, min, limit)

    def _range_by_score(
        self,
        command: str,
        key: KeyT,
        first: ScoreBound,
        second: ScoreBound,
        limit: Limit | None,
    ) -> Operation[list[MemberScore]]:
        args: list[Any] = [command, as_key(key), first.encode(), second.encode(), "WITHSCORES"]
        if limit is not None:
            offset, count = limit
            args.extend(["LIMIT", self._as_int("offset", offset), self._as_int("count", count)])
        return self._execute(decode_member_scores, *args)

    def zrank(self, key: KeyT, member: KeyT) -> Operation[int | None]:
        """Get the 0-based rank of a member, or None if it is not in the set."""
        return self._execute(decode_optional_int, "ZRANK", as_key(key), as_key(member))

    def zincrby(self, key: KeyT, delta: float, member: KeyT) -> Operation[float]:
        """Add ``delta`` to a member's score (creating it at ``delta``); returns the new score."""
        return self._execute(decode_score, "ZINCRBY", as_key(key), encode_score(delta), as_key(member))

    def zcard(self, key: KeyT) -> Operation[int]:
        """Get the number of members."""
        return self._execute(decode_int, "ZCARD", as_key(key))

    def zrem(self, key: KeyT, members: Iterable[KeyT]) -> Operation[int]:
        """Remove members; returns how many were present."""
        return self._execute(decode_int, "ZREM", as_key(key), *self._as_keys(members, what="members"))

    def zremrangebylex(self, key: KeyT, min: LexBound, max: LexBound) -> Operation[int]:  # noqa: A002
        """Remove members between two lexicographic bounds; returns how many."""
        min = _check_bound("min", min, LexBound)  # noqa: A001
        max = _check_bound("max", max, LexBound)  # noqa: A001
        return self._execute(decode_int, "ZREMRANGEBYLEX", as_key(key), min.encode(), max.encode())

    def zremrangebyrank(self, key: KeyT, start: int, stop: int) -> Operation[int]:
        """Remove members by rank range; returns how many."""
        start = self._as_int("start", start)
        stop = self._as_int("stop", stop)
        return self._execute(decode_int, "ZREMRANGEBYRANK", as_key(key), start, stop)

    def zremrangebyscore(self, key: KeyT, min: ScoreBound, max: ScoreBound) -> Operation[int]:  # noqa: A002
        """Remove members with scores between two bounds; returns how many."""
        min = _check_bound("min", min, ScoreBound)  # noqa: A001
        max = _check_bound("max", max, ScoreBound)  # noqa: A001
        return self._execute(decode_int, "ZREMRANGEBYSCORE", as_key(key), min.encode(), max.encode())

    def zscan(
        self,
        key: KeyT,
        *,
        match: KeyT | None = None,
        count: int | None = None,
        cursor: KeyT = SCAN_START,
    ) -> ScanStream[MemberScore]:
        """Stream the members of a sorted set, with scores, using ``ZSCAN``."""
        nkey = as_key(key)
        tail = self._scan_options(match, count)
        decoder = scan_page_decoder(decode_member_scores)
        return ScanStream(lambda c: self._execute(decoder, "ZSCAN", nkey, c, *tail), cursor=cursor)

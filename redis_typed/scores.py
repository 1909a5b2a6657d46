"""Score and member encoding for sorted set commands."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from redis_typed.codec import as_key
from redis_typed.exceptions import DecodeError
from redis_typed.types import MemberScore

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from redis_typed.types import KeyT

# Largest integer a double represents exactly
MAX_SAFE_INTEGER = 2**53 - 1

_INFINITIES = {
    b"inf": math.inf,
    b"+inf": math.inf,
    b"-inf": -math.inf,
}


def encode_score(score: float) -> bytes:
    """Encode a score as a ZADD/ZINCRBY argument."""
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise TypeError(f"Score must be a number, got {type(score).__name__}")
    if math.isnan(score):
        raise ValueError("Score must not be NaN")
    if math.isinf(score):
        return b"+inf" if score > 0 else b"-inf"
    if float(score).is_integer() and abs(score) <= MAX_SAFE_INTEGER:
        return b"%d" % score
    return repr(float(score)).encode()


def parse_score(raw: object) -> float:
    """Parse a score as sent by the server (``"1.5"``, ``"inf"``, ``"-inf"``)."""
    if not isinstance(raw, bytes):
        raise DecodeError(f"Expected a score, got {type(raw).__name__}", reply=raw)
    lowered = raw.lower()
    if lowered in _INFINITIES:
        return _INFINITIES[lowered]
    try:
        score = float(raw.decode("ascii"))
    except (UnicodeDecodeError, ValueError):
        raise DecodeError(f"Malformed score {raw!r}", reply=raw) from None
    if math.isnan(score):
        raise DecodeError(f"Malformed score {raw!r}", reply=raw)
    return score


def flatten_members(members: Sequence[MemberScore] | Mapping[KeyT, float]) -> list[bytes]:
    """Flatten member/score pairs into ZADD argument order: score, member, ..."""
    pairs: Iterable[tuple[KeyT, float]] = members.items() if hasattr(members, "items") else members  # type: ignore[union-attr]
    args: list[bytes] = []
    for member, score in pairs:
        args.append(encode_score(score))
        args.append(as_key(member))
    return args


def pair_member_scores(flat: list[object]) -> list[MemberScore]:
    """Re-pair a flat ``[member, score, member, score, ...]`` reply.

    The server's order is kept as is.
    """
    if len(flat) % 2:
        raise DecodeError(f"Expected an even number of elements, got {len(flat)}", reply=flat)
    it = iter(flat)
    result = []
    for member, score in zip(it, it, strict=True):
        if not isinstance(member, bytes):
            raise DecodeError(f"Expected a member, got {type(member).__name__}", reply=flat)
        result.append(MemberScore(member, parse_score(score)))
    return result


# =============================================================================
# Range endpoints
# =============================================================================


class _Bound(Enum):
    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"
    NEG_INF = "-inf"
    POS_INF = "+inf"


@dataclass(frozen=True)
class ScoreBound:
    """One end of a score interval.

    Use ``ScoreBound.inclusive(s)``, ``ScoreBound.exclusive(s)``,
    ``ScoreBound.NEG_INF`` or ``ScoreBound.POS_INF``. Infinity is only
    expressed by the two sentinels.
    """

    kind: _Bound
    score: float | None = None

    NEG_INF: ClassVar[ScoreBound]
    POS_INF: ClassVar[ScoreBound]

    def __post_init__(self) -> None:
        if self.kind in (_Bound.NEG_INF, _Bound.POS_INF):
            if self.score is not None:
                raise ValueError("Infinite bounds take no score")
            return
        if self.score is None:
            raise ValueError(f"{self.kind.value} bound needs a score")
        if math.isinf(self.score):
            raise ValueError("Use ScoreBound.NEG_INF / ScoreBound.POS_INF for infinite bounds")

    @classmethod
    def inclusive(cls, score: float) -> ScoreBound:
        return cls(_Bound.INCLUSIVE, score)

    @classmethod
    def exclusive(cls, score: float) -> ScoreBound:
        return cls(_Bound.EXCLUSIVE, score)

    def encode(self) -> bytes:
        if self.kind is _Bound.NEG_INF:
            return b"-inf"
        if self.kind is _Bound.POS_INF:
            return b"+inf"
        assert self.score is not None  # noqa: S101
        encoded = encode_score(self.score)
        return b"(" + encoded if self.kind is _Bound.EXCLUSIVE else encoded


ScoreBound.NEG_INF = ScoreBound(_Bound.NEG_INF)
ScoreBound.POS_INF = ScoreBound(_Bound.POS_INF)


@dataclass(frozen=True)
class LexBound:
    """One end of a lexicographic member interval (``ZREMRANGEBYLEX``).

    Use ``LexBound.inclusive(m)``, ``LexBound.exclusive(m)``, ``LexBound.MIN``
    or ``LexBound.MAX``.
    """

    kind: _Bound
    member: bytes | None = None

    MIN: ClassVar[LexBound]
    MAX: ClassVar[LexBound]

    def __post_init__(self) -> None:
        if self.kind in (_Bound.NEG_INF, _Bound.POS_INF):
            if self.member is not None:
                raise ValueError("Open bounds take no member")
        elif self.member is None:
            raise ValueError(f"{self.kind.value} bound needs a member")

    @classmethod
    def inclusive(cls, member: KeyT) -> LexBound:
        return cls(_Bound.INCLUSIVE, as_key(member))

    @classmethod
    def exclusive(cls, member: KeyT) -> LexBound:
        return cls(_Bound.EXCLUSIVE, as_key(member))

    def encode(self) -> bytes:
        if self.kind is _Bound.NEG_INF:
            return b"-"
        if self.kind is _Bound.POS_INF:
            return b"+"
        assert self.member is not None  # noqa: S101
        prefix = b"(" if self.kind is _Bound.EXCLUSIVE else b"["
        return prefix + self.member


LexBound.MIN = LexBound(_Bound.NEG_INF)
LexBound.MAX = LexBound(_Bound.POS_INF)

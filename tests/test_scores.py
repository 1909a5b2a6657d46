"""Tests for score encoding and range bounds."""

import math

import pytest

from redis_typed import DecodeError, LexBound, MemberScore, ScoreBound
from redis_typed.scores import (
    MAX_SAFE_INTEGER,
    encode_score,
    flatten_members,
    pair_member_scores,
    parse_score,
)


class TestEncodeScore:
    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (1, b"1"),
            (-3, b"-3"),
            (2.0, b"2"),
            (1.5, b"1.5"),
            (0.1, b"0.1"),
            (math.inf, b"+inf"),
            (-math.inf, b"-inf"),
            (MAX_SAFE_INTEGER, b"9007199254740991"),
        ],
    )
    def test_encode(self, score, expected):
        assert encode_score(score) == expected

    def test_large_integral_float_keeps_float_form(self):
        assert encode_score(1e300) == b"1e+300"

    def test_nan_rejected(self):
        with pytest.raises(ValueError, match="NaN"):
            encode_score(math.nan)

    @pytest.mark.parametrize("score", [True, "1", b"1", None])
    def test_non_numbers_rejected(self, score):
        with pytest.raises(TypeError):
            encode_score(score)


class TestParseScore:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (b"1", 1.0),
            (b"-2.5", -2.5),
            (b"inf", math.inf),
            (b"+inf", math.inf),
            (b"-inf", -math.inf),
            (b"INF", math.inf),
            (b"1e+300", 1e300),
        ],
    )
    def test_parse(self, raw, expected):
        assert parse_score(raw) == expected

    @pytest.mark.parametrize("raw", [b"", b"abc", b"nan", b"\xff", 3, None])
    def test_malformed(self, raw):
        with pytest.raises(DecodeError):
            parse_score(raw)


class TestFlattenMembers:
    def test_pairs_in_order(self):
        members = [MemberScore(b"a", 1), MemberScore(b"b", 2.5)]
        assert flatten_members(members) == [b"1", b"a", b"2.5", b"b"]

    def test_mapping(self):
        assert flatten_members({b"a": 1}) == [b"1", b"a"]

    def test_member_must_be_binary(self):
        with pytest.raises(TypeError):
            flatten_members([("a", 1)])  # type: ignore[list-item]


class TestPairMemberScores:
    def test_pairs(self):
        assert pair_member_scores([b"a", b"1", b"b", b"inf"]) == [
            MemberScore(b"a", 1.0),
            MemberScore(b"b", math.inf),
        ]

    def test_odd_length(self):
        with pytest.raises(DecodeError, match="even"):
            pair_member_scores([b"a", b"1", b"b"])

    def test_member_not_bytes(self):
        with pytest.raises(DecodeError):
            pair_member_scores([1, b"1"])


class TestScoreBound:
    def test_inclusive(self):
        assert ScoreBound.inclusive(1.5).encode() == b"1.5"

    def test_exclusive(self):
        assert ScoreBound.exclusive(2).encode() == b"(2"

    def test_infinities(self):
        assert ScoreBound.NEG_INF.encode() == b"-inf"
        assert ScoreBound.POS_INF.encode() == b"+inf"

    def test_infinite_score_needs_sentinel(self):
        with pytest.raises(ValueError, match="POS_INF"):
            ScoreBound.inclusive(math.inf)

    def test_nan_rejected_on_encode(self):
        with pytest.raises(ValueError):
            ScoreBound.exclusive(math.nan).encode()


class TestLexBound:
    def test_encodings(self):
        assert LexBound.inclusive(b"a").encode() == b"[a"
        assert LexBound.exclusive(bytearray(b"b")).encode() == b"(b"
        assert LexBound.MIN.encode() == b"-"
        assert LexBound.MAX.encode() == b"+"

    def test_member_must_be_binary(self):
        with pytest.raises(TypeError):
            LexBound.inclusive("a")  # type: ignore[arg-type]

"""Cursor scans against a live server."""

import pytest

from redis_typed import Client, HashEntry, KeyType, MemberScore

pytestmark = pytest.mark.integration


class TestScan:
    @pytest.mark.asyncio
    async def test_union_of_batches_covers_keyspace(self, client: Client):
        keys = {b"key:%d" % i for i in range(200)}
        for key in keys:
            await client.set(key, b"x")

        stream = client.scan(count=20)
        seen = set()
        round_trips = 0
        async for batch in stream:
            seen.update(batch.items)
            round_trips += 1

        assert seen == keys
        assert round_trips > 1
        assert stream.finished
        assert not stream.failed

    @pytest.mark.asyncio
    async def test_match_and_type(self, client: Client):
        await client.set(b"user:1", b"x")
        await client.rpush(b"user:2", b"x")
        await client.set(b"other", b"x")

        assert set(await client.scan(match=b"user:*").collect()) == {b"user:1", b"user:2"}
        assert set(await client.scan(match=b"user:*", key_type=KeyType.LIST).collect()) == {b"user:2"}

    @pytest.mark.asyncio
    async def test_empty_keyspace(self, client: Client):
        assert await client.scan().collect() == []

    @pytest.mark.asyncio
    async def test_resume_from_cursor(self, client: Client):
        keys = {b"key:%d" % i for i in range(100)}
        for key in keys:
            await client.set(key, b"x")

        first = client.scan(count=10)
        batch = await anext(first)
        await first.aclose()
        assert not batch.is_last

        rest = await client.scan(count=10, cursor=batch.cursor).collect()
        assert set(batch.items) | set(rest) == keys


class TestHScanZScan:
    @pytest.mark.asyncio
    async def test_hscan(self, client: Client):
        for i in range(300):
            await client.hset(b"h", b"f%d" % i, b"v%d" % i)
        entries = set(await client.hscan(b"h", count=50).collect())
        assert entries == {HashEntry(b"f%d" % i, b"v%d" % i) for i in range(300)}

    @pytest.mark.asyncio
    async def test_zscan(self, client: Client):
        await client.zadd(b"z", [MemberScore(b"m%d" % i, i) for i in range(300)])
        members = set(await client.zscan(b"z", match=b"m1*").collect())
        assert MemberScore(b"m1", 1.0) in members
        assert MemberScore(b"m2", 2.0) not in members

    @pytest.mark.asyncio
    async def test_missing_key(self, client: Client):
        assert await client.hscan(b"missing").collect() == []

"""Tests for ScanStream iteration over scripted scan replies."""

import asyncio

import pytest

from redis_typed import SCAN_START, Batch, Client, DecodeError, StoreError
from tests.fixtures.scripted import ScriptedConnection, drain_round_trips


class TestIteration:
    @pytest.mark.asyncio
    async def test_batches_until_cursor_returns_to_start(self, fake_client: Client, scripted: ScriptedConnection):
        scripted.reply(
            [b"7", [b"a", b"b"]],
            [b"3", []],
            [b"0", [b"c"]],
        )
        stream = fake_client.scan()
        batches = [batch async for batch in stream]

        assert batches == [
            Batch([b"a", b"b"], b"7"),
            Batch([], b"3"),
            Batch([b"c"], b"0"),
        ]
        assert batches[-1].is_last
        assert [call[1] for call in scripted.calls] == [b"0", b"7", b"3"]
        assert stream.finished
        assert not stream.failed

    @pytest.mark.asyncio
    async def test_lazy_until_first_batch(self, fake_client: Client, scripted: ScriptedConnection):
        scripted.reply([b"0", []])
        stream = fake_client.scan()
        await asyncio.sleep(0)
        assert scripted.calls == []
        await anext(stream)
        assert len(scripted.calls) == 1

    @pytest.mark.asyncio
    async def test_duplicates_are_kept(self, fake_client: Client, scripted: ScriptedConnection):
        scripted.reply([b"5", [b"a"]], [b"0", [b"a"]])
        assert await fake_client.scan().collect() == [b"a", b"a"]

    @pytest.mark.asyncio
    async def test_not_restartable(self, fake_client: Client, scripted: ScriptedConnection):
        scripted.reply([b"0", [b"a"]])
        stream = fake_client.scan()
        assert await stream.collect() == [b"a"]
        assert await stream.collect() == []
        with pytest.raises(StopAsyncIteration):
            await anext(stream)
        assert len(scripted.calls) == 1

    @pytest.mark.asyncio
    async def test_resume_from_cursor(self, fake_client: Client, scripted: ScriptedConnection):
        scripted.reply([b"9", [b"a"]], [b"0", [b"b"]])
        first = fake_client.scan()
        batch = await anext(first)
        await first.aclose()

        resumed = fake_client.scan(cursor=batch.cursor)
        assert resumed.cursor == b"9"
        assert await resumed.collect() == [b"b"]
        assert scripted.last_call == ("SCAN", b"9")

    @pytest.mark.asyncio
    async def test_cursor_must_be_binary(self, fake_client: Client):
        with pytest.raises(TypeError):
            fake_client.scan(cursor="0")  # type: ignore[arg-type]


class TestFailure:
    @pytest.mark.asyncio
    async def test_error_ends_stream(self, fake_client: Client, scripted: ScriptedConnection):
        scripted.reply([b"4", [b"a"]], StoreError("ERR invalid cursor"))
        stream = fake_client.scan()

        assert (await anext(stream)).items == [b"a"]
        with pytest.raises(StoreError):
            await anext(stream)
        assert stream.failed
        assert stream.finished
        with pytest.raises(StopAsyncIteration):
            await anext(stream)

    @pytest.mark.asyncio
    async def test_malformed_page_fails_stream(self, fake_client: Client, scripted: ScriptedConnection):
        scripted.reply([b"not-a-cursor", []])
        stream = fake_client.scan()
        with pytest.raises(DecodeError, match="cursor"):
            await stream.collect()
        assert stream.failed


class TestAbort:
    @pytest.mark.asyncio
    async def test_aclose_before_start(self, fake_client: Client, scripted: ScriptedConnection):
        stream = fake_client.scan()
        await stream.aclose()
        assert await stream.collect() == []
        assert scripted.calls == []
        assert not stream.failed

    @pytest.mark.asyncio
    async def test_aclose_cancels_batch_in_flight(self, fake_client: Client, scripted: ScriptedConnection):
        gate = scripted.hold([b"0", [b"a"]])
        stream = fake_client.scan()
        consumer = asyncio.create_task(stream.collect())
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        await stream.aclose()
        assert await consumer == []
        assert stream.finished
        assert not stream.failed

        gate.open()
        await drain_round_trips()

    @pytest.mark.asyncio
    async def test_concurrent_next_rejected(self, fake_client: Client, scripted: ScriptedConnection):
        gate = scripted.hold([b"0", []])
        stream = fake_client.scan()
        first = asyncio.create_task(anext(stream))
        await asyncio.sleep(0)
        with pytest.raises(RuntimeError, match="already being fetched"):
            await anext(stream)
        gate.open()
        assert await first == Batch([], SCAN_START)

    @pytest.mark.asyncio
    async def test_repr(self, fake_client: Client, scripted: ScriptedConnection):
        stream = fake_client.scan()
        assert repr(stream) == "<ScanStream cursor=b'0' open>"
        await stream.aclose()
        assert repr(stream) == "<ScanStream cursor=b'0' finished>"

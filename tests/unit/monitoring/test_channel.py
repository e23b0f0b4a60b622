"""Unit tests for the bounded notification channel."""

import asyncio

import pytest
from pollwatch.config import OverflowPolicy
from pollwatch.monitoring import Channel


class TestChannel:
    """Test cases for Channel."""

    @pytest.mark.asyncio
    async def test_fifo_delivery(self):
        """Test that items are received in send order."""
        channel: Channel[int] = Channel(maxsize=4, name="numbers")

        for i in range(3):
            assert await channel.send(i) is True

        assert channel.qsize() == 3
        assert [await channel.receive() for _ in range(3)] == [0, 1, 2]
        assert channel.empty()

    @pytest.mark.asyncio
    async def test_block_policy_waits_for_room(self):
        """Test that a full blocking channel holds the producer back."""
        channel: Channel[str] = Channel(maxsize=1)
        await channel.send("first")

        pending = asyncio.create_task(channel.send("second"))
        await asyncio.sleep(0.01)
        assert not pending.done()

        assert await channel.receive() == "first"
        assert await asyncio.wait_for(pending, timeout=1.0) is True
        assert channel.receive_nowait() == "second"

    @pytest.mark.asyncio
    async def test_drop_newest(self):
        """Test that the newest item is discarded when full."""
        channel: Channel[int] = Channel(maxsize=2, policy=OverflowPolicy.DROP_NEWEST)

        assert await channel.send(1)
        assert await channel.send(2)
        assert await channel.send(3) is False

        assert channel.dropped == 1
        assert channel.drain() == [1, 2]

    @pytest.mark.asyncio
    async def test_drop_oldest(self):
        """Test that the oldest item is evicted when full."""
        channel: Channel[int] = Channel(maxsize=2, policy="drop_oldest")

        for i in range(4):
            assert await channel.send(i)

        assert channel.dropped == 2
        assert channel.drain() == [2, 3]

    @pytest.mark.asyncio
    async def test_async_iteration(self):
        """Test consuming a channel with async for."""
        channel: Channel[int] = Channel()
        for i in range(3):
            await channel.send(i)

        received = []
        async for item in channel:
            received.append(item)
            if len(received) == 3:
                break

        assert received == [0, 1, 2]

    def test_receive_nowait_empty(self):
        with pytest.raises(asyncio.QueueEmpty):
            Channel().receive_nowait()

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            Channel(maxsize=0)

    def test_repr(self):
        assert repr(Channel(maxsize=8, name="moved")) == "Channel('moved', 0/8, policy=block)"

    @pytest.mark.asyncio
    async def test_abort_withdraws_blocked_send(self):
        """Test that setting the abort event cancels a send waiting for room."""
        channel: Channel[str] = Channel(maxsize=1)
        abort = asyncio.Event()
        await channel.send("first")

        pending = asyncio.create_task(channel.send("second", abort=abort))
        await asyncio.sleep(0.01)
        abort.set()

        assert await asyncio.wait_for(pending, timeout=1.0) is False
        assert channel.drain() == ["first"]

    @pytest.mark.asyncio
    async def test_abort_already_set(self):
        channel: Channel[int] = Channel(maxsize=2)
        abort = asyncio.Event()
        abort.set()

        assert await channel.send(1, abort=abort) is False
        assert channel.empty()

    @pytest.mark.asyncio
    async def test_abort_unused_when_room(self):
        channel: Channel[int] = Channel(maxsize=2)

        assert await channel.send(1, abort=asyncio.Event()) is True
        assert channel.receive_nowait() == 1

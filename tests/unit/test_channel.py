"""Unit tests for the position update channel."""
from __future__ import annotations

import asyncio

import pytest

from liquidator.errors import ProducerClosedError
from liquidator.services.channel import PositionChannel


class TestPositionChannel:
    @pytest.mark.asyncio
    async def test_delivers_in_send_order(self, make_position) -> None:
        channel = PositionChannel()
        for block, key in [(10, "a"), (11, "b"), (12, "a")]:
            channel.send(block, make_position(key=key))

        received = [await channel.recv() for _ in range(3)]
        assert [(u.block_number, u.position.key) for u in received] == [
            (10, "a"),
            (11, "b"),
            (12, "a"),
        ]

    @pytest.mark.asyncio
    async def test_close_after_pending_updates(self, make_position) -> None:
        channel = PositionChannel()
        channel.send(1, make_position(key="a"))
        channel.close()

        update = await channel.recv()
        assert update is not None and update.position.key == "a"
        assert await channel.recv() is None
        assert await channel.recv() is None

    @pytest.mark.asyncio
    async def test_recv_waits_for_update(self, make_position) -> None:
        channel = PositionChannel()
        receiver = asyncio.create_task(channel.recv())
        await asyncio.sleep(0.01)
        assert not receiver.done()
        channel.send(5, make_position(key="a"))
        update = await asyncio.wait_for(receiver, timeout=0.5)
        assert update is not None and update.block_number == 5

    def test_send_after_close_raises(self, make_position) -> None:
        channel = PositionChannel()
        channel.close()
        assert channel.closed
        with pytest.raises(ProducerClosedError):
            channel.send(1, make_position(key="a"))

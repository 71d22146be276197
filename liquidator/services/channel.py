"""Ordered channel of position updates from the indexer."""
from __future__ import annotations

import asyncio

from ..errors import ProducerClosedError
from ..interfaces.position import Position
from ..models import PositionUpdate

_CLOSED = object()


class PositionChannel:
    """Unbounded FIFO of ``PositionUpdate``s.

    ``close()`` is queued behind pending updates: the receiver sees every
    update sent before closing, then ``None`` on each later ``recv()``.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, block_number: int, position: Position) -> None:
        if self._closed:
            raise ProducerClosedError("Cannot send on a closed position channel")
        self._queue.put_nowait(PositionUpdate(block_number, position))

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_CLOSED)

    async def recv(self) -> PositionUpdate | None:
        item = await self._queue.get()
        if item is _CLOSED:
            # Keep the marker so later receivers also observe closure.
            self._queue.put_nowait(_CLOSED)
            return None
        return item  # type: ignore[return-value]

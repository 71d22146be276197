"""Concurrency-safe position container."""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from types import MappingProxyType
from typing import AsyncIterator, Mapping

from ..interfaces.position import Position
from ..interfaces.storage import Storage

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Asyncio reader/writer lock.

    Any number of readers, or one writer. Waiting writers block new
    readers so a stream of sweeps cannot starve merges.
    """

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(
                lambda: not self._writer and not self._writers_waiting
            )
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._cond:
            self._writers_waiting += 1
            try:
                await self._cond.wait_for(lambda: not self._writer and not self._readers)
            finally:
                self._writers_waiting -= 1
                # Readers held back by this writer may proceed if it was cancelled.
                self._cond.notify_all()
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()


class PositionBook:
    """Latest known state of every monitored position, keyed by position key."""

    def __init__(self, positions: Mapping[str, Position] | None = None) -> None:
        self._positions: dict[str, Position] = dict(positions or {})
        self._lock = ReadWriteLock()

    @classmethod
    async def load(cls, storage: Storage) -> PositionBook:
        """Seed the book from the last persisted snapshot."""
        positions, block_number = await storage.load()
        if positions:
            logger.info(
                "Restored %d positions from storage (block %s)", len(positions), block_number
            )
        return cls(positions)

    async def upsert(self, position: Position) -> dict[str, Position]:
        """Insert or replace ``position``; returns a copy of the resulting book.

        The copy is taken under the same write lock, so it is exactly the
        state produced by this update.
        """
        async with self._lock.write():
            self._positions[position.key] = position
            return dict(self._positions)

    @asynccontextmanager
    async def read(self) -> AsyncIterator[Mapping[str, Position]]:
        """Shared read-only view, held for the duration of the block."""
        async with self._lock.read():
            yield MappingProxyType(self._positions)

    async def snapshot(self) -> dict[str, Position]:
        async with self._lock.read():
            return dict(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

"""Storage protocol — position snapshot persistence."""
from typing import Mapping, Protocol

from .position import Position


class Storage(Protocol):
    """Persists full position snapshots tagged with a block number."""

    async def save(self, positions: Mapping[str, Position], block_number: int) -> None: ...

    async def load(self) -> tuple[dict[str, Position], int | None]: ...

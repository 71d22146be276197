"""JSON file storage for position snapshots."""
from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Mapping

from ..errors import StorageError
from ..interfaces.position import Position

logger = logging.getLogger(__name__)

PositionDecoder = Callable[[dict[str, Any]], Position]


class JsonFileStorage:
    """Persist the full position book as one JSON document.

    Layout::

        {"block_number": 812345, "positions": {"<key>": {...}, ...}}

    Every save rewrites the whole file through a temp file and
    ``os.replace`` so readers never see a half-written snapshot.
    """

    def __init__(self, path: str | Path, decoder: PositionDecoder | None = None) -> None:
        self.path = Path(path)
        self._decoder = decoder

    async def save(self, positions: Mapping[str, Position], block_number: int) -> None:
        document = {
            "block_number": block_number,
            "positions": {key: p.to_dict() for key, p in positions.items()},
        }
        try:
            await asyncio.to_thread(self._write, document)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to save positions to {self.path}: {e}") from e

        logger.debug(
            "Saved %d positions at block %d to %s", len(positions), block_number, self.path
        )

    def _write(self, document: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(document, f, default=str)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def read_raw(self) -> dict[str, Any]:
        """Return the stored document undecoded; empty if nothing was saved yet."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read positions from {self.path}: {e}") from e
        if not isinstance(document, dict):
            raise StorageError(f"Malformed positions file {self.path}")
        return document

    async def load(self) -> tuple[dict[str, Position], int | None]:
        document = await asyncio.to_thread(self.read_raw)
        if not document:
            return {}, None
        if self._decoder is None:
            raise StorageError("JsonFileStorage needs a decoder to load positions")

        try:
            positions = {
                key: self._decoder(raw)
                for key, raw in document.get("positions", {}).items()
            }
            block_number = document.get("block_number")
            block_number = int(block_number) if block_number is not None else None
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to decode positions from {self.path}: {e}") from e

        logger.info(
            "Loaded %d positions from %s (block %s)", len(positions), self.path, block_number
        )
        return positions, block_number

"""Shared latest-price handle."""
from __future__ import annotations

from decimal import Decimal
from typing import Mapping


class LatestOraclePrices:
    """Latest known price per asset symbol.

    Written by a price adapter, read by positions during a sweep. Entries
    may be stale or missing; readers get ``None`` for unknown assets.
    """

    def __init__(self, prices: Mapping[str, Decimal] | None = None) -> None:
        self._prices: dict[str, Decimal] = {}
        self.update(prices or {})

    def get(self, symbol: str) -> Decimal | None:
        return self._prices.get(symbol.upper())

    def update(self, prices: Mapping[str, Decimal]) -> None:
        for symbol, price in prices.items():
            self._prices[symbol.upper()] = price

    def snapshot(self) -> dict[str, Decimal]:
        return dict(self._prices)

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and symbol.upper() in self._prices

    def __len__(self) -> int:
        return len(self._prices)

"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .interfaces.position import Position


@dataclass(frozen=True)
class Asset:
    """Token referenced by a position (debt or collateral side)."""

    symbol: str
    address: str
    decimals: int = 18


@dataclass(frozen=True)
class Call:
    """Single contract call in a liquidation transaction."""

    to: str
    selector: str
    calldata: tuple[str, ...] = ()


@dataclass(frozen=True)
class PositionUpdate:
    """Position emitted by the indexer at a given block."""

    block_number: int
    position: Position


@dataclass(frozen=True)
class ProfitabilityResult:
    """Simulated liquidation outcome and the calls needed to realise it."""

    profit: Decimal
    calls: tuple[Call, ...]
    simulated_profit: Decimal
    execution_fees: Decimal
    debt_to_liquidate: Decimal
    min_collateral_to_receive: Decimal

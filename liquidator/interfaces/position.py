"""Position protocol — protocol-specific liquidation behaviour."""
from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Protocol

from ..config import LiquidationMode, ProtocolConfig
from ..models import Asset, Call

if TYPE_CHECKING:
    from ..oracles.prices import LatestOraclePrices
    from .account import Account
    from .chain import ChainClient


class Position(Protocol):
    """An open borrow position as seen by the liquidator.

    Implementations own the protocol rules: eligibility, sizing and the
    calls that perform the liquidation. A position whose assets have no
    oracle price must report itself as not liquidable instead of raising.
    """

    @property
    def key(self) -> str: ...

    @property
    def debt(self) -> Asset: ...

    @property
    def collateral(self) -> Asset: ...

    async def is_liquidable(self, prices: LatestOraclePrices) -> bool: ...

    async def liquidable_amount(
        self, mode: LiquidationMode, prices: LatestOraclePrices
    ) -> tuple[Decimal, Decimal]:
        """Return ``(debt_amount, collateral_amount)`` that can be liquidated."""
        ...

    async def fetch_liquidation_factor(
        self, protocol: ProtocolConfig, chain: ChainClient
    ) -> Decimal: ...

    async def get_liquidation_txs(
        self,
        account: Account,
        liquidate_address: str,
        debt_to_liquidate: Decimal,
        min_collateral_to_receive: Decimal,
    ) -> list[Call]: ...

    def to_dict(self) -> dict[str, Any]: ...

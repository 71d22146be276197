"""Liquidation execution: threshold gate, submission, confirmation."""
from __future__ import annotations

import logging
from decimal import Decimal

from ..interfaces.account import Account
from ..interfaces.chain import TransactionWaiter
from ..interfaces.position import Position
from .profitability import ProfitabilityEngine

logger = logging.getLogger(__name__)


class LiquidationExecutor:
    """Liquidates a position when its simulated profit reaches ``min_profit``."""

    def __init__(
        self,
        engine: ProfitabilityEngine,
        account: Account,
        waiter: TransactionWaiter,
        min_profit: Decimal,
    ) -> None:
        self._engine = engine
        self._account = account
        self._waiter = waiter
        self.min_profit = min_profit

    async def try_to_liquidate(self, position: Position) -> Decimal:
        """Simulate, and liquidate if worth it.

        Returns the simulated profit whether or not a transaction was sent.
        Errors from building, pricing, submitting or confirming propagate.
        """
        result = await self._engine.compute_profitability(position)

        if result.profit < self.min_profit:
            logger.info(
                "Position #%s is not worth liquidating "
                "(estimated profit: %s, minimum required: %s), skipping...",
                position.key,
                result.profit,
                self.min_profit,
            )
            return result.profit

        logger.info(
            "Trying to liquidate position #%s for %s %s",
            position.key,
            result.profit,
            position.debt.symbol,
        )
        tx_hash = await self._account.execute_txs(result.calls)
        await self._waiter.wait_for_acceptance(tx_hash)
        logger.info(
            "Liquidated position #%s! (profit: %s, TX #%s)",
            position.key,
            result.profit,
            tx_hash,
        )
        return result.profit

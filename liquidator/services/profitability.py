"""Liquidation profitability simulation."""
from __future__ import annotations

import logging
from decimal import Context, Decimal, localcontext

from ..config import LiquidationMode, ProtocolConfig
from ..errors import LiquidationError
from ..interfaces.account import Account
from ..interfaces.chain import ChainClient
from ..interfaces.position import Position
from ..models import ProfitabilityResult
from ..oracles.prices import LatestOraclePrices

logger = logging.getLogger(__name__)

# Assumed execution-price degradation, applied once per attempt.
SLIPPAGE = Decimal("0.05")
SLIPPAGE_FACTOR = Decimal(1) - SLIPPAGE

# Wide enough for 18-decimal token amounts multiplied together without rounding.
DECIMAL_CONTEXT = Context(prec=78)

_ZERO = Decimal(0)
_ONE = Decimal(1)


class ProfitabilityEngine:
    """Simulates the profit of liquidating a position.

    Given a liquidable position, sizes the liquidation from the position's
    liquidable amounts and liquidation factor, builds the liquidation calls,
    prices them, and returns::

        profit = liquidable_debt * (1 - factor) * (1 - SLIPPAGE) - fees

    The profit may be negative.
    """

    def __init__(
        self,
        protocol: ProtocolConfig,
        chain: ChainClient,
        account: Account,
        prices: LatestOraclePrices,
    ) -> None:
        self._protocol = protocol
        self._chain = chain
        self._account = account
        self._prices = prices

    async def compute_profitability(self, position: Position) -> ProfitabilityResult:
        mode = self._protocol.liquidation_mode
        liquidable_debt, liquidable_collateral = await position.liquidable_amount(
            mode, self._prices
        )
        liquidation_factor = await position.fetch_liquidation_factor(
            self._protocol, self._chain
        )
        if not _ZERO <= liquidation_factor <= _ONE:
            raise LiquidationError(
                f"Liquidation factor {liquidation_factor} for position #{position.key} "
                "is outside [0, 1]"
            )

        with localcontext(DECIMAL_CONTEXT):
            if mode is LiquidationMode.FULL:
                # The liquidation contract sizes full liquidations itself.
                debt_to_liquidate = Decimal(0)
            else:
                debt_to_liquidate = liquidable_debt * liquidation_factor
            min_collateral_to_receive = liquidable_collateral * liquidation_factor
            simulated_profit = liquidable_debt * (_ONE - liquidation_factor)

        calls = await position.get_liquidation_txs(
            self._account,
            self._protocol.liquidate_address,
            debt_to_liquidate,
            min_collateral_to_receive,
        )
        execution_fees = await self._account.estimate_fees_cost(calls)

        with localcontext(DECIMAL_CONTEXT):
            profit = simulated_profit * SLIPPAGE_FACTOR - execution_fees

        logger.debug(
            "Position #%s: simulated profit %s, fees %s, net profit %s",
            position.key,
            simulated_profit,
            execution_fees,
            profit,
        )
        return ProfitabilityResult(
            profit=profit,
            calls=tuple(calls),
            simulated_profit=simulated_profit,
            execution_fees=execution_fees,
            debt_to_liquidate=debt_to_liquidate,
            min_collateral_to_receive=min_collateral_to_receive,
        )

"""Monitoring loop — interleaves liquidability sweeps with position updates."""
from __future__ import annotations

import asyncio
import logging

from ..chains.confirmation import RpcTransactionWaiter
from ..config import AppConfig
from ..errors import ChainError, LiquidationError, ProducerClosedError
from ..interfaces.account import Account
from ..interfaces.chain import ChainClient, TransactionWaiter
from ..interfaces.position import Position
from ..interfaces.storage import Storage
from ..models import PositionUpdate
from ..oracles.prices import LatestOraclePrices
from .channel import PositionChannel
from .executor import LiquidationExecutor
from .position_book import PositionBook
from .profitability import ProfitabilityEngine

logger = logging.getLogger(__name__)


class MonitoringService:
    """Watches indexed positions and liquidates the profitable ones.

    A single task waits on two sources, the sweep timer and the position
    channel, and runs exactly one handler at a time. Any error escaping a
    handler stops the service, except liquidation failures when
    ``monitor.isolate_failures`` is enabled.
    """

    def __init__(
        self,
        config: AppConfig,
        chain: ChainClient,
        account: Account,
        updates: PositionChannel,
        prices: LatestOraclePrices,
        storage: Storage,
        positions: PositionBook | None = None,
        waiter: TransactionWaiter | None = None,
    ) -> None:
        self._config = config
        self._updates = updates
        self._prices = prices
        self._storage = storage
        self.positions = positions if positions is not None else PositionBook()
        self.check_positions_interval = config.monitor.check_positions_interval
        self.isolate_failures = config.monitor.isolate_failures

        engine = ProfitabilityEngine(config.protocol, chain, account, prices)
        self._executor = LiquidationExecutor(
            engine,
            account,
            waiter or RpcTransactionWaiter(chain, config.chain.confirmation),
            config.monitor.min_profit,
        )

    @classmethod
    async def from_storage(
        cls,
        config: AppConfig,
        chain: ChainClient,
        account: Account,
        updates: PositionChannel,
        prices: LatestOraclePrices,
        storage: Storage,
        waiter: TransactionWaiter | None = None,
    ) -> MonitoringService:
        """Build the service with its book restored from ``storage``."""
        positions = await PositionBook.load(storage)
        return cls(config, chain, account, updates, prices, storage, positions, waiter)

    async def start(self) -> None:
        """Run until a fatal error; closing the update channel is fatal too."""
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        recv_task: asyncio.Task[PositionUpdate | None] | None = None
        tick_task: asyncio.Task[None] | None = None
        served_update = False

        logger.info(
            "Starting monitoring (checking positions every %ds)",
            self.check_positions_interval,
        )
        try:
            while True:
                if recv_task is None:
                    recv_task = asyncio.create_task(self._updates.recv())
                if tick_task is None:
                    tick_task = asyncio.create_task(
                        asyncio.sleep(max(0.0, next_tick - loop.time()))
                    )

                await asyncio.wait(
                    {recv_task, tick_task}, return_when=asyncio.FIRST_COMPLETED
                )

                # Updates win a tie, but a tick left ready by the previous
                # iteration is served before the next update.
                tick_owed = served_update and tick_task.done()
                if recv_task.done() and not tick_owed:
                    update = recv_task.result()
                    recv_task = None
                    if update is None:
                        raise ProducerClosedError("Monitoring stopped unexpectedly.")
                    await self._on_position_update(update)
                    served_update = True
                else:
                    tick_task = None
                    served_update = False
                    await self.monitor_positions_liquidability()
                    next_tick = max(next_tick + self.check_positions_interval, loop.time())
        finally:
            for task in (recv_task, tick_task):
                if task is not None and not task.done():
                    task.cancel()

    async def _on_position_update(self, update: PositionUpdate) -> None:
        snapshot = await self.positions.upsert(update.position)
        await self._storage.save(snapshot, update.block_number)
        logger.debug(
            "Position #%s updated at block %d (%d monitored)",
            update.position.key,
            update.block_number,
            len(snapshot),
        )

    async def monitor_positions_liquidability(self) -> None:
        """Check every monitored position and liquidate the profitable ones."""
        async with self.positions.read() as positions:
            if not positions:
                logger.debug("No positions to monitor")
                return

            logger.info("Checking if any of %d positions is liquidable...", len(positions))
            for position in positions.values():
                await self._check_position(position)
            logger.info("They're good.. for now...")

    async def _check_position(self, position: Position) -> None:
        try:
            if not await position.is_liquidable(self._prices):
                return
            logger.info("Liquidable position found #%s!", position.key)
            await self._executor.try_to_liquidate(position)
        except (ChainError, LiquidationError):
            if not self.isolate_failures:
                raise
            logger.exception(
                "Liquidation attempt for position #%s failed, continuing", position.key
            )

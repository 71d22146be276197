"""Wait for submitted transactions to be accepted on-chain."""
from __future__ import annotations

import asyncio
import logging

from ..config import ConfirmationConfig
from ..errors import ConfirmationError, RpcError
from ..interfaces.chain import ChainClient

logger = logging.getLogger(__name__)

ACCEPTED_STATUSES = frozenset({"ACCEPTED_ON_L2", "ACCEPTED_ON_L1"})
TX_HASH_NOT_FOUND = 29


class RpcTransactionWaiter:
    """Polls the transaction status until accepted, rejected, reverted or timed out."""

    def __init__(self, chain: ChainClient, config: ConfirmationConfig) -> None:
        self._chain = chain
        self.timeout = config.timeout
        self.poll_interval = config.poll_interval

    async def wait_for_acceptance(self, tx_hash: str) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout

        while True:
            try:
                status = await self._chain.get_transaction_status(tx_hash)
            except RpcError as e:
                # The node may not know the transaction yet.
                if e.code != TX_HASH_NOT_FOUND:
                    raise
                status = {}

            finality = status.get("finality_status")
            execution = status.get("execution_status")

            if finality == "REJECTED":
                raise ConfirmationError(f"Transaction {tx_hash} has been rejected")
            if execution == "REVERTED":
                reason = status.get("failure_reason", "unknown reason")
                raise ConfirmationError(f"Transaction {tx_hash} reverted: {reason}")
            if finality in ACCEPTED_STATUSES and execution == "SUCCEEDED":
                logger.debug("Transaction %s accepted (%s)", tx_hash, finality)
                return

            if loop.time() + self.poll_interval > deadline:
                raise ConfirmationError(
                    f"Timeout while waiting for transaction {tx_hash}"
                )
            await asyncio.sleep(self.poll_interval)

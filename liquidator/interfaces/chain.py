"""Chain client protocol — blockchain RPC abstraction."""
from typing import Any, Protocol


class ChainClient(Protocol):
    """Abstract interface for blockchain RPC interactions."""

    async def rpc_call(self, method: str, params: list[Any] | dict[str, Any]) -> Any: ...

    async def get_transaction_status(self, tx_hash: str) -> dict[str, Any]: ...


class TransactionWaiter(Protocol):
    """Blocks until a submitted transaction is accepted, or raises."""

    async def wait_for_acceptance(self, tx_hash: str) -> None: ...

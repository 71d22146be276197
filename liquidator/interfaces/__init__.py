"""Protocol interfaces for the liquidator."""
from .account import Account
from .chain import ChainClient, TransactionWaiter
from .position import Position
from .storage import Storage

__all__ = ["Account", "ChainClient", "Position", "Storage", "TransactionWaiter"]

"""Chain access: JSON-RPC client and confirmation polling."""
from .confirmation import RpcTransactionWaiter
from .rpc import JsonRpcClient

__all__ = ["JsonRpcClient", "RpcTransactionWaiter"]

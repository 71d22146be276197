"""JSON-RPC client with endpoint fallback."""
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ..config import ChainConfig
from ..errors import RpcError

logger = logging.getLogger(__name__)


class JsonRpcClient:
    """Blockchain JSON-RPC client with automatic endpoint fallback.

    Transport failures move on to the next endpoint. A JSON-RPC ``error``
    object is an answer from the node and is raised as-is.
    """

    def __init__(self, config: ChainConfig) -> None:
        self.endpoints = list(config.rpc_endpoints)
        self.timeout = config.rpc_timeout
        self.current_rpc_index = 0
        self._request_id = 0

    async def rpc_call(self, method: str, params: list[Any] | dict[str, Any]) -> Any:
        """Make RPC call with fallback to alternative endpoints."""
        if not self.endpoints:
            raise RpcError("No RPC endpoints configured")

        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }

        ssl_context = ssl.create_default_context(cafile=certifi.where())

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            rpc_index = (self.current_rpc_index + attempt) % len(self.endpoints)
            rpc_url = self.endpoints[rpc_index]

            try:
                connector = aiohttp.TCPConnector(ssl=ssl_context)
                async with aiohttp.ClientSession(connector=connector) as session:
                    async with session.post(
                        rpc_url,
                        json=payload,
                        timeout=aiohttp.ClientTimeout(total=self.timeout),
                    ) as response:
                        result = await response.json()
            except (aiohttp.ClientError, OSError, ValueError) as e:
                last_error = e
                logger.warning("RPC endpoint %s failed: %s", rpc_url, e)
                if attempt < len(self.endpoints) - 1:
                    logger.info("Trying next endpoint...")
                continue

            if rpc_index != self.current_rpc_index:
                logger.info("Switched to RPC endpoint: %s", rpc_url)
                self.current_rpc_index = rpc_index

            if not isinstance(result, dict):
                raise RpcError(f"{method}: malformed response from {rpc_url}: {result!r}")

            error = result.get("error")
            if error and not isinstance(error, dict):
                raise RpcError(f"{method}: {error}")
            if error:
                raise RpcError(
                    f"{method}: {error.get('message', error)}",
                    code=error.get("code"),
                )
            return result.get("result")

        raise RpcError(f"All RPC endpoints failed. Last error: {last_error}")

    async def get_transaction_status(self, tx_hash: str) -> dict[str, Any]:
        """Return the node's finality/execution status for a transaction."""
        return await self.rpc_call("starknet_getTransactionStatus", [tx_hash]) or {}

    async def block_number(self) -> int:
        return int(await self.rpc_call("starknet_blockNumber", []))

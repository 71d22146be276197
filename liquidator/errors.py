"""Exception taxonomy for the liquidator."""


class LiquidatorError(Exception):
    """Base error for the liquidator."""


class ProducerClosedError(LiquidatorError):
    """The position update channel was closed."""


class StorageError(LiquidatorError):
    """Snapshot persistence or read failure."""


class ChainError(LiquidatorError):
    """RPC, oracle, fee estimation, submission or confirmation failure."""


class RpcError(ChainError):
    """JSON-RPC call failed, either transport-side or with an error object."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class ConfirmationError(ChainError):
    """A submitted transaction was rejected, reverted or never accepted."""


class LiquidationError(LiquidatorError):
    """A position reported invalid liquidation sizing."""

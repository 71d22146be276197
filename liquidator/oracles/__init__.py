"""Oracle price handles and adapters."""
from .prices import LatestOraclePrices
from .pyth import PythOracle

__all__ = ["LatestOraclePrices", "PythOracle"]

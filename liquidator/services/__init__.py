"""Service modules"""
from .channel import PositionChannel
from .executor import LiquidationExecutor
from .monitoring import MonitoringService
from .position_book import PositionBook
from .profitability import ProfitabilityEngine

__all__ = [
    "LiquidationExecutor",
    "MonitoringService",
    "PositionBook",
    "PositionChannel",
    "ProfitabilityEngine",
]

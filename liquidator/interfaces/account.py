"""Account protocol — fee estimation and transaction submission."""
from decimal import Decimal
from typing import Protocol, Sequence

from ..models import Call


class Account(Protocol):
    """Signing account able to price and submit a set of calls."""

    async def estimate_fees_cost(self, calls: Sequence[Call]) -> Decimal: ...

    async def execute_txs(self, calls: Sequence[Call]) -> str: ...

"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

from liquidator.config import (
    AppConfig,
    ChainConfig,
    ConfirmationConfig,
    LiquidationMode,
    MonitorConfig,
    PriceOracleConfig,
    ProtocolConfig,
    PythConfig,
    StorageConfig,
)
from liquidator.models import Asset, Call
from liquidator.oracles.prices import LatestOraclePrices

USDC = Asset(symbol="USDC", address="0x053c91253bc9682c04929ca02ed00b3e423f6710d2ee7e0d5ebb06f3ecf368a8", decimals=6)
ETH = Asset(symbol="ETH", address="0x049d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7", decimals=18)

LIQUIDATE_ADDRESS = "0x0liquidate"


# ---------------------------------------------------------------------------
# Position double
# ---------------------------------------------------------------------------


@dataclass
class FakePosition:
    """In-memory position with fixed sizing; records liquidation requests."""

    key: str
    debt: Asset = USDC
    collateral: Asset = ETH
    liquidable: bool = True
    liquidable_debt: Decimal = Decimal("1000")
    liquidable_collateral: Decimal = Decimal("2000")
    liquidation_factor: Decimal = Decimal("0.1")
    version: int = 0
    liquidation_requests: list[tuple[str, Decimal, Decimal]] = field(default_factory=list)

    async def is_liquidable(self, prices: LatestOraclePrices) -> bool:
        if prices.get(self.debt.symbol) is None or prices.get(self.collateral.symbol) is None:
            return False
        return self.liquidable

    async def liquidable_amount(
        self, mode: LiquidationMode, prices: LatestOraclePrices
    ) -> tuple[Decimal, Decimal]:
        return self.liquidable_debt, self.liquidable_collateral

    async def fetch_liquidation_factor(self, protocol: ProtocolConfig, chain: Any) -> Decimal:
        return self.liquidation_factor

    async def get_liquidation_txs(
        self,
        account: Any,
        liquidate_address: str,
        debt_to_liquidate: Decimal,
        min_collateral_to_receive: Decimal,
    ) -> list[Call]:
        self.liquidation_requests.append(
            (liquidate_address, debt_to_liquidate, min_collateral_to_receive)
        )
        return [
            Call(
                to=liquidate_address,
                selector="liquidate",
                calldata=(self.key, str(debt_to_liquidate), str(min_collateral_to_receive)),
            )
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "version": self.version,
            "liquidable": self.liquidable,
            "liquidable_debt": str(self.liquidable_debt),
            "liquidable_collateral": str(self.liquidable_collateral),
            "liquidation_factor": str(self.liquidation_factor),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> FakePosition:
        return cls(
            key=raw["key"],
            version=int(raw["version"]),
            liquidable=bool(raw["liquidable"]),
            liquidable_debt=Decimal(raw["liquidable_debt"]),
            liquidable_collateral=Decimal(raw["liquidable_collateral"]),
            liquidation_factor=Decimal(raw["liquidation_factor"]),
        )


@pytest.fixture()
def make_position() -> Callable[..., FakePosition]:
    return FakePosition


@pytest.fixture()
def position_decoder() -> Callable[[dict[str, Any]], FakePosition]:
    return FakePosition.from_dict


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_protocol_config() -> ProtocolConfig:
    return ProtocolConfig(
        liquidation_mode=LiquidationMode.PARTIAL,
        liquidate_address=LIQUIDATE_ADDRESS,
        contracts={"singleton": "0x0singleton"},
    )


@pytest.fixture()
def sample_chain_config() -> ChainConfig:
    return ChainConfig(
        rpc_endpoints=("https://rpc1.example.com", "https://rpc2.example.com"),
        rpc_timeout=10,
        confirmation=ConfirmationConfig(timeout=1.0, poll_interval=0.01),
    )


@pytest.fixture()
def sample_app_config(
    sample_protocol_config: ProtocolConfig,
    sample_chain_config: ChainConfig,
    tmp_path: Path,
) -> AppConfig:
    return AppConfig(
        monitor=MonitorConfig(
            check_positions_interval=1,
            min_profit=Decimal("500"),
            isolate_failures=False,
        ),
        protocol=sample_protocol_config,
        chain=sample_chain_config,
        storage=StorageConfig(path=str(tmp_path / "positions.json")),
        price_oracle=PriceOracleConfig(
            provider="pyth",
            pyth=PythConfig(hermes_url="https://hermes.example.com", feeds={"ETH": "aaa"}),
        ),
    )


@pytest.fixture()
def prices() -> LatestOraclePrices:
    return LatestOraclePrices({"USDC": Decimal("1"), "ETH": Decimal("3500")})


# ---------------------------------------------------------------------------
# Collaborator doubles
# ---------------------------------------------------------------------------


@pytest.fixture()
def account() -> AsyncMock:
    mock_account = AsyncMock()
    mock_account.estimate_fees_cost.return_value = Decimal("10")
    mock_account.execute_txs.return_value = "0x0123abc"
    return mock_account


@pytest.fixture()
def chain() -> AsyncMock:
    return AsyncMock()


@pytest.fixture()
def waiter() -> AsyncMock:
    return AsyncMock()


@pytest.fixture()
def storage() -> AsyncMock:
    mock_storage = AsyncMock()
    mock_storage.load.return_value = ({}, None)
    return mock_storage


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    monitor:
      check_positions_interval: 5
      min_profit: 0.1
      isolate_failures: true
    protocol:
      liquidation_mode: Partial
      liquidate_address: "0xLIQ"
      contracts:
        singleton: "0xSINGLETON"
    chain:
      rpc_endpoints: ["https://rpc.example.com"]
      rpc_timeout: 10
      confirmation:
        timeout: 20
        poll_interval: 2
    storage:
      path: "positions.json"
    price_oracle:
      provider: pyth
      pyth:
        hermes_url: "https://hermes.example.com"
        feeds: {ETH: "aaa", USDC: "bbb"}
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file

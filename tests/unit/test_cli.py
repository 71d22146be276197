"""Unit tests for CLI argument parsing and command output."""
from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from liquidator.cli import _summarize_config, build_parser, show_positions, show_prices
from liquidator.config import AppConfig


class TestBuildParser:
    @pytest.mark.parametrize("command", ["check-config", "positions", "prices"])
    def test_commands(self, command: str) -> None:
        args = build_parser().parse_args([command])
        assert args.command == command

    def test_config_flag(self) -> None:
        args = build_parser().parse_args(["--config", "/tmp/c.yaml", "positions"])
        assert args.config == "/tmp/c.yaml"

    def test_log_level_flag(self) -> None:
        args = build_parser().parse_args(["--log-level", "DEBUG", "check-config"])
        assert args.log_level == "DEBUG"

    def test_no_command(self) -> None:
        args = build_parser().parse_args([])
        assert args.command is None


class TestSummarizeConfig:
    def test_mentions_mode_and_threshold(self, sample_app_config: AppConfig) -> None:
        summary = _summarize_config(sample_app_config)
        assert "Liquidation mode: partial" in summary
        assert "Minimum profit: 500" in summary
        assert "Isolate failures: no" in summary


class TestShowPositions:
    def test_nothing_stored(self, sample_app_config: AppConfig) -> None:
        assert show_positions(sample_app_config) == "No positions stored yet."

    def test_lists_stored_keys(self, sample_app_config: AppConfig) -> None:
        Path(sample_app_config.storage.path).write_text(
            json.dumps({"block_number": 77, "positions": {"b": {}, "a": {}}})
        )
        output = show_positions(sample_app_config)
        assert output.splitlines() == ["Block 77: 2 positions", "  #a", "  #b"]


class TestShowPrices:
    @pytest.mark.asyncio
    async def test_prints_sorted_prices(self, sample_app_config: AppConfig) -> None:
        fetched = {"USDC": Decimal("1.0001"), "ETH": Decimal("3500.5")}
        with patch(
            "liquidator.cli.PythOracle.fetch_prices", AsyncMock(return_value=fetched)
        ):
            output = await show_prices(sample_app_config)
        assert output.splitlines() == ["ETH: 3500.5", "USDC: 1.0001"]

    @pytest.mark.asyncio
    async def test_no_prices(self, sample_app_config: AppConfig) -> None:
        with patch("liquidator.cli.PythOracle.fetch_prices", AsyncMock(return_value={})):
            output = await show_prices(sample_app_config)
        assert output == "No prices available."

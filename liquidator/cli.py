"""Command-line interface for the liquidator."""
from __future__ import annotations

import argparse
import asyncio
import sys

from .config import AppConfig, load_config
from .logging_setup import configure_logging
from .oracles import LatestOraclePrices, PythOracle
from .storages import JsonFileStorage


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="lending-liquidator",
        description="Lending protocol liquidator",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("check-config", help="Validate the configuration and print a summary")
    sub.add_parser("positions", help="Show the persisted position snapshot")
    sub.add_parser("prices", help="Fetch and print current oracle prices")

    return parser


def _summarize_config(config: AppConfig) -> str:
    monitor = config.monitor
    protocol = config.protocol
    return (
        f"Liquidation mode: {protocol.liquidation_mode.value}\n"
        f"Liquidate address: {protocol.liquidate_address}\n"
        f"Check interval: {monitor.check_positions_interval}s\n"
        f"Minimum profit: {monitor.min_profit}\n"
        f"Isolate failures: {'yes' if monitor.isolate_failures else 'no'}\n"
        f"RPC endpoints: {len(config.chain.rpc_endpoints)}\n"
        f"Storage: {config.storage.path}"
    )


def show_positions(config: AppConfig) -> str:
    document = JsonFileStorage(config.storage.path).read_raw()
    if not document:
        return "No positions stored yet."
    positions = document.get("positions", {})
    lines = [f"Block {document.get('block_number')}: {len(positions)} positions"]
    lines.extend(f"  #{key}" for key in sorted(positions))
    return "\n".join(lines)


async def show_prices(config: AppConfig) -> str:
    latest = LatestOraclePrices()
    await PythOracle(config.price_oracle.pyth).refresh(latest)
    prices = latest.snapshot()
    if not prices:
        return "No prices available."
    return "\n".join(f"{symbol}: {price}" for symbol, price in sorted(prices.items()))


async def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)

    if args.command == "check-config":
        print(_summarize_config(config))
    elif args.command == "positions":
        print(show_positions(config))
    elif args.command == "prices":
        print(await show_prices(config))
    else:
        build_parser().print_help()
        sys.exit(1)


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    asyncio.run(_run(args))


if __name__ == "__main__":
    main()

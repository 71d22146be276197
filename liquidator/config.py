"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


class LiquidationMode(Enum):
    FULL = "full"
    PARTIAL = "partial"


@dataclass(frozen=True)
class MonitorConfig:
    check_positions_interval: int = 10
    min_profit: Decimal = Decimal("0")
    isolate_failures: bool = False


@dataclass(frozen=True)
class ProtocolConfig:
    liquidation_mode: LiquidationMode = LiquidationMode.FULL
    liquidate_address: str = ""
    contracts: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ConfirmationConfig:
    timeout: float = 15.0
    poll_interval: float = 1.0


@dataclass(frozen=True)
class ChainConfig:
    rpc_endpoints: tuple[str, ...] = ()
    rpc_timeout: int = 30
    confirmation: ConfirmationConfig = field(default_factory=ConfirmationConfig)


@dataclass(frozen=True)
class StorageConfig:
    path: str = "data/positions.json"


@dataclass(frozen=True)
class PythConfig:
    hermes_url: str = "https://hermes.pyth.network/v2/updates/price/latest"
    feeds: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PriceOracleConfig:
    provider: str = "pyth"
    pyth: PythConfig = field(default_factory=PythConfig)


@dataclass(frozen=True)
class AppConfig:
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    protocol: ProtocolConfig = field(default_factory=ProtocolConfig)
    chain: ChainConfig = field(default_factory=ChainConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    price_oracle: PriceOracleConfig = field(default_factory=PriceOracleConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def parse_decimal(value: Any, name: str) -> Decimal:
    """Parse a config value into a finite Decimal.

    Floats coming out of YAML go through ``str`` first so ``0.1`` stays
    ``Decimal("0.1")``.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid decimal for '{name}': {value!r}")
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid decimal for '{name}': {value!r}") from e
    if not parsed.is_finite():
        raise ValueError(f"Invalid decimal for '{name}': {value!r}")
    return parsed


def parse_interval(value: Any, name: str) -> int:
    """Parse a whole number of seconds; fractional values are rejected, not truncated."""
    parsed = parse_decimal(value, name)
    if parsed != parsed.to_integral_value():
        raise ValueError(f"'{name}' must be a whole number of seconds, got {value!r}")
    return int(parsed)


def parse_liquidation_mode(value: Any) -> LiquidationMode:
    try:
        return LiquidationMode(str(value).strip().lower())
    except ValueError as e:
        choices = ", ".join(m.value for m in LiquidationMode)
        raise ValueError(
            f"Unknown liquidation mode {value!r} (expected one of: {choices})"
        ) from e


def _build_monitor(raw: dict[str, Any]) -> MonitorConfig:
    return MonitorConfig(
        check_positions_interval=parse_interval(
            raw.get("check_positions_interval", 10), "check_positions_interval"
        ),
        min_profit=parse_decimal(raw.get("min_profit", "0"), "min_profit"),
        isolate_failures=bool(raw.get("isolate_failures", False)),
    )


def _build_protocol(raw: dict[str, Any]) -> ProtocolConfig:
    return ProtocolConfig(
        liquidation_mode=parse_liquidation_mode(raw.get("liquidation_mode", "full")),
        liquidate_address=str(raw.get("liquidate_address", "")),
        contracts=dict(raw.get("contracts", {})),
    )


def _build_chain(raw: dict[str, Any]) -> ChainConfig:
    conf = raw.get("confirmation", {})
    return ChainConfig(
        rpc_endpoints=tuple(raw.get("rpc_endpoints", [])),
        rpc_timeout=int(raw.get("rpc_timeout", 30)),
        confirmation=ConfirmationConfig(
            timeout=float(conf.get("timeout", 15.0)),
            poll_interval=float(conf.get("poll_interval", 1.0)),
        ),
    )


def _build_storage(raw: dict[str, Any]) -> StorageConfig:
    return StorageConfig(path=str(raw.get("path", StorageConfig.path)))


def _build_price_oracle(raw: dict[str, Any]) -> PriceOracleConfig:
    pyth_raw = raw.get("pyth", {})
    return PriceOracleConfig(
        provider=raw.get("provider", "pyth"),
        pyth=PythConfig(
            hermes_url=pyth_raw.get("hermes_url", PythConfig.hermes_url),
            feeds=dict(pyth_raw.get("feeds", {})),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        monitor=_build_monitor(raw.get("monitor", {})),
        protocol=_build_protocol(raw.get("protocol", {})),
        chain=_build_chain(raw.get("chain", {})),
        storage=_build_storage(raw.get("storage", {})),
        price_oracle=_build_price_oracle(raw.get("price_oracle", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if cfg.monitor.check_positions_interval <= 0:
        raise ValueError("check_positions_interval must be greater than 0")

    if not cfg.protocol.liquidate_address:
        raise ValueError("Protocol has no liquidate_address")

    if not cfg.chain.rpc_endpoints:
        raise ValueError("At least one RPC endpoint must be configured")

    if cfg.chain.confirmation.timeout <= 0:
        raise ValueError("Confirmation timeout must be greater than 0")
    if cfg.chain.confirmation.poll_interval <= 0:
        raise ValueError("Confirmation poll_interval must be greater than 0")

    if not cfg.storage.path:
        raise ValueError("Storage path must not be empty")

"""
TOML-based configuration for erdkit.

Loads settings from a TOML file and/or environment variables.
Environment variables take precedence over file values.

Usage:
    from erdkit_core.config import load_config
    cfg = load_config("erdkit.toml")

Example file:

    [network]
    chain_id = "1"
    min_gas_price = 1000000000

    [wallet]
    pem_file = "wallets/alice.pem"

    [logging]
    level = "DEBUG"
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib  # type: ignore[import]
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[import,no-redef]

from erdkit_core.errors import FormatError


@dataclass
class NetworkConfig:
    """Chain parameters and gas schedule used by the transaction builders."""
    chain_id: str = "D"
    min_gas_price: int = 1_000_000_000
    min_gas_limit: int = 50_000
    gas_per_data_byte: int = 1_500
    gas_limit_esdt_transfer: int = 200_000
    gas_limit_esdt_nft_transfer: int = 200_000
    additional_gas_for_esdt_transfer: int = 100_000
    additional_gas_for_esdt_nft_transfer: int = 800_000
    gas_limit_issue: int = 60_000_000
    issue_cost: int = 50_000_000_000_000_000   # 0.05 EGLD
    tx_version: int = 1


@dataclass
class WalletConfig:
    """Default key files; a CLI flag always wins over these."""
    pem_file: str = ""
    keystore_file: str = ""


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    format: str = "human"   # "human" or "json"
    file: str | None = None


@dataclass
class ErdkitConfig:
    """Top-level configuration container."""
    network: NetworkConfig = field(default_factory=NetworkConfig)
    wallet: WalletConfig = field(default_factory=WalletConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _merge(dc: Any, raw: dict[str, Any]) -> None:
    """Merge a raw dict into a dataclass instance (in-place)."""
    for key, value in raw.items():
        key_under = key.replace("-", "_")
        if hasattr(dc, key_under):
            setattr(dc, key_under, value)


def _env_int(name: str) -> int | None:
    v = os.environ.get(name)
    if not v:
        return None
    try:
        return int(v)
    except ValueError as exc:
        raise FormatError(f"{name} must be an integer, got {v!r}") from exc


def load_config(path: str | None = None) -> ErdkitConfig:
    """
    Load configuration from a TOML file, then overlay environment variables.

    Env-var mapping:
        ERDKIT_CHAIN_ID        -> network.chain_id
        ERDKIT_MIN_GAS_PRICE   -> network.min_gas_price
        ERDKIT_PEM_FILE        -> wallet.pem_file
        ERDKIT_KEYSTORE_FILE   -> wallet.keystore_file
        ERDKIT_LOG_LEVEL       -> logging.level
        ERDKIT_LOG_FMT         -> logging.format
    """
    cfg = ErdkitConfig()

    # ── TOML file ────────────────────────────────────────────────
    if path is not None:
        p = Path(path)
        if p.exists():
            try:
                with open(p, "rb") as f:
                    data = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise FormatError(f"Invalid config file {p}: {exc}") from exc
            for section_name, section_dc in [
                ("network", cfg.network),
                ("wallet", cfg.wallet),
                ("logging", cfg.logging),
            ]:
                if section_name in data:
                    _merge(section_dc, data[section_name])

    # ── Environment variable overrides ───────────────────────────
    if v := os.environ.get("ERDKIT_CHAIN_ID"):
        cfg.network.chain_id = v
    if (gas_price := _env_int("ERDKIT_MIN_GAS_PRICE")) is not None:
        cfg.network.min_gas_price = gas_price
    if v := os.environ.get("ERDKIT_PEM_FILE"):
        cfg.wallet.pem_file = v
    if v := os.environ.get("ERDKIT_KEYSTORE_FILE"):
        cfg.wallet.keystore_file = v
    if v := os.environ.get("ERDKIT_LOG_LEVEL"):
        cfg.logging.level = v.upper()
    if v := os.environ.get("ERDKIT_LOG_FMT"):
        cfg.logging.format = v

    return cfg

"""
GrantLedger Configuration

Values are read from ``GRANTLEDGER_*`` environment variables at import time.
Tests that change the environment reload this module.

Supports testnet and mainnet; mainnet refuses to fall back to a default
state file location.
"""

from __future__ import annotations

import logging
import os
from enum import Enum

from .constants import (
    DEFAULT_DECIMALS,
    DEFAULT_INITIAL_SUPPLY_TOKENS,
    DEFAULT_TOKEN_NAME,
    DEFAULT_TOKEN_SYMBOL,
)
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class NetworkType(Enum):
    TESTNET = "testnet"
    MAINNET = "mainnet"


def _get_int(env_var: str, default: int, minimum: int = 0) -> int:
    """Read a non-negative integer setting; malformed values are fatal."""
    raw = os.getenv(env_var, "").strip()
    if not raw:
        return default
    try:
        value = int(raw.replace("_", ""))
    except ValueError as exc:
        raise ConfigurationError(
            f"{env_var} must be an integer, got {raw!r}",
            details={"env_var": env_var, "value": raw},
        ) from exc
    if value < minimum:
        raise ConfigurationError(
            f"{env_var} must be >= {minimum}, got {value}",
            details={"env_var": env_var, "value": value},
        )
    return value


def _get_network() -> NetworkType:
    raw = os.getenv("GRANTLEDGER_NETWORK", "testnet").strip().lower()
    try:
        return NetworkType(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"GRANTLEDGER_NETWORK must be 'testnet' or 'mainnet', got {raw!r}",
            details={"env_var": "GRANTLEDGER_NETWORK", "value": raw},
        ) from exc


def _get_state_path(network: NetworkType) -> str:
    value = os.getenv("GRANTLEDGER_STATE_PATH", "").strip()
    if value:
        return value
    if network is NetworkType.MAINNET:
        raise ConfigurationError(
            "CRITICAL: GRANTLEDGER_STATE_PATH environment variable required for mainnet"
        )
    return os.path.join(os.getcwd(), "grantledger_state.json")


NETWORK = _get_network()  # Default to testnet for safety

TOKEN_NAME = os.getenv("GRANTLEDGER_TOKEN_NAME", DEFAULT_TOKEN_NAME)
TOKEN_SYMBOL = os.getenv("GRANTLEDGER_TOKEN_SYMBOL", DEFAULT_TOKEN_SYMBOL)
DECIMALS = _get_int("GRANTLEDGER_DECIMALS", DEFAULT_DECIMALS)
INITIAL_SUPPLY = _get_int("GRANTLEDGER_INITIAL_SUPPLY", DEFAULT_INITIAL_SUPPLY_TOKENS)

STATE_PATH = _get_state_path(NETWORK)

LOG_LEVEL = os.getenv("GRANTLEDGER_LOG_LEVEL", "WARNING").strip().upper()
LOG_FILE = os.getenv("GRANTLEDGER_LOG_FILE", "").strip()
LOG_JSON = _get_int("GRANTLEDGER_LOG_JSON", 1) != 0

if DECIMALS > 77:
    # 10**78 already exceeds uint256
    raise ConfigurationError(f"GRANTLEDGER_DECIMALS too large: {DECIMALS}")

if LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
    logger.warning(
        "Unknown log level %s, using WARNING",
        LOG_LEVEL,
        extra={"event": "config.bad_log_level", "value": LOG_LEVEL},
    )
    LOG_LEVEL = "WARNING"

"""
Pipeline settings.

Policy constants (bot fee rate, fixed bot share, fixed SOL price) and the
enrichment pacing live here as named values with the observed defaults;
each can be overridden through the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from backend_txrecon.config.env import (
    get_helius_api_key,
    get_helius_api_url,
    get_solana_rpc_url,
    load_txrecon_env,
)

WSOL_MINT = "So11111111111111111111111111111111111111112"
MEMO_PROGRAM_ID = "MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr"
LAMPORTS_PER_SOL = 1_000_000_000

DEFAULT_SOL_PRICE_USD = Decimal("30")
DEFAULT_BOT_FEE_RATE = Decimal("0.1")
DEFAULT_BOT_PERCENTAGE = Decimal("1.5")
DEFAULT_ENRICH_DELAY_MS = 50
DEFAULT_REQUEST_TIMEOUT = 30.0

# Default artifact names in the working directory
SIGNATURES_FILE = "_signatures.json"
LOG_FILE = "paste.txt"
INTERMEDIATE_REPORT_FILE = "transaction_analysis.csv"
FINAL_REPORT_FILE = "output.csv"


@dataclass(frozen=True)
class Settings:
    helius_api_key: str = ""
    helius_api_url: str = ""
    solana_rpc_url: str = ""
    sol_price_usd: Decimal = DEFAULT_SOL_PRICE_USD
    bot_fee_rate: Decimal = DEFAULT_BOT_FEE_RATE
    bot_percentage: Decimal = DEFAULT_BOT_PERCENTAGE
    enrich_delay_ms: int = DEFAULT_ENRICH_DELAY_MS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @property
    def enrich_delay_sec(self) -> float:
        return self.enrich_delay_ms / 1000.0


def _env_decimal(name: str, default: Decimal) -> Decimal:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = Decimal(raw)
    except InvalidOperation as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if not value.is_finite():
        raise ValueError(f"{name} must be finite, got {raw!r}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def get_settings() -> Settings:
    """
    Return the current settings, read from the environment (.env loaded first).

    Raises:
        ValueError: a numeric variable is set to something unparseable.
    """
    load_txrecon_env()
    return Settings(
        helius_api_key=get_helius_api_key(),
        helius_api_url=get_helius_api_url(),
        solana_rpc_url=get_solana_rpc_url(),
        sol_price_usd=_env_decimal("SOL_PRICE_USD", DEFAULT_SOL_PRICE_USD),
        bot_fee_rate=_env_decimal("BOT_FEE_RATE", DEFAULT_BOT_FEE_RATE),
        bot_percentage=_env_decimal("BOT_PERCENTAGE", DEFAULT_BOT_PERCENTAGE),
        enrich_delay_ms=_env_int("ENRICH_DELAY_MS", DEFAULT_ENRICH_DELAY_MS),
        request_timeout=_env_float("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
    )

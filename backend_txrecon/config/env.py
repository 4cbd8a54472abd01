"""
Environment variable loading for TxRecon.

- HELIUS_API_KEY: Helius API key (enhanced transactions endpoint)
- SOLANA_RPC_URL: RPC endpoint for signature collection
- HELIUS_API_URL: override for the enhanced transactions endpoint
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root: config is backend_txrecon/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
HELIUS_MAINNET_URL_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={key}"
HELIUS_TRANSACTIONS_URL = "https://api.helius.xyz/v0/transactions/"


def load_txrecon_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH)


def get_helius_api_key() -> str:
    """Return HELIUS_API_KEY from env, or empty string when unset."""
    load_txrecon_env()
    return (os.getenv("HELIUS_API_KEY") or "").strip()


def get_helius_api_url() -> str:
    """Enhanced transactions endpoint, without the api-key query string."""
    load_txrecon_env()
    return (os.getenv("HELIUS_API_URL") or "").strip() or HELIUS_TRANSACTIONS_URL


def get_solana_rpc_url() -> str:
    """
    Resolve Solana RPC URL from env.
    Order: SOLANA_RPC_URL > HELIUS_API_KEY (mainnet) > public mainnet.
    """
    load_txrecon_env()
    url = (os.getenv("SOLANA_RPC_URL") or os.getenv("RPC_URL") or "").strip()
    if url:
        return url
    key = get_helius_api_key()
    if key:
        return HELIUS_MAINNET_URL_TEMPLATE.format(key=key)
    return MAINNET_RPC_URL


def mask_api_key(url: str) -> str:
    """Hide the api-key value of a Helius URL for printing."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url


def print_txrecon_startup(script_name: str) -> None:
    """Print the endpoints in use at script start."""
    rpc = mask_api_key(get_solana_rpc_url())
    api = get_helius_api_url()
    key = get_helius_api_key()
    key_state = f"{key[:4]}****" if key else "(not set)"
    print(f"[txrecon] {script_name} | rpc={rpc} | helius_api={api} | helius_key={key_state}")

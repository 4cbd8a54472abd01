"""
Pytest fixtures for TxRecon tests. Helius is never contacted: the client gets
a MagicMock session whose post() returns canned enhanced-transaction payloads.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any
from unittest.mock import MagicMock

import pytest

from backend_txrecon.config.settings import MEMO_PROGRAM_ID, WSOL_MINT, Settings

BOT_WALLET = "9EcpPJXDTUh4MnKjTYcBT2hBughweBESUPMqYNqsyjzj"
POOL_WALLET = "5Q544fKrFoe6tsEbD7S8EmxGTJYAKtTVhAW5Q5pge4j1"
JITO_TIP_ACCOUNT = "96gYZGLnJYVFmbjzopPSU6QiEV5fGqZNyN9nmNhvrZU5"
# base58 of b"hello world"
MEMO_HELLO_WORLD_B58 = "StV1DL6CwTryKyV"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        helius_api_key="test-key",
        helius_api_url="https://api.helius.xyz/v0/transactions/",
        solana_rpc_url="https://api.mainnet-beta.solana.com",
        sol_price_usd=Decimal("30"),
        bot_fee_rate=Decimal("0.1"),
        bot_percentage=Decimal("1.5"),
        enrich_delay_ms=50,
        request_timeout=5.0,
    )


def make_helius_tx(
    signature: str,
    *,
    fee_payer: str = BOT_WALLET,
    wsol_in: list[float] | None = None,
    wsol_out: list[float] | None = None,
    tips_lamports: list[int] | None = None,
    memo_b58: str | None = MEMO_HELLO_WORLD_B58,
    timestamp: int = 1700000000,
) -> dict[str, Any]:
    """Build an enhanced-transaction payload in the Helius response shape."""
    token_transfers = []
    for amt in wsol_in if wsol_in is not None else [1.5]:
        token_transfers.append(
            {"mint": WSOL_MINT, "fromUserAccount": POOL_WALLET, "toUserAccount": fee_payer, "tokenAmount": amt}
        )
    for amt in wsol_out if wsol_out is not None else [1.0]:
        token_transfers.append(
            {"mint": WSOL_MINT, "fromUserAccount": fee_payer, "toUserAccount": POOL_WALLET, "tokenAmount": amt}
        )
    native_transfers = [
        {"fromUserAccount": fee_payer, "toUserAccount": JITO_TIP_ACCOUNT, "amount": lamports}
        for lamports in (tips_lamports if tips_lamports is not None else [1_000_000])
    ]
    instructions: list[dict[str, Any]] = [
        {"programId": "ComputeBudget111111111111111111111111111111", "data": "3DdGGhkhJbjm", "accounts": []},
    ]
    if memo_b58 is not None:
        instructions.append({"programId": MEMO_PROGRAM_ID, "data": memo_b58, "accounts": []})
    return {
        "signature": signature,
        "feePayer": fee_payer,
        "timestamp": timestamp,
        "tokenTransfers": token_transfers,
        "nativeTransfers": native_transfers,
        "instructions": instructions,
    }


@pytest.fixture
def helius_tx():
    return make_helius_tx


def mock_response(payload: Any, status_code: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp


@pytest.fixture
def helius_session():
    """
    Session mock serving payloads by signature. Unknown signatures get [].

    Usage: session = helius_session({"S1": make_helius_tx("S1")})
    """

    def _build(payloads: dict[str, Any]) -> MagicMock:
        session = MagicMock()

        def _post(url, params=None, json=None, timeout=None):
            (sig,) = json["transactions"]
            payload = payloads.get(sig)
            return mock_response([payload] if payload is not None else [])

        session.post.side_effect = _post
        return session

    return _build

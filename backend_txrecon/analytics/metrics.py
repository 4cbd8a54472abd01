"""
Per-transaction financial metrics from decoded on-chain effects.

Pure functions, no I/O. Flow direction is classified relative to the fee
payer (the bot wallet):

- total_in:  wrapped SOL received by the fee payer
- total_out: wrapped SOL sent by the fee payer
- tip:       native SOL sent by the fee payer, in SOL
- bot_fee = tip * bot_fee_rate
- fee_percentage = tip / total_in * 100 (NaN when total_in is zero)
- profit = total_in - total_out; profit_usd = profit * sol_price_usd
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from backend_txrecon.config.settings import (
    DEFAULT_BOT_FEE_RATE,
    DEFAULT_BOT_PERCENTAGE,
    DEFAULT_SOL_PRICE_USD,
    LAMPORTS_PER_SOL,
    WSOL_MINT,
)
from backend_txrecon.models import (
    NativeTransfer,
    TransactionEffects,
    TransactionMetrics,
    TransferEffect,
)

NAN = Decimal("NaN")


def token_flows(
    transfers: Iterable[TransferEffect],
    account: str,
    mint: str = WSOL_MINT,
) -> tuple[Decimal, Decimal]:
    """Return (total_in, total_out) of `mint` for `account`."""
    total_in = Decimal(0)
    total_out = Decimal(0)
    for t in transfers:
        if t.mint != mint:
            continue
        if t.to_account == account:
            total_in += t.amount
        if t.from_account == account:
            total_out += t.amount
    return total_in, total_out


def native_outflow_sol(transfers: Iterable[NativeTransfer], account: str) -> Decimal:
    lamports = sum(t.lamports for t in transfers if t.from_account == account)
    return Decimal(lamports) / Decimal(LAMPORTS_PER_SOL)


def fee_percentage(tip: Decimal, total_in: Decimal) -> Decimal:
    """tip as a percentage of total_in; NaN when total_in is zero."""
    if total_in == 0:
        return NAN
    return tip / total_in * 100


def compute_metrics(
    effects: TransactionEffects,
    *,
    bot_fee_rate: Decimal = DEFAULT_BOT_FEE_RATE,
    bot_percentage: Decimal = DEFAULT_BOT_PERCENTAGE,
    sol_price_usd: Decimal = DEFAULT_SOL_PRICE_USD,
    mint: str = WSOL_MINT,
) -> TransactionMetrics:
    total_in, total_out = token_flows(effects.token_transfers, effects.fee_payer, mint)
    tip = native_outflow_sol(effects.native_transfers, effects.fee_payer)
    profit = total_in - total_out
    return TransactionMetrics(
        total_in=total_in,
        total_out=total_out,
        tip=tip,
        bot_fee=tip * bot_fee_rate,
        fee_percentage=fee_percentage(tip, total_in),
        bot_percentage=bot_percentage,
        profit=profit,
        profit_usd=profit * sol_price_usd,
    )

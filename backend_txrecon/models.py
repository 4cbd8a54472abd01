"""
Records passed between pipeline stages.

Log correlation produces LogEntry; reconciliation produces ReconciledRow;
Helius decoding produces TransactionEffects; metrics and enrichment produce
TransactionMetrics and EnrichedTransaction. All are immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

UNKNOWN_REGION = "unknown"


@dataclass(frozen=True)
class TimingRecord:
    """Latency pair from a 'Total time spent' log line."""

    time_spent_ms: int
    quote_time_ms: int


@dataclass(frozen=True)
class LogEntry:
    """Region and timing the bot logged for one dispatched transaction."""

    signature: str
    region: str
    time_spent_ms: int
    quote_time_ms: int


@dataclass(frozen=True)
class ReconciledRow:
    """
    One signature from the signature source joined against the log map.

    found=False rows carry region "unknown" and no timing.
    """

    signature: str
    region: str = UNKNOWN_REGION
    time_spent_ms: int | None = None
    quote_time_ms: int | None = None
    found: bool = False

    def to_log_entry(self) -> LogEntry | None:
        if not self.found or self.time_spent_ms is None or self.quote_time_ms is None:
            return None
        return LogEntry(
            signature=self.signature,
            region=self.region,
            time_spent_ms=self.time_spent_ms,
            quote_time_ms=self.quote_time_ms,
        )


@dataclass(frozen=True)
class TransferEffect:
    """Token transfer from a Helius enhanced transaction (tokenTransfers[])."""

    mint: str
    from_account: str
    to_account: str
    amount: Decimal


@dataclass(frozen=True)
class NativeTransfer:
    """Native SOL transfer from a Helius enhanced transaction (nativeTransfers[])."""

    from_account: str
    to_account: str
    lamports: int


@dataclass(frozen=True)
class TransactionEffects:
    """Decoded on-chain effects of one transaction."""

    signature: str
    fee_payer: str
    timestamp: int | None
    token_transfers: tuple[TransferEffect, ...] = ()
    native_transfers: tuple[NativeTransfer, ...] = ()
    memo: str = ""
    block_date: str = ""


@dataclass(frozen=True)
class TransactionMetrics:
    """Derived financial quantities; fee_percentage is NaN when total_in is zero."""

    total_in: Decimal
    total_out: Decimal
    tip: Decimal
    bot_fee: Decimal
    fee_percentage: Decimal
    bot_percentage: Decimal
    profit: Decimal
    profit_usd: Decimal


@dataclass(frozen=True)
class EnrichedTransaction:
    """One final report row."""

    signature: str
    block_date: str
    region: str
    time_spent_ms: int | None
    quote_time_ms: int | None
    metrics: TransactionMetrics
    memo: str = ""

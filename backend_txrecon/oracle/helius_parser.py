"""
Helius enhanced transaction payload -> TransactionEffects.

Shape consumed (fields not listed are ignored):

    {
      "signature": "...",
      "feePayer": "...",
      "timestamp": 1700000000,
      "tokenTransfers": [{"mint", "fromUserAccount", "toUserAccount", "tokenAmount"}],
      "nativeTransfers": [{"fromUserAccount", "toUserAccount", "amount"}],
      "instructions": [{"programId", "data", ...}]
    }
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from backend_txrecon.errors import EnrichmentCallError
from backend_txrecon.models import NativeTransfer, TransactionEffects, TransferEffect
from backend_txrecon.oracle.memo import extract_memo

# RFC 1123, as shown by block explorers: "Tue, 14 Nov 2023 22:13:20 GMT"
BLOCK_DATE_FORMAT = "%a, %d %b %Y %H:%M:%S GMT"


def format_block_date(timestamp: int | None) -> str:
    if timestamp is None:
        return ""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(BLOCK_DATE_FORMAT)


def _decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal(0)
    try:
        d = Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"not a number: {value!r}") from e
    if not d.is_finite():
        raise ValueError(f"not a finite amount: {value!r}")
    return d


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _token_transfers(items: Any) -> tuple[TransferEffect, ...]:
    out: list[TransferEffect] = []
    for t in items or []:
        if not isinstance(t, dict):
            continue
        out.append(
            TransferEffect(
                mint=_text(t.get("mint")),
                from_account=_text(t.get("fromUserAccount")),
                to_account=_text(t.get("toUserAccount")),
                amount=_decimal(t.get("tokenAmount")),
            )
        )
    return tuple(out)


def _native_transfers(items: Any) -> tuple[NativeTransfer, ...]:
    out: list[NativeTransfer] = []
    for t in items or []:
        if not isinstance(t, dict):
            continue
        out.append(
            NativeTransfer(
                from_account=_text(t.get("fromUserAccount")),
                to_account=_text(t.get("toUserAccount")),
                lamports=int(t.get("amount") or 0),
            )
        )
    return tuple(out)


def parse_enhanced_transaction(data: Any, signature: str) -> TransactionEffects:
    """
    Decode one enhanced transaction.

    Non-string account fields read as empty. Anything else malformed (amounts,
    out-of-range timestamps, non-list transfer arrays) fails this signature only.

    Raises:
        EnrichmentCallError: payload is not an object, has no fee payer, or has
            malformed fields.
    """
    if not isinstance(data, dict):
        raise EnrichmentCallError("no transaction data in response", signature)
    fee_payer = _text(data.get("feePayer"))
    if not fee_payer:
        raise EnrichmentCallError("transaction has no feePayer", signature)

    try:
        token_transfers = _token_transfers(data.get("tokenTransfers"))
        native_transfers = _native_transfers(data.get("nativeTransfers"))
        ts = data.get("timestamp")
        timestamp = int(ts) if ts is not None else None
        block_date = format_block_date(timestamp)
        memo = extract_memo(data.get("instructions") or [], signature=signature)
    except (TypeError, ValueError, AttributeError, OverflowError, OSError) as e:
        raise EnrichmentCallError(f"malformed transaction data: {e}", signature) from e

    return TransactionEffects(
        signature=_text(data.get("signature")) or signature,
        fee_payer=fee_payer,
        timestamp=timestamp,
        token_transfers=token_transfers,
        native_transfers=native_transfers,
        memo=memo,
        block_date=block_date,
    )

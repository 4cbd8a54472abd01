"""
Memo program payload decoding.

Instruction data from the Helius enhanced transactions API is base-58; the
memo program stores UTF-8 text, so a successful decode is plain text such as
"bot:v2.3 route=orca->raydium".
"""

from __future__ import annotations

from typing import Any, Iterable

import base58

from backend_txrecon.config.settings import MEMO_PROGRAM_ID
from backend_txrecon.errors import MemoDecodeError
from backend_txrecon.recon_logging import get_logger

logger = get_logger(__name__)


def decode_memo(data_b58: str) -> str:
    """
    Decode a base-58 memo payload to text.

    Raises:
        MemoDecodeError: not valid base-58, or the bytes are not UTF-8.
    """
    try:
        raw = base58.b58decode(data_b58)
    except ValueError as e:
        raise MemoDecodeError(f"memo payload is not base58: {e}") from e
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MemoDecodeError(f"memo payload is not UTF-8: {e}") from e


def decode_memo_or_raw(data_b58: str, signature: str = "") -> str:
    """Decode a memo payload; on failure log a warning and return the payload unchanged."""
    try:
        return decode_memo(data_b58)
    except MemoDecodeError as e:
        logger.warning("memo_decode_failed", signature=signature, error=str(e))
        return data_b58


def find_memo_payload(instructions: Iterable[Any], program_id: str = MEMO_PROGRAM_ID) -> str | None:
    """Return the data of the first memo program instruction, or None."""
    for ix in instructions or []:
        if not isinstance(ix, dict):
            continue
        if ix.get("programId") == program_id:
            data = ix.get("data")
            return data if isinstance(data, str) and data else None
    return None


def extract_memo(instructions: Iterable[Any], signature: str = "") -> str:
    """Decoded memo text of a transaction; empty string when it has no memo."""
    payload = find_memo_payload(instructions)
    if payload is None:
        return ""
    return decode_memo_or_raw(payload, signature=signature)

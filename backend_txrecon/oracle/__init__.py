"""
Helius enrichment: enhanced transaction fetch, payload decoding, memo text.
"""

from backend_txrecon.oracle.helius_client import EnrichmentTally, HeliusEnrichmentClient
from backend_txrecon.oracle.helius_parser import parse_enhanced_transaction
from backend_txrecon.oracle.memo import decode_memo, decode_memo_or_raw

__all__ = [
    "EnrichmentTally",
    "HeliusEnrichmentClient",
    "decode_memo",
    "decode_memo_or_raw",
    "parse_enhanced_transaction",
]

"""Left join of the signature list against the correlated log map."""

from __future__ import annotations

from typing import Iterable, Mapping

from backend_txrecon.models import UNKNOWN_REGION, LogEntry, ReconciledRow


def join(signatures: Iterable[str], log_map: Mapping[str, LogEntry]) -> list[ReconciledRow]:
    """
    One ReconciledRow per signature, in input order.

    found is True iff the signature is a key of log_map; rows for missing
    signatures get region "unknown" and no timing.
    """
    rows: list[ReconciledRow] = []
    for signature in signatures:
        entry = log_map.get(signature)
        if entry is None:
            rows.append(ReconciledRow(signature=signature, region=UNKNOWN_REGION, found=False))
            continue
        rows.append(
            ReconciledRow(
                signature=signature,
                region=entry.region,
                time_spent_ms=entry.time_spent_ms,
                quote_time_ms=entry.quote_time_ms,
                found=True,
            )
        )
    return rows


def found_count(rows: Iterable[ReconciledRow]) -> int:
    return sum(1 for r in rows if r.found)

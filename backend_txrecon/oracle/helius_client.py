"""
Helius enhanced transactions client and the paced enrichment loop.

One POST per signature (`{"transactions": [sig]}`), never batched, never
retried; successive calls are separated by a fixed delay. A failed signature
is logged and dropped and the loop moves on.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator

import requests

from backend_txrecon.analytics.metrics import compute_metrics
from backend_txrecon.config.settings import Settings
from backend_txrecon.errors import EnrichmentCallError
from backend_txrecon.log_analysis.signatures import is_report_artifact
from backend_txrecon.models import UNKNOWN_REGION, EnrichedTransaction, LogEntry
from backend_txrecon.oracle.helius_parser import parse_enhanced_transaction
from backend_txrecon.recon_logging import bind_signature, get_logger

logger = get_logger(__name__)


@dataclass
class EnrichmentTally:
    processed: int = 0
    enriched: int = 0
    skipped: int = 0
    failed: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "processed": self.processed,
            "enriched": self.enriched,
            "skipped": self.skipped,
            "failed": self.failed,
        }


class HeliusEnrichmentClient:
    """Fetches and enriches one transaction per call."""

    def __init__(
        self,
        settings: Settings,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if not settings.helius_api_key:
            raise ValueError("HELIUS_API_KEY not set. Add it to .env")
        self.settings = settings
        self.url = settings.helius_api_url
        self.timeout = settings.request_timeout
        self._session = session or requests.Session()
        self._sleep = sleep

    def fetch_transaction(self, signature: str) -> dict[str, Any]:
        """
        POST one signature to the enhanced transactions endpoint.

        Raises:
            EnrichmentCallError: network error, non-2xx status, non-JSON body,
                or an empty result list.
        """
        log = bind_signature(signature, __name__)
        try:
            data = self.fetch_transaction(signature)
            effects = parse_enhanced_transaction(data, signature)
        except EnrichmentCallError as e:
            log.warning("enrichment_failed", error=str(e), status_code=e.status_code)
            return None

        metrics = compute_metrics(
            effects,
            bot_fee_rate=self.settings.bot_fee_rate,
            bot_percentage=self.settings.bot_percentage,
            sol_price_usd=self.settings.sol_price_usd,
        )
        log.info(
            "enrichment_done",
            total_in=str(metrics.total_in),
            total_out=str(metrics.total_out),
            tip=str(metrics.tip),
            memo=effects.memo,
        )
        return EnrichedTransaction(
            signature=signature,
            block_date=effects.block_date,
            region=entry.region if entry else UNKNOWN_REGION,
            time_spent_ms=entry.time_spent_ms if entry else None,
            quote_time_ms=entry.quote_time_ms if entry else None,
            metrics=metrics,
            memo=effects.memo,
        )

    def enrich_many(
        self,
        entries: Iterable[LogEntry],
        tally: EnrichmentTally | None = None,
    ) -> Iterator[EnrichedTransaction]:
        """
        Enrich entries strictly one after another, sleeping between calls.

        A signature is sent to Helius at most once per run; repeats and report
        artifacts are counted as skipped. The delay separates successive calls
        only, so nothing sleeps before the first call or after the last.
        """
        tally = tally if tally is not None else EnrichmentTally()
        items = list(entries)
        total = len(items)
        delay = self.settings.enrich_delay_sec
        seen: set[str] = set()
        for i, entry in enumerate(items, start=1):
            signature = (entry.signature or "").strip()
            result = None
            if is_report_artifact(signature):
                tally.skipped += 1
            elif signature in seen:
                tally.skipped += 1
                logger.info("enrichment_skipped_duplicate", signature=signature)
            else:
                if seen and delay > 0:
                    self._sleep(delay)
                seen.add(signature)
                result = self.enrich(signature, entry)
                if result is None:
                    tally.failed += 1
                else:
                    tally.enriched += 1
            tally.processed += 1
            logger.info("enrichment_progress", processed=i, total=total)
            if result is not None:
                yield result

    def close(self) -> None:
        self._session.close()

"""
Pipeline stages: log analysis (signatures + bot log -> analysis CSV) and
enrichment (analysis CSV -> Helius -> final report CSV).

The stages only share the analysis CSV on disk; enrichment can be re-run on
its own without re-reading the logs.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from backend_txrecon.config.settings import Settings
from backend_txrecon.log_analysis.correlator import correlate_log_file
from backend_txrecon.log_analysis.reconcile import found_count, join
from backend_txrecon.log_analysis.signatures import load_signatures
from backend_txrecon.oracle.helius_client import EnrichmentTally, HeliusEnrichmentClient
from backend_txrecon.recon_logging import get_logger
from backend_txrecon.reporting.intermediate import read_intermediate_report
from backend_txrecon.reporting.report_writer import ReportWriter, write_intermediate_report

logger = get_logger(__name__)


@dataclass
class AnalysisResult:
    total_signatures: int
    found_in_logs: int
    output_path: Path

    @property
    def unknown(self) -> int:
        return self.total_signatures - self.found_in_logs


def run_log_analysis(
    signatures_path: Path | str,
    log_path: Path | str,
    output_path: Path | str,
) -> AnalysisResult:
    """
    Correlate the bot log, join it against the signature list, write the analysis CSV.

    Raises:
        OSError: an input cannot be read or the output cannot be written.
        SignatureParseError: the signature file is malformed.
    """
    signatures = load_signatures(signatures_path)
    log_map = correlate_log_file(log_path)
    rows = join(signatures, log_map)

    entries = (row.to_log_entry() for row in rows)
    write_intermediate_report(output_path, (e for e in entries if e is not None))

    result = AnalysisResult(
        total_signatures=len(rows),
        found_in_logs=found_count(rows),
        output_path=Path(output_path),
    )
    logger.info(
        "log_analysis_done",
        total_signatures=result.total_signatures,
        found_in_logs=result.found_in_logs,
        unknown=result.unknown,
        output=str(result.output_path),
    )
    return result


def run_enrichment(
    input_path: Path | str,
    output_path: Path | str,
    settings: Settings,
    client: HeliusEnrichmentClient | None = None,
) -> EnrichmentTally:
    """
    Enrich every row of the analysis CSV and stream the final report.

    Per-signature failures are counted in the returned tally; I/O errors propagate.
    """
    entries = read_intermediate_report(input_path)
    own_client = client is None
    client = client or HeliusEnrichmentClient(settings)
    tally = EnrichmentTally()
    logger.info("enrichment_start", transactions=len(entries))
    try:
        with ReportWriter.final(output_path) as writer:
            for tx in client.enrich_many(entries, tally):
                writer.write(tx)
    finally:
        if own_client:
            client.close()
    logger.info("enrichment_complete", output=str(output_path), **tally.to_dict())
    return tally

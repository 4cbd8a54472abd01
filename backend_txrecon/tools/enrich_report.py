"""
Enrichment stage: read transaction_analysis.csv, fetch every transaction from
Helius (one at a time, paced), write output.csv with profit/tip/fee columns.

Requires HELIUS_API_KEY in .env.

Usage:
  py -m backend_txrecon.tools.enrich_report
  py -m backend_txrecon.tools.enrich_report --input transaction_analysis.csv --output output.csv
"""

from __future__ import annotations

import argparse

from backend_txrecon.config.env import print_txrecon_startup
from backend_txrecon.config.settings import FINAL_REPORT_FILE, INTERMEDIATE_REPORT_FILE, get_settings
from backend_txrecon.errors import ReportParseError
from backend_txrecon.pipeline import run_enrichment
from backend_txrecon.recon_logging import get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Enrich analysed transactions via Helius")
    ap.add_argument("--input", type=str, default=INTERMEDIATE_REPORT_FILE, help="analysis CSV from analyze_logs")
    ap.add_argument("--output", type=str, default=FINAL_REPORT_FILE, help="final report CSV")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    print_txrecon_startup("enrich_report")

    try:
        settings = get_settings()
    except ValueError as e:
        print("[enrich_report] ERROR: invalid configuration:", e)
        return 1
    if not settings.helius_api_key:
        print("[enrich_report] ERROR: HELIUS_API_KEY not set. Add it to .env")
        return 1

    try:
        tally = run_enrichment(args.input, args.output, settings)
    except ReportParseError as e:
        print("[enrich_report] ERROR: invalid analysis CSV:", e)
        return 1
    except OSError as e:
        logger.error("enrichment_io_error", error=str(e))
        print("[enrich_report] ERROR:", e)
        return 1

    print(
        "[enrich_report] processed:", tally.processed,
        "| enriched:", tally.enriched,
        "| failed:", tally.failed,
        "| skipped:", tally.skipped,
        "| saved:", args.output,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

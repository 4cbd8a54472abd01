"""
Main entrypoint: log analysis then Helius enrichment, in sequence.

Stage 1 (analyze_logs) must finish and write the analysis CSV before stage 2
(enrich_report) reads it. A fatal error in stage 1 stops the run.

Env: HELIUS_API_KEY, SOL_PRICE_USD, BOT_FEE_RATE, BOT_PERCENTAGE, ENRICH_DELAY_MS, LOG_LEVEL, LOG_FORMAT.

Single stage: py -m backend_txrecon.tools.analyze_logs / py -m backend_txrecon.tools.enrich_report
"""

import argparse
import sys

# Configure structured logging before other imports that may log
from backend_txrecon.recon_logging import get_logger
from backend_txrecon.recon_logging.logger import configure_structlog

logger = get_logger("main")


def main() -> int:
    from backend_txrecon.config.settings import (
        FINAL_REPORT_FILE,
        INTERMEDIATE_REPORT_FILE,
        LOG_FILE,
        SIGNATURES_FILE,
    )
    from backend_txrecon.tools import analyze_logs, enrich_report

    ap = argparse.ArgumentParser(description="Reconcile bot logs with on-chain transactions")
    ap.add_argument("--signatures", default=SIGNATURES_FILE)
    ap.add_argument("--log", default=LOG_FILE)
    ap.add_argument("--analysis", default=INTERMEDIATE_REPORT_FILE)
    ap.add_argument("--output", default=FINAL_REPORT_FILE)
    ap.add_argument("--log-format", choices=("json", "console"), default=None, help="overrides LOG_FORMAT")
    args = ap.parse_args()
    if args.log_format:
        configure_structlog(fmt=args.log_format)

    rc = analyze_logs.main(["--signatures", args.signatures, "--log", args.log, "--output", args.analysis])
    if rc != 0:
        logger.error("main_stage_failed", stage="analyze_logs", exit_code=rc)
        return rc
    rc = enrich_report.main(["--input", args.analysis, "--output", args.output])
    if rc != 0:
        logger.error("main_stage_failed", stage="enrich_report", exit_code=rc)
    return rc


if __name__ == "__main__":
    sys.exit(main())

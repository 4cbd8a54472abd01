"""
Log analysis stage: join the signature list against the bot log.

Writes transaction_analysis.csv (hash, region, time spent, quote time) plus a
statistics block.

Usage:
  py -m backend_txrecon.tools.analyze_logs
  py -m backend_txrecon.tools.analyze_logs --signatures _signatures.json --log paste.txt
"""

from __future__ import annotations

import argparse
from pathlib import Path

from backend_txrecon.config.settings import INTERMEDIATE_REPORT_FILE, LOG_FILE, SIGNATURES_FILE
from backend_txrecon.errors import SignatureParseError
from backend_txrecon.pipeline import run_log_analysis
from backend_txrecon.recon_logging import get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Match signatures against bot logs")
    ap.add_argument("--signatures", type=str, default=SIGNATURES_FILE, help="signature file (JSON array or brace list)")
    ap.add_argument("--log", type=str, default=LOG_FILE, help="combined bot log")
    ap.add_argument("--output", type=str, default=INTERMEDIATE_REPORT_FILE, help="analysis CSV to write")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    print("=== Solana Transaction Log Analyzer ===\n")

    log_path = Path(args.log)
    if not log_path.exists():
        print(f"[analyze_logs] ERROR: log file ({log_path}) not found")
        return 1

    print("[analyze_logs] signatures:", args.signatures)
    print("[analyze_logs] log file:", log_path)
    try:
        result = run_log_analysis(args.signatures, log_path, args.output)
    except SignatureParseError as e:
        print("[analyze_logs] ERROR: invalid signature file:", e)
        return 1
    except OSError as e:
        logger.error("log_analysis_io_error", error=str(e))
        print("[analyze_logs] ERROR:", e)
        return 1

    print("\nAnalysis complete:")
    print("-" * 24)
    print("Total signatures:", result.total_signatures)
    print("Transactions found in logs:", result.found_in_logs)
    print("Not found (unknown):", result.unknown)
    print("Output saved to:", result.output_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

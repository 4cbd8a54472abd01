"""
Concatenate every *.log file of a directory into one log (default paste.txt),
each preceded by a "=== name ===" header line.

Usage:
  py -m backend_txrecon.tools.combine_logs
  py -m backend_txrecon.tools.combine_logs --dir logs/ --output paste.txt
"""

from __future__ import annotations

import argparse
from pathlib import Path

from backend_txrecon.config.settings import LOG_FILE
from backend_txrecon.recon_logging import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024


def find_log_files(directory: Path) -> list[Path]:
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == ".log")


def combine_logs(log_files: list[Path], output: Path) -> int:
    """Stream log_files into output in chunks; returns number of files combined."""
    with open(output, "w", encoding="utf-8") as out:
        for log_file in log_files:
            print("[combine_logs] processing:", log_file.name)
            out.write(f"\n=== {log_file.name} ===\n")
            with open(log_file, encoding="utf-8", errors="replace") as src:
                while True:
                    chunk = src.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    out.write(chunk)
            out.write("\n")
    logger.info("logs_combined", files=len(log_files), output=str(output))
    return len(log_files)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Combine *.log files into one log")
    ap.add_argument("--dir", type=str, default=".", help="directory with .log files")
    ap.add_argument("--output", type=str, default=LOG_FILE, help="combined log to write")
    args = ap.parse_args(argv)

    directory = Path(args.dir)
    output = Path(args.output)
    log_files = [p for p in find_log_files(directory) if p.resolve() != output.resolve()]
    if not log_files:
        print("[combine_logs] No .log files found in", directory)
        return 0

    try:
        n = combine_logs(log_files, output)
    except OSError as e:
        logger.error("combine_logs_io_error", error=str(e))
        print("[combine_logs] ERROR:", e)
        return 1
    print(f"[combine_logs] combined {n} log files into {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

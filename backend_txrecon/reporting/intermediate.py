"""
Reader for the intermediate analysis CSV written by the log analysis stage.

Only the per-transaction rows are recovered; reading stops at the blank line
that separates them from the statistics block.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterator, TextIO

from backend_txrecon.errors import ReportParseError
from backend_txrecon.log_analysis.signatures import is_report_artifact
from backend_txrecon.models import LogEntry
from backend_txrecon.recon_logging import get_logger
from backend_txrecon.reporting.report_writer import INTERMEDIATE_HEADER

logger = get_logger(__name__)


def _int_field(value: str, column: str, line_no: int) -> int:
    try:
        return int(value.strip())
    except ValueError as e:
        raise ReportParseError(f"line {line_no}: {column} is not an integer: {value!r}") from e


def iter_intermediate_rows(f: TextIO) -> Iterator[LogEntry]:
    reader = csv.reader(f)
    header = next(reader, None)
    if header is None:
        return
    header = [h.strip() for h in header]
    missing = [c for c in INTERMEDIATE_HEADER if c not in header]
    if missing:
        raise ReportParseError(f"analysis CSV header is missing columns: {missing}")
    idx = {name: header.index(name) for name in INTERMEDIATE_HEADER}
    sig_col, region_col, time_col, quote_col = INTERMEDIATE_HEADER

    for row in reader:
        if not row or not any(cell.strip() for cell in row):
            break
        line_no = reader.line_num
        if len(row) < len(header):
            raise ReportParseError(f"line {line_no}: expected {len(header)} columns, got {len(row)}")
        signature = row[idx[sig_col]].strip()
        if is_report_artifact(signature):
            continue
        yield LogEntry(
            signature=signature,
            region=row[idx[region_col]].strip(),
            time_spent_ms=_int_field(row[idx[time_col]], time_col, line_no),
            quote_time_ms=_int_field(row[idx[quote_col]], quote_col, line_no),
        )


def read_intermediate_report(path: Path | str) -> list[LogEntry]:
    """
    Read the transaction rows of an analysis CSV.

    Raises:
        OSError: the file cannot be read.
        ReportParseError: unexpected header or malformed row.
    """
    path = Path(path)
    with open(path, newline="", encoding="utf-8") as f:
        entries = list(iter_intermediate_rows(f))
    logger.info("analysis_csv_loaded", path=str(path), rows=len(entries))
    return entries

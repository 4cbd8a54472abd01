"""
Bot log correlation: raw log lines -> signature -> (region, timing).

The bot logs a timing line right before each dispatch line:

    Total time spent: 812ms. Jupiter quote time: 143ms
    Sent dynamic tip transaction to region tokyo: 5VERv8NMvzbJ...

A dispatch line takes the most recent timing line. The pending timing is not
cleared after use, so consecutive dispatch lines share one timing record. A
dispatch line seen before any timing line produces nothing.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Iterator

from backend_txrecon.models import LogEntry, TimingRecord
from backend_txrecon.recon_logging import get_logger

logger = get_logger(__name__)

# ESC[31m, ESC[1;32m, and the bare "[0m" left when the ESC byte got lost on copy/paste
ANSI_ESCAPE_RE = re.compile(r"\x1b?\[\d+(?:;\d+)*m")
TIMING_RE = re.compile(r"Total time spent: (\d+)ms\. (?:\w+ )?[Qq]uote time: (\d+)ms")
DISPATCH_RE = re.compile(r"[Ss]ent .*?to region ([a-z]+): ([A-Za-z0-9]+)")


def strip_ansi(line: str) -> str:
    return ANSI_ESCAPE_RE.sub("", line)


def parse_timing(line: str) -> TimingRecord | None:
    m = TIMING_RE.search(line)
    if not m:
        return None
    return TimingRecord(time_spent_ms=int(m.group(1)), quote_time_ms=int(m.group(2)))


def parse_dispatch(line: str) -> tuple[str, str] | None:
    """Return (region, signature) from a dispatch line, or None."""
    m = DISPATCH_RE.search(line)
    if not m:
        return None
    return m.group(1), m.group(2)


def correlate_line(
    line: str,
    pending: TimingRecord | None,
) -> tuple[TimingRecord | None, LogEntry | None]:
    """
    Advance the correlation by one line.

    Returns the timing record to carry into the next line and the entry this
    line produced (None for timing lines, unmatched lines, and dispatch lines
    with no timing seen yet).
    """
    clean = strip_ansi(line)

    timing = parse_timing(clean)
    if timing is not None:
        return timing, None

    dispatch = parse_dispatch(clean)
    if dispatch is None or pending is None:
        return pending, None

    region, signature = dispatch
    entry = LogEntry(
        signature=signature,
        region=region,
        time_spent_ms=pending.time_spent_ms,
        quote_time_ms=pending.quote_time_ms,
    )
    return pending, entry


def iter_log_entries(lines: Iterable[str]) -> Iterator[LogEntry]:
    pending: TimingRecord | None = None
    for line in lines:
        pending, entry = correlate_line(line, pending)
        if entry is not None:
            yield entry


def correlate_lines(lines: Iterable[str]) -> dict[str, LogEntry]:
    """Build the signature -> LogEntry map; later entries for a signature win."""
    log_map: dict[str, LogEntry] = {}
    for entry in iter_log_entries(lines):
        log_map[entry.signature] = entry
    return log_map


def correlate_log_file(path: Path | str) -> dict[str, LogEntry]:
    """
    Stream a log file line by line and correlate it.

    Raises:
        OSError: the file cannot be opened or read.
    """
    path = Path(path)
    with open(path, encoding="utf-8", errors="replace") as f:
        log_map = correlate_lines(f)
    logger.info("log_correlation_done", path=str(path), entries=len(log_map))
    return log_map

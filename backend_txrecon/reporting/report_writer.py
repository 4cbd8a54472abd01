"""
Streaming CSV report writer with a trailing statistics block.

Rows are written as they arrive; averages and per-region counts are kept as
running totals so nothing is buffered. On close the statistics block is
appended after a blank line:

    Statistics:
    Average Time Spent (ms),412.50
    Average Quote Time (ms),96.00

    Transactions by Region:
    tokyo,3
    ny,1
"""

from __future__ import annotations

import csv
from decimal import Decimal
from pathlib import Path
from types import TracebackType
from typing import Callable, Generic, Iterable, Sequence, TypeVar

from backend_txrecon.models import EnrichedTransaction, LogEntry
from backend_txrecon.recon_logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T", LogEntry, EnrichedTransaction)

STATISTICS_TITLE = "Statistics:"
AVG_TIME_SPENT_LABEL = "Average Time Spent (ms)"
AVG_QUOTE_TIME_LABEL = "Average Quote Time (ms)"
REGION_TITLE = "Transactions by Region:"

INTERMEDIATE_HEADER = ["Transaction Hash", "Region", "Time Spent (ms)", "Quote Time (ms)"]

FINAL_HEADER = [
    "Transaction Hash",
    "Block Date",
    "Region",
    "Time Spent (ms)",
    "Quote Time (ms)",
    "Before SOL",
    "After SOL",
    "Jito Tip",
    "Bot Fee",
    "Jito %",
    "Bot %",
    "Profit",
    "Profit in $",
    "Bot Memo",
]


def format_sol(value: Decimal) -> str:
    return format(value, ".9f")


def format_percentage(value: Decimal) -> str:
    """Two decimals; an undefined ratio stays visible as NaN."""
    if value.is_nan():
        return "NaN"
    return format(value, ".2f")


def format_usd(value: Decimal) -> str:
    return f"${value:.2f}"


def _ms(value: int | None) -> str:
    return "" if value is None else str(value)


def intermediate_row(entry: LogEntry) -> list[str]:
    return [entry.signature, entry.region, str(entry.time_spent_ms), str(entry.quote_time_ms)]


def final_row(tx: EnrichedTransaction) -> list[str]:
    m = tx.metrics
    return [
        tx.signature,
        tx.block_date,
        tx.region,
        _ms(tx.time_spent_ms),
        _ms(tx.quote_time_ms),
        format_sol(m.total_in),
        format_sol(m.total_out),
        format_sol(m.tip),
        format_sol(m.bot_fee),
        format_percentage(m.fee_percentage),
        format_percentage(m.bot_percentage),
        format_sol(m.profit),
        format_usd(m.profit_usd),
        tx.memo,
    ]


class ReportWriter(Generic[T]):
    """
    Context manager writing one CSV row per record, statistics block on close.

        with ReportWriter.intermediate(path) as writer:
            for entry in entries:
                writer.write(entry)
    """

    def __init__(
        self,
        path: Path | str,
        header: Sequence[str],
        to_row: Callable[[T], list[str]],
    ) -> None:
        self.path = Path(path)
        self.header = list(header)
        self._to_row = to_row
        self._file = None
        self._writer = None
        self.rows_written = 0
        self._time_spent_total = 0
        self._time_spent_count = 0
        self._quote_time_total = 0
        self._quote_time_count = 0
        # dict keeps first-appearance order
        self.region_counts: dict[str, int] = {}

    @classmethod
    def intermediate(cls, path: Path | str) -> "ReportWriter[LogEntry]":
        return cls(path, INTERMEDIATE_HEADER, intermediate_row)

    @classmethod
    def final(cls, path: Path | str) -> "ReportWriter[EnrichedTransaction]":
        return cls(path, FINAL_HEADER, final_row)

    def open(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file, lineterminator="\n")
        self._writer.writerow(self.header)

    def write(self, record: T) -> None:
        if self._writer is None:
            raise RuntimeError("ReportWriter.write() called before open()")
        self._writer.writerow(self._to_row(record))
        self.rows_written += 1
        if record.time_spent_ms is not None:
            self._time_spent_total += record.time_spent_ms
            self._time_spent_count += 1
        if record.quote_time_ms is not None:
            self._quote_time_total += record.quote_time_ms
            self._quote_time_count += 1
        self.region_counts[record.region] = self.region_counts.get(record.region, 0) + 1

    @property
    def average_time_spent(self) -> float | None:
        if not self._time_spent_count:
            return None
        return self._time_spent_total / self._time_spent_count

    @property
    def average_quote_time(self) -> float | None:
        if not self._quote_time_count:
            return None
        return self._quote_time_total / self._quote_time_count

    def _write_statistics(self) -> None:
        if self._file is None or not self.rows_written:
            return
        w = self._writer
        self._file.write("\n")
        w.writerow([STATISTICS_TITLE])
        if self.average_time_spent is not None:
            w.writerow([AVG_TIME_SPENT_LABEL, f"{self.average_time_spent:.2f}"])
        if self.average_quote_time is not None:
            w.writerow([AVG_QUOTE_TIME_LABEL, f"{self.average_quote_time:.2f}"])
        self._file.write("\n")
        w.writerow([REGION_TITLE])
        for region, count in self.region_counts.items():
            w.writerow([region, count])

    def close(self, write_statistics: bool = True) -> None:
        if self._file is None:
            return
        try:
            if write_statistics:
                self._write_statistics()
            self._file.flush()
        finally:
            self._file.close()
            self._file = None
            self._writer = None
        logger.info("report_written", path=str(self.path), rows=self.rows_written)

    def __enter__(self) -> "ReportWriter[T]":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        # A failed run keeps the rows already streamed but gets no statistics
        self.close(write_statistics=exc_type is None)


def write_intermediate_report(path: Path | str, entries: Iterable[LogEntry]) -> ReportWriter[LogEntry]:
    with ReportWriter.intermediate(path) as writer:
        for entry in entries:
            writer.write(entry)
    return writer

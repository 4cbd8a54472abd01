"""
CSV artifacts: intermediate write/re-read, statistics block, final report formatting.
"""

from __future__ import annotations

import csv
from decimal import Decimal

import pytest

from backend_txrecon.errors import ReportParseError
from backend_txrecon.models import EnrichedTransaction, LogEntry, TransactionMetrics
from backend_txrecon.reporting.intermediate import read_intermediate_report
from backend_txrecon.reporting.report_writer import (
    FINAL_HEADER,
    INTERMEDIATE_HEADER,
    ReportWriter,
    final_row,
    format_percentage,
    write_intermediate_report,
)

ENTRIES = [
    LogEntry("S1", "tokyo", 800, 120),
    LogEntry("S2", "ny", 400, 80),
    LogEntry("S3", "tokyo", 300, 100),
]


def _metrics(**overrides) -> TransactionMetrics:
    values = dict(
        total_in=Decimal("2.0"),
        total_out=Decimal("1.5"),
        tip=Decimal("0.1"),
        bot_fee=Decimal("0.01"),
        fee_percentage=Decimal("5.00"),
        bot_percentage=Decimal("1.5"),
        profit=Decimal("0.5"),
        profit_usd=Decimal("15.0"),
    )
    values.update(overrides)
    return TransactionMetrics(**values)


def test_intermediate_round_trip_ignores_statistics(tmp_path):
    path = tmp_path / "transaction_analysis.csv"
    write_intermediate_report(path, ENTRIES)
    assert read_intermediate_report(path) == ENTRIES


def test_intermediate_statistics_block(tmp_path):
    path = tmp_path / "transaction_analysis.csv"
    writer = write_intermediate_report(path, ENTRIES)
    lines = path.read_text(encoding="utf-8").splitlines()

    assert lines[0] == ",".join(INTERMEDIATE_HEADER)
    assert lines[1] == "S1,tokyo,800,120"
    assert lines[4] == ""
    assert lines[5:] == [
        "Statistics:",
        "Average Time Spent (ms),500.00",
        "Average Quote Time (ms),100.00",
        "",
        "Transactions by Region:",
        "tokyo,2",
        "ny,1",
    ]
    assert writer.region_counts == {"tokyo": 2, "ny": 1}


def test_region_counts_keep_first_appearance_order(tmp_path):
    entries = [LogEntry(f"S{i}", region, 1, 1) for i, region in enumerate(["slc", "ny", "slc", "amsterdam", "ny"])]
    writer = write_intermediate_report(tmp_path / "a.csv", entries)
    assert list(writer.region_counts) == ["slc", "ny", "amsterdam"]


def test_no_rows_writes_header_only(tmp_path):
    path = tmp_path / "empty.csv"
    write_intermediate_report(path, [])
    assert path.read_text(encoding="utf-8") == ",".join(INTERMEDIATE_HEADER) + "\n"
    assert read_intermediate_report(path) == []


def test_writer_closes_without_statistics_on_error(tmp_path):
    path = tmp_path / "partial.csv"
    with pytest.raises(RuntimeError):
        with ReportWriter.intermediate(path) as writer:
            writer.write(ENTRIES[0])
            raise RuntimeError("boom")
    assert "Statistics:" not in path.read_text(encoding="utf-8")
    assert read_intermediate_report(path) == [ENTRIES[0]]


def test_reader_skips_artifact_rows_from_hand_edited_file(tmp_path):
    path = tmp_path / "edited.csv"
    path.write_text(
        "Transaction Hash,Region,Time Spent (ms),Quote Time (ms)\n"
        "S1,tokyo,10,1\n"
        "Statistics:,,,\n"
        "S2,ny,20,2\n",
        encoding="utf-8",
    )
    assert [e.signature for e in read_intermediate_report(path)] == ["S1", "S2"]


def test_reader_rejects_wrong_header(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("hash,region\nS1,tokyo\n", encoding="utf-8")
    with pytest.raises(ReportParseError):
        read_intermediate_report(path)


def test_reader_rejects_non_integer_timing(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text(
        "Transaction Hash,Region,Time Spent (ms),Quote Time (ms)\nS1,tokyo,fast,1\n",
        encoding="utf-8",
    )
    with pytest.raises(ReportParseError):
        read_intermediate_report(path)


def test_final_row_formatting():
    tx = EnrichedTransaction(
        signature="S1",
        block_date="Tue, 14 Nov 2023 22:13:20 GMT",
        region="tokyo",
        time_spent_ms=800,
        quote_time_ms=120,
        metrics=_metrics(),
        memo="hello world",
    )
    assert final_row(tx) == [
        "S1",
        "Tue, 14 Nov 2023 22:13:20 GMT",
        "tokyo",
        "800",
        "120",
        "2.000000000",
        "1.500000000",
        "0.100000000",
        "0.010000000",
        "5.00",
        "1.50",
        "0.500000000",
        "$15.00",
        "hello world",
    ]


def test_nan_percentage_is_written_as_nan():
    assert format_percentage(Decimal("NaN")) == "NaN"
    assert format_percentage(Decimal("0.0666")) == "0.07"


def test_final_report_header_and_statistics(tmp_path):
    path = tmp_path / "output.csv"
    tx = EnrichedTransaction("S1", "", "ny", 400, 80, _metrics(fee_percentage=Decimal("NaN")), "")
    with ReportWriter.final(path) as writer:
        writer.write(tx)

    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == FINAL_HEADER
    assert rows[1][9] == "NaN"
    assert rows[2] == []
    assert rows[3] == ["Statistics:"]
    assert rows[4] == ["Average Time Spent (ms)", "400.00"]
    assert rows[-1] == ["ny", "1"]

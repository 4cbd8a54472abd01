"""
Log correlation: timing line + dispatch line pairs, carry-forward, escapes.
"""

from __future__ import annotations

import pytest

from backend_txrecon.log_analysis.correlator import (
    correlate_line,
    correlate_lines,
    correlate_log_file,
    strip_ansi,
)
from backend_txrecon.models import LogEntry, TimingRecord

SIG_A = "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnbJLgp8uirBgmQpjKhoR4tjF3ZpRzrFmBV6UjKdiSZkQUW"
SIG_B = "3xQk9aTbq1nDS6V9GpwZ8qB8M6x3kR2Yp1VrCzM2u4fWnq5b8mE2Qn7aXJr4PcLkD9s1HgTbY6u2ZwQe3RtKfN1"
SIG_C = "2bNm7yPq4sLkR8xWd3VfT6gH1jZcQ9eA5uK2nYpM7rS4tBvX8wC3dF6hJ1kL9mN2pQ5rS8tU1vW4xY7zA3bC6d"


def timing(total: int, quote: int) -> str:
    return f"2024-05-01 12:00:00 INFO Total time spent: {total}ms. Jupiter quote time: {quote}ms"


def dispatch(region: str, sig: str) -> str:
    return f"2024-05-01 12:00:01 INFO Sent dynamic tip transaction to region {region}: {sig}"


def test_well_formed_pairs_produce_one_entry_each():
    lines = [
        "booting bot v2.3",
        timing(812, 143),
        dispatch("tokyo", SIG_A),
        "unrelated line",
        timing(400, 90),
        dispatch("ny", SIG_B),
        timing(1200, 300),
        dispatch("amsterdam", SIG_C),
    ]
    log_map = correlate_lines(lines)
    assert len(log_map) == 3
    assert log_map[SIG_A] == LogEntry(SIG_A, "tokyo", 812, 143)
    assert log_map[SIG_B] == LogEntry(SIG_B, "ny", 400, 90)
    assert log_map[SIG_C] == LogEntry(SIG_C, "amsterdam", 1200, 300)


def test_dispatch_before_any_timing_is_dropped():
    log_map = correlate_lines([dispatch("tokyo", SIG_A), timing(100, 10)])
    assert log_map == {}


def test_two_dispatches_share_one_timing_line():
    log_map = correlate_lines([timing(500, 50), dispatch("tokyo", SIG_A), dispatch("frankfurt", SIG_B)])
    assert (log_map[SIG_A].time_spent_ms, log_map[SIG_A].quote_time_ms) == (500, 50)
    assert (log_map[SIG_B].time_spent_ms, log_map[SIG_B].quote_time_ms) == (500, 50)
    assert log_map[SIG_B].region == "frankfurt"


def test_later_entry_for_same_signature_wins():
    log_map = correlate_lines([timing(500, 50), dispatch("tokyo", SIG_A), timing(700, 70), dispatch("ny", SIG_A)])
    assert log_map == {SIG_A: LogEntry(SIG_A, "ny", 700, 70)}


def test_correlate_line_keeps_pending_timing_after_dispatch():
    pending = TimingRecord(time_spent_ms=10, quote_time_ms=2)
    new_pending, entry = correlate_line(dispatch("slc", SIG_A), pending)
    assert new_pending is pending
    assert entry == LogEntry(SIG_A, "slc", 10, 2)


def test_correlate_line_timing_line_carries_no_signature():
    pending, entry = correlate_line(timing(321, 12), None)
    assert pending == TimingRecord(321, 12)
    assert entry is None


def test_correlate_line_unmatched_line_is_ignored():
    pending = TimingRecord(1, 1)
    assert correlate_line("heartbeat ok", pending) == (pending, None)


def test_colour_escapes_are_stripped_before_matching():
    lines = [
        "\x1b[32mTotal time spent: 812ms. Jupiter quote time: 143ms\x1b[0m",
        f"[36mSent dynamic tip transaction to region [1;33mtokyo[0m: {SIG_A}[0m",
    ]
    log_map = correlate_lines(lines)
    assert log_map[SIG_A] == LogEntry(SIG_A, "tokyo", 812, 143)


@pytest.mark.parametrize(
    "raw, clean",
    [
        ("\x1b[31merror\x1b[0m", "error"),
        ("[1;32mok[0m done", "ok done"),
        ("array[10] stays", "array[10] stays"),
    ],
)
def test_strip_ansi(raw, clean):
    assert strip_ansi(raw) == clean


def test_quote_time_without_prefix_word():
    log_map = correlate_lines(["Total time spent: 90ms. Quote time: 9ms", dispatch("ny", SIG_A)])
    assert log_map[SIG_A].quote_time_ms == 9


def test_correlate_log_file(tmp_path):
    log = tmp_path / "paste.txt"
    log.write_text("\n".join([timing(812, 143), dispatch("tokyo", SIG_A)]) + "\n", encoding="utf-8")
    assert correlate_log_file(log) == {SIG_A: LogEntry(SIG_A, "tokyo", 812, 143)}


def test_correlate_log_file_missing_is_fatal(tmp_path):
    with pytest.raises(OSError):
        correlate_log_file(tmp_path / "missing.txt")

"""
CSV artifacts: intermediate analysis report and final enriched report.
"""

from backend_txrecon.reporting.intermediate import read_intermediate_report
from backend_txrecon.reporting.report_writer import ReportWriter, write_intermediate_report

__all__ = ["ReportWriter", "read_intermediate_report", "write_intermediate_report"]

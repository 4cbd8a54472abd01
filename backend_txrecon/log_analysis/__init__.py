"""
Log analysis stage: correlate bot logs, parse the signature list, join them.
"""

from backend_txrecon.log_analysis.correlator import correlate_lines, correlate_log_file
from backend_txrecon.log_analysis.reconcile import join
from backend_txrecon.log_analysis.signatures import (
    is_report_artifact,
    load_signatures,
    parse_signature_source,
)

__all__ = [
    "correlate_lines",
    "correlate_log_file",
    "is_report_artifact",
    "join",
    "load_signatures",
    "parse_signature_source",
]

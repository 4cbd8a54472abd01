"""
Structured logging for Backend TxRecon.

Use get_logger() in every module for aggregation-friendly JSON output.
"""

from backend_txrecon.recon_logging.logger import bind_signature, get_logger

__all__ = ["bind_signature", "get_logger"]

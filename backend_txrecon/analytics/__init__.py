"""Derived financial metrics for enriched transactions."""

from backend_txrecon.analytics.metrics import compute_metrics, fee_percentage

__all__ = ["compute_metrics", "fee_percentage"]

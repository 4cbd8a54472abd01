"""
Backend TxRecon: reconciliation of Solana bot transactions.

Joins the signature history of a wallet against the bot's own operational logs
(region, total latency, quote latency) and enriches every matched transaction
with its on-chain effects from the Helius enhanced transactions API. Output is
a flat CSV report with per-transaction profit, tip and fee metrics.
"""

__version__ = "0.1.0"

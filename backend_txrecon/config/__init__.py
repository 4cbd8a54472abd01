"""
Configuration for the TxRecon pipeline.

Loads settings from environment variables and the project .env file.
Exposes a single source of truth for endpoints and policy constants.
"""

from backend_txrecon.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]

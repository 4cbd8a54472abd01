"""Command-line tools: python -m backend_txrecon.tools.<name>."""

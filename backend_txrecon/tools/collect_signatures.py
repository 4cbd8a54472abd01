"""
Fetch every transaction signature of a wallet via getSignaturesForAddress and
write _signatures.json (comment header + JSON array) for analyze_logs.

Pages of 1000 are fetched newest to oldest until an empty page. An RPC error
stops paging and keeps what was collected.

Usage:
  py -m backend_txrecon.tools.collect_signatures ADDRESS
  py -m backend_txrecon.tools.collect_signatures ADDRESS --output _signatures.json
"""

from __future__ import annotations

import argparse
import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

import requests

from backend_txrecon.config.env import print_txrecon_startup
from backend_txrecon.config.settings import SIGNATURES_FILE, get_settings
from backend_txrecon.recon_logging import get_logger

logger = get_logger(__name__)

SIGS_LIMIT = 1000
PAGE_DELAY_SEC = 0.5
REQUEST_TIMEOUT = 30


def is_valid_solana_address(address: str) -> bool:
    """Return True if address parses as a Solana public key."""
    try:
        from solders.pubkey import Pubkey

        Pubkey.from_string((address or "").strip())
        return True
    except Exception:
        return False


def _rpc_post(session: requests.Session, url: str, method: str, params: list[Any]) -> dict[str, Any] | None:
    payload = {"jsonrpc": "2.0", "id": "txrecon-collect", "method": method, "params": params}
    try:
        r = session.post(url, json=payload, timeout=REQUEST_TIMEOUT)
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("collect_signatures_request_error", error=str(e))
        return None
    err = data.get("error")
    if err:
        logger.warning("collect_signatures_rpc_error", error=str(err))
        return None
    return data


def fetch_all_signatures(
    url: str,
    address: str,
    session: requests.Session | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> list[dict[str, Any]]:
    """Page through getSignaturesForAddress; returns raw result items, newest first."""
    session = session or requests.Session()
    collected: list[dict[str, Any]] = []
    before: str | None = None
    while True:
        opts: dict[str, Any] = {"limit": SIGS_LIMIT, "commitment": "confirmed"}
        if before:
            opts["before"] = before
        data = _rpc_post(session, url, "getSignaturesForAddress", [address, opts])
        if data is None:
            break
        page = data.get("result")
        if not isinstance(page, list) or not page:
            break
        collected.extend(item for item in page if isinstance(item, dict) and item.get("signature"))
        print(f"\r[collect_signatures] progress: {len(collected)} transactions found", end="", flush=True)
        before = page[-1].get("signature")
        if not before:
            break
        sleep(PAGE_DELAY_SEC)
    print()
    return collected


def _fmt_block_time(block_time: Any) -> str:
    if block_time is None:
        return "unknown"
    return datetime.fromtimestamp(int(block_time), tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def render_signature_file(
    address: str,
    items: list[dict[str, Any]],
    fetched_at: datetime,
    duration_sec: float,
) -> str:
    """Comment header plus pretty-printed JSON array of signatures."""
    newest = items[0].get("blockTime") if items else None
    oldest = items[-1].get("blockTime") if items else None
    header = [
        "// Solana Transaction Fetch Results",
        f"// Address: {address}",
        f"// Fetch Date: {fetched_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}",
        f"// Total Transactions: {len(items)}",
        f"// Date Range: {_fmt_block_time(oldest)} to {_fmt_block_time(newest)}",
        f"// Fetch Duration: {duration_sec:.2f} seconds",
        "//",
    ]
    signatures = [item["signature"] for item in items]
    return "\n".join(header) + "\n" + json.dumps(signatures, indent=2)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Fetch all transaction signatures for a Solana address")
    ap.add_argument("address", nargs="?", default=None, help="wallet address (prompted when omitted)")
    ap.add_argument("--output", type=str, default=SIGNATURES_FILE, help="signature file to write")
    args = ap.parse_args(argv)

    print_txrecon_startup("collect_signatures")
    address = (args.address or input("Enter Solana address to query: ")).strip()
    if not is_valid_solana_address(address):
        print("[collect_signatures] ERROR: invalid Solana address format")
        return 1

    try:
        settings = get_settings()
    except ValueError as e:
        print("[collect_signatures] ERROR: invalid configuration:", e)
        return 1

    started = datetime.now(timezone.utc)
    t0 = time.monotonic()
    items = fetch_all_signatures(settings.solana_rpc_url, address)
    duration = time.monotonic() - t0

    if not items:
        print("[collect_signatures] No transactions found for this address")
        return 0

    out = Path(args.output)
    out.write_text(render_signature_file(address, items, started, duration), encoding="utf-8")
    logger.info("signatures_saved", address=address, count=len(items), output=str(out))
    print("[collect_signatures] saved", len(items), "signatures to", out, f"in {duration:.2f}s")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

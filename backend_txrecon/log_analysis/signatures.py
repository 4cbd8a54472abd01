"""
Signature source parsing.

The signature file starts with zero or more `//` comment lines followed by
either a JSON array of signatures or a legacy brace list:

    // Solana Transaction Fetch Results
    // Address: 9EcpPJXD...
    [
      "5VERv8NM...",
      "3xQk9a..."
    ]

    {"5VERv8NM...", "3xQk9a..."}

Hand-edited files sometimes carry lines pasted from a previous analysis report
(section titles, region names); those tokens are dropped here and never reach
the join.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Callable

from backend_txrecon.errors import SignatureParseError
from backend_txrecon.recon_logging import get_logger

logger = get_logger(__name__)

KNOWN_REGIONS = frozenset({"tokyo", "amsterdam", "frankfurt", "slc", "ny"})
# Matched as substrings; these come from the statistics block of the analysis CSV
REPORT_MARKERS = ("Statistics", "Average", "Transactions by Region", "Transaction Hash")

_COMMENT_LINE_RE = re.compile(r"^[ \t]*//[^\n]*(?:\n|$)", re.MULTILINE)


def is_report_artifact(token: str) -> bool:
    """True for tokens that are report text or region names rather than signatures."""
    token = (token or "").strip()
    if not token:
        return True
    if token in KNOWN_REGIONS:
        return True
    return any(marker in token for marker in REPORT_MARKERS)


def strip_comments(content: str) -> str:
    return _COMMENT_LINE_RE.sub("", content)


def _parse_json_array(body: str) -> list[str]:
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise SignatureParseError(f"signature list is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise SignatureParseError(f"signature list must be a JSON array, got {type(data).__name__}")
    tokens: list[str] = []
    for item in data:
        if not isinstance(item, str):
            raise SignatureParseError(f"signature list entries must be strings, got {item!r}")
        tokens.append(item)
    return tokens


def _parse_brace_list(body: str) -> list[str]:
    inner = body.replace("{", "").replace("}", "")
    return [tok.strip().replace('"', "") for tok in inner.split(",")]


def _choose_strategy(body: str) -> Callable[[str], list[str]]:
    head = body.lstrip()[:1]
    if head == "[":
        return _parse_json_array
    if head == "{":
        return _parse_brace_list
    if not head:
        raise SignatureParseError("signature source is empty after removing comments")
    raise SignatureParseError(f"signature source must start with '[' or '{{', got {head!r}")


def parse_signature_source(content: str) -> list[str]:
    """
    Parse signature file content into an ordered list of signatures.

    Raises:
        SignatureParseError: unknown layout, invalid JSON, or non-string entries.
    """
    body = strip_comments(content).strip()
    parse = _choose_strategy(body)
    raw_tokens = parse(body)

    signatures: list[str] = []
    dropped = 0
    for token in raw_tokens:
        token = token.strip()
        if is_report_artifact(token):
            if token:
                dropped += 1
            continue
        signatures.append(token)

    if dropped:
        logger.info("signature_artifacts_dropped", count=dropped)
    return signatures


def load_signatures(path: Path | str) -> list[str]:
    """
    Read and parse a signature file.

    Raises:
        OSError: the file cannot be read.
        SignatureParseError: the content is malformed.
    """
    path = Path(path)
    content = path.read_text(encoding="utf-8")
    signatures = parse_signature_source(content)
    logger.info("signatures_loaded", path=str(path), count=len(signatures))
    return signatures

"""
structlog setup for the reconciliation pipeline.

Every record carries `event_type`, `level`, `timestamp` and `logger`. Records
about a single transaction also carry `signature` (see bind_signature).
Decimal amounts may be passed as-is; they are rendered as plain strings so
the JSON stays exact.

Environment: LOG_LEVEL (default INFO), LOG_FORMAT (`json` or `console`).
Only stdlib and structlog are imported here so any module can log.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

# console output shows base58 signatures as head..tail
SIGNATURE_HEAD = 8
SIGNATURE_TAIL = 6


def _stamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _event_type(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog's positional `event` becomes `event_type`."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def _decimals_as_text(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key, value in event_dict.items():
        if isinstance(value, Decimal):
            event_dict[key] = str(value)
    return event_dict


def shorten_signature(signature: str) -> str:
    if len(signature) <= SIGNATURE_HEAD + SIGNATURE_TAIL + 2:
        return signature
    return f"{signature[:SIGNATURE_HEAD]}..{signature[-SIGNATURE_TAIL:]}"


def _short_signature(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    sig = event_dict.get("signature")
    if isinstance(sig, str):
        event_dict["signature"] = shorten_signature(sig)
    return event_dict


def configure_structlog(level: str | None = None, fmt: str | None = None) -> None:
    """(Re)configure structlog. Arguments override LOG_LEVEL / LOG_FORMAT."""
    level_value = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    fmt = (fmt or LOG_FORMAT).strip().lower()
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        _stamp,
        _event_type,
        _decimals_as_text,
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(_short_signature)
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty(), event_key="event_type"))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Logger for a module, with `logger=<name>` on every record.

        logger = get_logger(__name__)
        logger.info("analysis_done", total=3, found=1)
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_signature(signature: str, name: str = "backend_txrecon") -> structlog.BoundLogger:
    """Logger for one transaction: every record it emits carries `signature`."""
    return get_logger(name).bind(signature=signature)

"""Exceptions raised by the TxRecon pipeline."""

from __future__ import annotations


class TxReconError(Exception):
    """Base class for pipeline errors."""


class SignatureParseError(TxReconError, ValueError):
    """Signature source content is malformed. Fatal for the run."""


class EnrichmentCallError(TxReconError):
    """Helius call failed or returned no usable transaction for one signature."""

    def __init__(self, message: str, signature: str, status_code: int | None = None):
        super().__init__(message)
        self.signature = signature
        self.status_code = status_code


class MemoDecodeError(TxReconError, ValueError):
    """Memo instruction payload is not base-58 encoded UTF-8 text."""


class ReportParseError(TxReconError, ValueError):
    """Intermediate analysis CSV has an unexpected header or a malformed row."""

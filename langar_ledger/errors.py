"""Mini README: Exception hierarchy shared by the ledger stores.

Structure:
    * LedgerError - base class carrying the HTTP status the web layer returns.
    * ValidationError / InvalidIndexError - rejected input (400).
    * NotFoundError - referenced date, month, index or member absent (404).
    * ConflictError - roll number already held by a live member (409).
    * CorruptStoreError - a document exists but cannot be parsed (500).

Domain code raises these; ``interface.web_app`` maps them to JSON responses
through a single exception handler.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base exception for ledger rule violations."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Raised when a required field is missing or has the wrong shape."""

    status_code = 400


class InvalidIndexError(ValidationError):
    """Raised when an expense index falls outside the month's list."""


class NotFoundError(LedgerError):
    """Raised when the addressed node or member does not exist."""

    status_code = 404


class ConflictError(LedgerError):
    """Raised when adding a member whose roll number is already in use."""

    status_code = 409


class CorruptStoreError(LedgerError):
    """Raised when a persisted document cannot be read back."""

    status_code = 500

"""Errors raised by ledger commands."""


class LedgerError(Exception):
    """Base exception for rejected ledger mutations."""


class ValidationError(LedgerError):
    """Raised when input data is malformed."""


class ReferentialIntegrityError(LedgerError):
    """Raised when a mutation would reference a missing or foreign entity."""


class NotFoundError(LedgerError):
    """Raised when editing an entity that does not exist."""

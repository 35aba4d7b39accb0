"""Identifier generation for new ledger entities."""

from uuid import uuid4


def generate_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid4().hex

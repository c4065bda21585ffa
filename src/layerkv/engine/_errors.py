"""
Error types raised by the storage engine.

Every engine error carries an ``ErrorKind`` tag. Callers branch on
``error.kind`` instead of comparing against shared error instances.
"""

from __future__ import annotations

import enum as _enum


class ErrorKind(_enum.Enum):
    """Kinds of failure an engine operation can report."""

    KEY_NOT_FOUND = "key_not_found"
    """Get/Delete on a key that is unset or deleted."""

    NO_ACTIVE_TRANSACTION = "no_active_transaction"
    """Rollback/Commit issued while the store is at its root layer."""


class StoreError(Exception):
    """Base class for engine errors."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class KeyNotFoundError(StoreError, KeyError):
    """Raised when a key does not resolve to a value."""

    kind = ErrorKind.KEY_NOT_FOUND

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"key not found: {key!r}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.message


class NoActiveTransactionError(StoreError):
    """Raised by commit/rollback when no transaction is open."""

    kind = ErrorKind.NO_ACTIVE_TRANSACTION

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"cannot {operation}: no active transaction")

"""
Transactional storage engine.

A Store keeps a chain of Layers. Each BEGIN pushes an empty layer that
records only the keys and counts changed inside the transaction, so nested
transactions never copy the full key space.

Example:
    >>> from layerkv.engine import Store
    >>> store = Store()
    >>> store.set("a", "foo")
    >>> store.begin()
    1
    >>> store.delete("a")
    >>> store.count("foo")
    0
    >>> store.rollback()
    >>> store.get("a")
    'foo'
"""

from layerkv.engine._errors import (
    ErrorKind,
    KeyNotFoundError,
    NoActiveTransactionError,
    StoreError,
)
from layerkv.engine._layer import TOMBSTONE, Layer
from layerkv.engine._store import COMMIT_POLICIES, CommitPolicy, Store

__all__ = [
    "COMMIT_POLICIES",
    "CommitPolicy",
    "ErrorKind",
    "KeyNotFoundError",
    "Layer",
    "NoActiveTransactionError",
    "Store",
    "StoreError",
    "TOMBSTONE",
]

"""
Store: the transactional engine built on a chain of layers.

The store owns the ``current`` layer pointer. BEGIN pushes an empty child
layer, ROLLBACK drops the current layer, COMMIT folds layers back toward
the root. No operation copies the key space; each layer only holds what
changed while it was current.

Thread safety: NOT thread-safe. One writer must drive a store serially.
Separate Store instances share nothing.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import layerkv.engine._errors as _errors
import layerkv.engine._layer as _layer

_logger = _logging.getLogger(__name__)

CommitPolicy: _typing.TypeAlias = _typing.Literal["root", "cascade"]

COMMIT_POLICIES: tuple[str, ...] = _typing.get_args(CommitPolicy)


class Store:
    """
    In-memory key-value store with nested transactions.

    Example:
        >>> store = Store()
        >>> store.set("a", "foo")
        >>> store.begin()
        1
        >>> store.set("a", "bar")
        >>> store.count("bar")
        1
        >>> store.rollback()
        >>> store.get("a")
        'foo'

    Args:
        commit_policy: How COMMIT folds a nested transaction.
            ``"root"`` collapses every open transaction into the root in
            one step. ``"cascade"`` folds only the innermost transaction
            into its immediate parent.

    Raises:
        ValueError: If commit_policy is not a known policy.
    """

    def __init__(self, commit_policy: CommitPolicy = "root") -> None:
        if commit_policy not in COMMIT_POLICIES:
            raise ValueError(
                f"Unknown commit policy {commit_policy!r}; "
                f"expected one of {', '.join(COMMIT_POLICIES)}"
            )
        self._commit_policy: CommitPolicy = commit_policy
        self._current = _layer.Layer()

    @property
    def commit_policy(self) -> CommitPolicy:
        return self._commit_policy

    @property
    def current(self) -> _layer.Layer:
        """The active layer. Mutations only ever land here."""
        return self._current

    @property
    def depth(self) -> int:
        """Number of open transactions."""
        return self._current.depth

    @property
    def in_transaction(self) -> bool:
        return not self._current.is_root

    def layers(self) -> list[_layer.Layer]:
        """The chain from the current layer back to the root."""
        return list(self._current.ancestry())

    def reset(self) -> None:
        """Discard every layer, including the root, and start empty."""
        self._current = _layer.Layer()

    # =========================================================================
    # Reads
    # =========================================================================

    def get(self, key: str) -> str:
        """
        Return the value ``key`` resolves to.

        Raises:
            KeyNotFoundError: If the key was never set, or the nearest layer
                recording it holds a tombstone.
        """
        value = self._current.lookup(key)
        if value is None or value == _layer.TOMBSTONE:
            raise _errors.KeyNotFoundError(key)
        return value

    def count(self, value: str) -> int:
        """Number of keys that currently resolve to ``value``."""
        return self._current.count(value)

    def snapshot(self) -> dict[str, str]:
        """Every key that resolves to a non-empty value, as a plain dict."""
        result: dict[str, str] = {}
        for key in sorted(self._current.keys()):
            value = self._current.lookup(key)
            if value:
                result[key] = value
        return result

    # =========================================================================
    # Mutations
    # =========================================================================

    def set(self, key: str, value: str) -> None:
        """
        Write ``value`` for ``key`` in the current layer.

        The old value's count is decremented on the current layer, whichever
        layer the old value came from. An empty value acts as a delete that
        never fails.
        """
        current = self._current
        try:
            old_value = self.get(key)
        except _errors.KeyNotFoundError:
            pass
        else:
            current.adjust_count(old_value, -1)

        current.write(key, value)
        if value != _layer.TOMBSTONE:
            current.adjust_count(value, 1)

    def delete(self, key: str) -> None:
        """
        Tombstone ``key`` in the current layer.

        Deleting a key that is already tombstoned succeeds and leaves the
        counts unchanged.

        Raises:
            KeyNotFoundError: If no layer in the chain records the key.
                Nothing changes.
        """
        old_value = self._current.lookup(key)
        if old_value is None:
            raise _errors.KeyNotFoundError(key)
        _logger.debug("delete %r (was %r) at depth %d", key, old_value, self.depth)
        self.set(key, _layer.TOMBSTONE)

    # =========================================================================
    # Transactions
    # =========================================================================

    def begin(self) -> int:
        """Open a nested transaction. Returns the new depth."""
        self._current = _layer.Layer(self._current)
        _logger.debug("begin: depth %d", self._current.depth)
        return self._current.depth

    def rollback(self) -> None:
        """
        Discard the innermost transaction.

        Raises:
            NoActiveTransactionError: If no transaction is open.
        """
        parent = self._current.parent
        if parent is None:
            raise _errors.NoActiveTransactionError("rollback")
        _logger.debug(
            "rollback: dropping %d key(s) at depth %d",
            len(self._current.overlay),
            self._current.depth,
        )
        self._current = parent

    def commit(self) -> None:
        """
        Make the open transaction's writes permanent.

        Under the ``"root"`` policy every open transaction is collapsed into
        the root, so one COMMIT always returns the store to depth 0. Under
        ``"cascade"`` only the innermost transaction is folded into its
        parent.

        Raises:
            NoActiveTransactionError: If no transaction is open.
        """
        if self._current.is_root:
            raise _errors.NoActiveTransactionError("commit")

        if self._commit_policy == "cascade":
            self._current = self._fold_into_parent(self._current)
        else:
            self._current = self._fold_into_root(self._current)

    @staticmethod
    def _fold_into_parent(layer: _layer.Layer) -> _layer.Layer:
        parent = layer.parent
        assert parent is not None
        parent.absorb_overlay(layer)
        parent.absorb_counts(layer)
        _logger.debug("commit: folded depth %d into depth %d", layer.depth, parent.depth)
        return parent

    @staticmethod
    def _fold_into_root(layer: _layer.Layer) -> _layer.Layer:
        chain = list(layer.ancestry())
        root = chain[-1]
        pending = chain[:-1]

        # Outermost first, so the innermost write for a key wins
        for folded in reversed(pending):
            root.absorb_overlay(folded)

        # Deltas move up one parent at a time until the root holds the sum
        for folded in pending:
            parent = folded.parent
            assert parent is not None
            parent.absorb_counts(folded)

        _logger.debug("commit: collapsed %d layer(s) into root", len(pending))
        return root

    def __repr__(self) -> str:
        return f"Store(depth={self.depth}, commit_policy={self._commit_policy!r})"

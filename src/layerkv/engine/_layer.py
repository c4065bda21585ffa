"""
Layer: one node of the transaction chain.

A layer records only what changed relative to its parent:

- overlay: key -> value writes made while the layer was current. The empty
  string is a tombstone ("deleted here") and still shadows the parent.
- count_delta: value -> net change in how many keys resolve to that value.

Reads walk parent links toward the root. Lookups stop at the first layer
whose overlay records the key; counts sum every layer's delta.
"""

from __future__ import annotations

import types as _types
import typing as _typing

TOMBSTONE = ""
"""Overlay value marking a key as deleted in a layer."""


class Layer:
    """
    A key/value overlay plus a value-count delta, relative to a parent.

    Example:
        >>> root = Layer()
        >>> root.write("a", "foo")
        >>> child = Layer(root)
        >>> child.write("a", "bar")
        >>> child.lookup("a"), root.lookup("a")
        ('bar', 'foo')

    Layers never own their parent. The Store keeps the chain alive for as
    long as a child references it.
    """

    __slots__ = ("_overlay", "_count_delta", "_parent", "_depth")

    def __init__(self, parent: Layer | None = None) -> None:
        self._overlay: dict[str, str] = {}
        self._count_delta: dict[str, int] = {}
        self._parent = parent
        self._depth = 0 if parent is None else parent.depth + 1

    @property
    def parent(self) -> Layer | None:
        """The enclosing layer, or None for the root."""
        return self._parent

    @property
    def depth(self) -> int:
        """Number of parent links between this layer and the root."""
        return self._depth

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def overlay(self) -> _typing.Mapping[str, str]:
        """Read-only view of this layer's own key writes."""
        return _types.MappingProxyType(self._overlay)

    @property
    def count_delta(self) -> _typing.Mapping[str, int]:
        """Read-only view of this layer's count changes."""
        return _types.MappingProxyType(self._count_delta)

    def root(self) -> Layer:
        """Follow parent links to the end of the chain."""
        layer = self
        while layer._parent is not None:
            layer = layer._parent
        return layer

    def ancestry(self) -> _typing.Iterator[Layer]:
        """Yield this layer, then each parent up to and including the root."""
        layer: Layer | None = self
        while layer is not None:
            yield layer
            layer = layer._parent

    # =========================================================================
    # Reads
    # =========================================================================

    def lookup(self, key: str) -> str | None:
        """
        Resolve a key against this layer and its ancestors.

        Returns the value from the nearest layer whose overlay records the
        key. A tombstone is returned as-is; it does not fall through to the
        parent. Returns None when no layer in the chain records the key.
        """
        for layer in self.ancestry():
            if key in layer._overlay:
                return layer._overlay[key]
        return None

    def count(self, value: str) -> int:
        """Sum of every layer's delta for ``value``, from here to the root."""
        if value == TOMBSTONE:
            return 0
        return sum(layer._count_delta.get(value, 0) for layer in self.ancestry())

    def keys(self) -> set[str]:
        """Every key recorded by any layer in the chain (tombstones included)."""
        seen: set[str] = set()
        for layer in self.ancestry():
            seen.update(layer._overlay)
        return seen

    # =========================================================================
    # Writes (only ever applied to the current layer, or during a fold)
    # =========================================================================

    def write(self, key: str, value: str) -> None:
        """Record ``value`` for ``key`` in this layer's overlay."""
        self._overlay[key] = value

    def adjust_count(self, value: str, amount: int) -> None:
        """Add ``amount`` to this layer's delta for ``value``."""
        if value == TOMBSTONE or amount == 0:
            return
        total = self._count_delta.get(value, 0) + amount
        if total:
            self._count_delta[value] = total
        else:
            self._count_delta.pop(value, None)

    def absorb_overlay(self, other: Layer) -> None:
        """Copy every overlay entry of ``other`` into this layer, overwriting."""
        self._overlay.update(other._overlay)

    def absorb_counts(self, other: Layer) -> None:
        """Add every count delta of ``other`` into this layer's deltas."""
        for value, amount in other._count_delta.items():
            self.adjust_count(value, amount)

    def __repr__(self) -> str:
        return (
            f"Layer(depth={self._depth}, overlay={self._overlay!r}, "
            f"count_delta={self._count_delta!r})"
        )

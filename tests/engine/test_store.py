"""Tests for Store reads and writes."""

import pytest as _pytest

import layerkv.engine as engine


class TestStoreBasics:
    """GET/SET/DELETE/COUNT outside transactions."""

    def test_get_after_set(self, store: engine.Store) -> None:
        store.set("a", "foo")

        assert store.get("a") == "foo"

    def test_get_missing_key_raises(self, store: engine.Store) -> None:
        with _pytest.raises(engine.KeyNotFoundError) as exc_info:
            store.get("a")

        assert exc_info.value.kind is engine.ErrorKind.KEY_NOT_FOUND
        assert exc_info.value.key == "a"

    def test_key_not_found_is_a_key_error(self, store: engine.Store) -> None:
        with _pytest.raises(KeyError):
            store.get("missing")

    def test_keys_are_case_sensitive(self, store: engine.Store) -> None:
        store.set("b", "baz")

        with _pytest.raises(engine.KeyNotFoundError):
            store.get("B")

    def test_overwrite_moves_count(self, store: engine.Store) -> None:
        store.set("a", "foo")
        store.set("a", "bar")

        assert store.get("a") == "bar"
        assert store.count("bar") == 1
        assert store.count("foo") == 0

    def test_count_multiple_keys(self, store: engine.Store) -> None:
        store.set("a", "foo")
        store.set("b", "foo")

        assert store.count("foo") == 2
        assert store.count("bar") == 0

    def test_delete_then_get_raises(self, store: engine.Store) -> None:
        store.set("a", "foo")
        store.delete("a")

        with _pytest.raises(engine.KeyNotFoundError):
            store.get("a")
        assert store.count("foo") == 0

    def test_delete_keeps_tombstone_in_overlay(self, store: engine.Store) -> None:
        store.set("a", "foo")
        store.delete("a")

        assert store.current.overlay == {"a": engine.TOMBSTONE}

    def test_set_empty_value_acts_as_delete(self, store: engine.Store) -> None:
        store.set("a", "foo")
        store.set("a", "")

        with _pytest.raises(engine.KeyNotFoundError):
            store.get("a")
        assert store.count("foo") == 0

    def test_set_empty_value_on_missing_key_does_not_fail(self, store: engine.Store) -> None:
        store.set("a", "")

        assert store.count("") == 0
        with _pytest.raises(engine.KeyNotFoundError):
            store.get("a")

    def test_count_empty_value_is_zero(self, store: engine.Store) -> None:
        store.set("a", "foo")
        store.delete("a")

        assert store.count("") == 0

    def test_delete_missing_key_raises_without_mutation(self, store: engine.Store) -> None:
        with _pytest.raises(engine.KeyNotFoundError):
            store.delete("a")

        assert dict(store.current.overlay) == {}
        assert dict(store.current.count_delta) == {}

    def test_delete_missing_key_fails_every_time(self, store: engine.Store) -> None:
        for _ in range(2):
            with _pytest.raises(engine.KeyNotFoundError):
                store.delete("a")

    def test_delete_of_deleted_key_succeeds(self, store: engine.Store) -> None:
        """A tombstone resolves the key, so deleting it again is not an error."""
        store.set("a", "foo")
        store.delete("a")

        store.delete("a")

        assert dict(store.current.overlay) == {"a": engine.TOMBSTONE}
        assert store.count("foo") == 0
        with _pytest.raises(engine.KeyNotFoundError):
            store.get("a")

    def test_delete_of_deleted_key_inside_transaction(self, store: engine.Store) -> None:
        store.set("a", "foo")
        store.begin()
        store.delete("a")

        store.delete("a")

        assert dict(store.current.count_delta) == {"foo": -1}
        store.rollback()
        assert store.get("a") == "foo"
        assert store.count("foo") == 1

    def test_set_same_value_twice_counts_once(self, store: engine.Store) -> None:
        store.set("a", "foo")
        store.set("a", "foo")

        assert store.count("foo") == 1

    def test_snapshot_skips_deleted_keys(self, store: engine.Store) -> None:
        store.set("b", "2")
        store.set("a", "1")
        store.set("c", "3")
        store.delete("c")

        assert store.snapshot() == {"a": "1", "b": "2"}


class TestStoreConstruction:
    """Store setup and reset."""

    def test_unknown_commit_policy_rejected(self) -> None:
        with _pytest.raises(ValueError, match="Unknown commit policy"):
            engine.Store(commit_policy="sideways")  # type: ignore[arg-type]

    def test_default_policy_is_root(self, store: engine.Store) -> None:
        assert store.commit_policy == "root"

    def test_stores_are_independent(self) -> None:
        first = engine.Store()
        second = engine.Store()
        first.set("a", "foo")
        first.begin()

        assert second.depth == 0
        with _pytest.raises(engine.KeyNotFoundError):
            second.get("a")

    def test_reset_discards_everything(self, store: engine.Store) -> None:
        store.set("a", "foo")
        store.begin()
        store.set("b", "bar")

        store.reset()

        assert store.depth == 0
        assert store.snapshot() == {}
        assert store.count("foo") == 0

"""Tests for KeyedStateStore."""

from livedash.state_store import KeyedStateStore


class TestKeyedStateStore:

    def test_get_missing_returns_default(self):
        store = KeyedStateStore()
        assert store.get("cpu", "value") is None
        assert store.get("cpu", "value", 0) == 0

    def test_set_and_get(self):
        store = KeyedStateStore()
        store.set("cpu", "value", 42)
        assert store.get("cpu", "value") == 42
        assert store.has("cpu", "value")
        assert not store.has("cpu", "width")

    def test_partitions_are_disjoint(self):
        """Same attribute name under different ids never collides."""
        store = KeyedStateStore()
        store.set("a", "value", 1)
        store.set("b", "value", 2)
        assert store.get("a", "value") == 1
        assert store.get("b", "value") == 2

    def test_update_and_slice(self):
        store = KeyedStateStore()
        store.update("bar", value=10, width=40, label="CPU")
        assert store.slice("bar") == {"value": 10, "width": 40, "label": "CPU"}

        # slice is a copy
        store.slice("bar")["value"] = 99
        assert store.get("bar", "value") == 10

    def test_ids_in_first_seen_order(self):
        store = KeyedStateStore()
        store.set("z", "x", 1)
        store.set("a", "x", 1)
        store.set("z", "y", 2)
        assert store.ids() == ["z", "a"]
        assert list(store) == ["z", "a"]
        assert len(store) == 2
        assert "a" in store
        assert "q" not in store

"""Tests for position stores."""

import json

import pytest

from governance.graph import (
    InMemoryPositionStore,
    JsonPositionStore,
    Position,
    get_position_store,
    reset_position_store,
)


class TestInMemoryPositionStore:
    """Tests for the dict-backed store."""

    def test_absent_until_set(self, store):
        assert store.get("pii") is None
        assert "pii" not in store

    def test_set_and_overwrite(self, store):
        store.set("pii", Position(x=1, y=2))
        store.set("pii", Position(x=300, y=300))
        assert store.get("pii") == Position(x=300, y=300)
        assert len(store) == 1

    def test_clear(self, store):
        store.set("a", Position(x=0, y=0))
        store.clear()
        assert len(store) == 0

    def test_items_snapshot(self, store):
        store.set("a", Position(x=0, y=0))
        items = store.items()
        store.set("b", Position(x=1, y=1))
        assert [k for k, _ in items] == ["a"]


class TestJsonPositionStore:
    """Tests for the JSON-persisted store."""

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "positions.json"
        JsonPositionStore(path).set("privacy", Position(x=10.5, y=-4))

        reloaded = JsonPositionStore(path)
        assert reloaded.get("privacy") == Position(x=10.5, y=-4)

    def test_file_format(self, tmp_path):
        path = tmp_path / "nested" / "positions.json"
        JsonPositionStore(path).set("gdpr", Position(x=1, y=2))
        assert json.loads(path.read_text()) == {"gdpr": {"x": 1.0, "y": 2.0}}

    def test_corrupt_file_starts_empty(self, tmp_path):
        path = tmp_path / "positions.json"
        path.write_text("{not json")
        assert len(JsonPositionStore(path)) == 0

    def test_non_object_file_starts_empty(self, tmp_path):
        path = tmp_path / "positions.json"
        path.write_text("[1, 2]")
        store = JsonPositionStore(path)
        assert len(store) == 0

        store.set("pii", Position(x=1, y=2))
        assert JsonPositionStore(path).get("pii") == Position(x=1, y=2)

    def test_malformed_entry_skipped(self, tmp_path):
        path = tmp_path / "positions.json"
        path.write_text(json.dumps({"ok": {"x": 1, "y": 2}, "bad": {"x": 1}}))
        store = JsonPositionStore(path)
        assert store.get("ok") == Position(x=1, y=2)
        assert store.get("bad") is None


class TestProcessWideStore:
    """Tests for the shared default store."""

    @pytest.fixture(autouse=True)
    def _reset(self):
        reset_position_store()
        yield
        reset_position_store()

    def test_same_instance_until_reset(self):
        first = get_position_store()
        assert get_position_store() is first
        reset_position_store()
        assert get_position_store() is not first

    def test_survives_new_consumers(self):
        get_position_store().set("pii", Position(x=3, y=4))
        assert get_position_store().get("pii") == Position(x=3, y=4)

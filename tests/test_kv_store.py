"""Tests for the key-value store backends."""
import json
from unittest.mock import MagicMock

import pytest

from config.settings import Settings
from services.errors import PersistenceError
from services.kv_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    SupabaseKeyValueStore,
    create_store,
)


def test_in_memory_roundtrip():
    store = InMemoryKeyValueStore()
    assert store.get("k") is None
    store.set("k", "v")
    assert store.get("k") == "v"


class TestJsonFileStore:

    def test_missing_file_reads_as_empty(self, tmp_path):
        store = JsonFileKeyValueStore(str(tmp_path / "gallery.json"))
        assert store.get("k") is None

    def test_set_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "gallery.json"
        store = JsonFileKeyValueStore(str(path))
        store.set("k", "[]")
        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "[]"}

    def test_keys_are_kept_side_by_side(self, tmp_path):
        store = JsonFileKeyValueStore(str(tmp_path / "gallery.json"))
        store.set("a", "1")
        store.set("b", "2")
        assert store.get("a") == "1"
        assert store.get("b") == "2"
        assert not list(tmp_path.glob(".gallery-*.tmp"))

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "gallery.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonFileKeyValueStore(str(path)).get("k") is None

    def test_read_failure_raises_persistence_error(self, tmp_path):
        path = tmp_path / "gallery.json"
        path.mkdir()
        store = JsonFileKeyValueStore(str(path))
        with pytest.raises(PersistenceError):
            store.get("k")
        with pytest.raises(PersistenceError):
            store.set("k", "v")

    def test_write_failure_raises_persistence_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        store = JsonFileKeyValueStore(str(blocker / "gallery.json"))
        with pytest.raises(PersistenceError):
            store.set("k", "v")


class TestSupabaseStore:

    def test_get_reads_value_column(self):
        client = MagicMock()
        query = client.table.return_value.select.return_value.eq.return_value.limit.return_value
        query.execute.return_value = MagicMock(data=[{"value": "[]"}])

        store = SupabaseKeyValueStore(client, table="kv")
        assert store.get("gallery") == "[]"
        client.table.assert_called_with("kv")
        client.table.return_value.select.return_value.eq.assert_called_with("key", "gallery")

    def test_get_missing_row(self):
        client = MagicMock()
        query = client.table.return_value.select.return_value.eq.return_value.limit.return_value
        query.execute.return_value = MagicMock(data=[])
        assert SupabaseKeyValueStore(client).get("gallery") is None

    def test_get_failure_raises_persistence_error(self):
        client = MagicMock()
        query = client.table.return_value.select.return_value.eq.return_value.limit.return_value
        query.execute.side_effect = ConnectionError("connection reset by peer")
        with pytest.raises(PersistenceError):
            SupabaseKeyValueStore(client).get("gallery")

    def test_set_upserts(self):
        client = MagicMock()
        SupabaseKeyValueStore(client).set("gallery", "[]")
        client.table.return_value.upsert.assert_called_once_with({"key": "gallery", "value": "[]"})

    def test_set_failure_raises_persistence_error(self):
        client = MagicMock()
        client.table.return_value.upsert.return_value.execute.side_effect = RuntimeError("offline")
        with pytest.raises(PersistenceError):
            SupabaseKeyValueStore(client).set("gallery", "[]")


class TestCreateStore:

    def test_memory_backend(self):
        assert isinstance(create_store(Settings(storage_backend="memory")), InMemoryKeyValueStore)

    def test_file_backend(self, tmp_path):
        store = create_store(Settings(storage_backend="file", storage_path=str(tmp_path / "g.json")))
        assert isinstance(store, JsonFileKeyValueStore)

    def test_supabase_backend_requires_url(self):
        with pytest.raises(ValueError):
            create_store(Settings(storage_backend="supabase"))

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_store(Settings(storage_backend="redis"))

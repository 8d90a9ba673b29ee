# ZoneSync Cache and Cursor Store Tests
# Tests for the local cache and durable sync position

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from zonesync.errors import PersistenceError
from zonesync.storage.kv import FileKeyValueStore, MemoryKeyValueStore
from zonesync.sync.cache import LocalCache
from zonesync.sync.state import ZONE_CREATED_FLAG, CursorStore


class TestCursorStore:
    """Tests for CursorStore."""

    def test_initial_cursor_is_none(self, storage: MemoryKeyValueStore):
        assert CursorStore(storage).load() is None

    def test_save_replaces_cursor(self, storage: MemoryKeyValueStore):
        store = CursorStore(storage)
        store.save(b"C1")
        store.save(b"C2")
        assert store.cursor == b"C2"
        assert CursorStore(storage).load() == b"C2"

    def test_namespace_isolates_keys(self, storage: MemoryKeyValueStore):
        CursorStore(storage, namespace="Contacts").save(b"C1")
        assert CursorStore(storage, namespace="Other").load() is None
        assert storage.get_blob("Contacts.last_change_token") == b"C1"

    def test_flags(self, storage: MemoryKeyValueStore):
        store = CursorStore(storage)
        assert store.load_flag(ZONE_CREATED_FLAG) is False
        store.save_flag(ZONE_CREATED_FLAG)
        assert store.load_flag(ZONE_CREATED_FLAG) is True

    def test_clear_keeps_flags(self, storage: MemoryKeyValueStore):
        store = CursorStore(storage)
        store.save(b"C1")
        store.save_flag(ZONE_CREATED_FLAG)

        store.clear()

        assert store.cursor is None
        assert store.load() is None
        assert store.load_flag(ZONE_CREATED_FLAG) is True


class TestLocalCache:
    """Tests for LocalCache."""

    def test_upsert_and_snapshot(self, storage: MemoryKeyValueStore):
        cache = LocalCache(storage)
        cache.upsert("r2", {"name": "Bob"})
        snapshot = cache.upsert("r1", {"name": "Alice"})

        assert snapshot == ["Alice", "Bob"]
        assert cache.snapshot() == ["Alice", "Bob"]
        assert len(cache) == 2

    def test_upsert_is_idempotent(self, storage: MemoryKeyValueStore):
        cache = LocalCache(storage)
        cache.upsert("r1", {"name": "Alice"})
        cache.upsert("r1", {"name": "Alice"})
        assert cache.snapshot() == ["Alice"]

    def test_upsert_replaces_fields(self, storage: MemoryKeyValueStore):
        cache = LocalCache(storage)
        cache.upsert("r1", {"name": "Alice"})
        cache.upsert("r1", {"name": "Alicia"})
        assert cache.snapshot() == ["Alicia"]

    def test_remove_unknown_is_noop(self, storage: MemoryKeyValueStore):
        cache = LocalCache(storage)
        assert cache.remove("missing") is False
        assert cache.snapshot() == []

    def test_apply_upserts_then_deletions(self, storage: MemoryKeyValueStore):
        cache = LocalCache(storage)
        cache.upsert("r1", {"name": "Alice"})

        snapshot = cache.apply([("r2", {"name": "Bob"}), ("r3", {"name": "Carol"})], ["r1", "r3", "unknown"])

        assert snapshot == ["Bob"]

    def test_every_mutation_persists(self, storage: MemoryKeyValueStore):
        cache = LocalCache(storage)
        cache.upsert("r1", {"name": "Alice"})

        reloaded = LocalCache(storage)
        reloaded.load_from_storage()
        assert reloaded.snapshot() == ["Alice"]

        cache.remove("r1")
        reloaded.load_from_storage()
        assert reloaded.snapshot() == []

    def test_persists_to_file(self, temp_dir: Path):
        path = temp_dir / "store.yaml"
        cache = LocalCache(FileKeyValueStore(path), namespace="Contacts")
        cache.upsert("r1", {"name": "Alice", "email": "alice@example.com"})

        reloaded = LocalCache(FileKeyValueStore(path), namespace="Contacts")
        reloaded.load_from_storage()
        assert reloaded.snapshot() == ["Alice"]
        stored = yaml.safe_load(FileKeyValueStore(path).get_blob(reloaded.storage_key))
        assert stored == {"r1": {"name": "Alice", "email": "alice@example.com"}}

    def test_failed_persist_rolls_back(self, storage: MemoryKeyValueStore):
        cache = LocalCache(storage)
        cache.upsert("r1", {"name": "Alice"})

        with patch.object(storage, "set_blob", side_effect=PersistenceError("disk full")):
            with pytest.raises(PersistenceError):
                cache.upsert("r2", {"name": "Bob"})

        assert cache.snapshot() == ["Alice"]
        assert "r2" not in cache

    def test_records_without_display_value_hidden(self, storage: MemoryKeyValueStore):
        cache = LocalCache(storage)
        cache.upsert("r1", {"email": "anon@example.com"})
        assert cache.snapshot() == []
        assert "r1" in cache

    def test_custom_name_field(self, storage: MemoryKeyValueStore):
        cache = LocalCache(storage, name_field="title")
        cache.upsert("r1", {"title": "Buy milk", "name": "ignored"})
        assert cache.snapshot() == ["Buy milk"]

    def test_find_id_by_name_smallest_id_wins(self, storage: MemoryKeyValueStore):
        cache = LocalCache(storage)
        cache.apply([("r9", {"name": "Alice"}), ("r3", {"name": "Alice"}), ("r5", {"name": "Bob"})], [])

        assert cache.find_id_by_name("Alice") == "r3"
        assert cache.find_id_by_name("Carol") is None

    def test_listener_receives_snapshot(self, storage: MemoryKeyValueStore):
        listener = MagicMock()
        cache = LocalCache(storage, listener=listener)

        cache.upsert("r1", {"name": "Alice"})
        cache.remove("r1")

        assert [c.args[0] for c in listener.call_args_list] == [["Alice"], []]

    def test_upsert_copies_fields(self, storage: MemoryKeyValueStore):
        cache = LocalCache(storage)
        fields = {"name": "Alice"}
        cache.upsert("r1", fields)

        fields["name"] = "Mallory"
        cache.upsert("r2", {"name": "Bob"})

        assert cache.snapshot() == ["Alice", "Bob"]

    def test_unreadable_document(self, storage: MemoryKeyValueStore):
        storage.set_blob("records", b"\xff\xfe")
        with pytest.raises(PersistenceError):
            LocalCache(storage).load_from_storage()

    def test_document_not_a_mapping(self, storage: MemoryKeyValueStore):
        storage.set_blob("records", b"- r1\n- r2\n")
        with pytest.raises(PersistenceError):
            LocalCache(storage).load_from_storage()

    def test_record_fields_not_a_mapping(self, storage: MemoryKeyValueStore):
        storage.set_blob("records", b"r1: Alice\n")
        with pytest.raises(PersistenceError):
            LocalCache(storage).load_from_storage()

    def test_clear(self, storage: MemoryKeyValueStore):
        cache = LocalCache(storage)
        cache.apply([("r1", {"name": "Alice"}), ("r2", {"name": "Bob"})], [])
        assert cache.clear() == []
        assert len(cache) == 0

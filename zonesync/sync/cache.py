# ZoneSync Local Cache
# Local projection of acknowledged remote records

from __future__ import annotations

import copy
from collections.abc import Callable, Iterable
from typing import Any, Optional

import yaml

from zonesync.errors import PersistenceError
from zonesync.storage.kv import KeyValueStore

CACHE_KEY = "records"

SnapshotListener = Callable[[list[str]], None]


class LocalCache:
    """
    Mapping of record ID to record fields, mirrored to durable storage.

    Every mutation is persisted before it returns. The cache is a read
    projection of the remote store and is never a source of truth.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        *,
        name_field: str = "name",
        namespace: str = "",
        listener: Optional[SnapshotListener] = None,
    ):
        """
        Initialize local cache.

        Args:
            storage: Durable key-value storage.
            name_field: Field holding the display value of a record.
            namespace: Optional key prefix, e.g. the zone name.
            listener: Optional callback receiving the snapshot after each change.
        """
        self.storage = storage
        self.name_field = name_field
        self.namespace = namespace
        self.listener = listener
        self._records: dict[str, dict[str, Any]] = {}
        self._snapshot: Optional[list[str]] = None

    @property
    def storage_key(self) -> str:
        """Get storage key of the cache document."""
        return f"{self.namespace}.{CACHE_KEY}" if self.namespace else CACHE_KEY

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def display_name(self, fields: dict[str, Any]) -> Optional[str]:
        """Get the display value from a field map, if present."""
        value = fields.get(self.name_field)
        return value if isinstance(value, str) else None

    def snapshot(self) -> list[str]:
        """Return display names sorted lexicographically."""
        if self._snapshot is None:
            names = (self.display_name(fields) for fields in self._records.values())
            self._snapshot = sorted(name for name in names if name is not None)
        return list(self._snapshot)

    def find_id_by_name(self, name: str) -> Optional[str]:
        """
        Resolve a display name to a record ID.

        Names are not unique; the smallest matching record ID wins.
        """
        matches = [rid for rid, fields in self._records.items() if self.display_name(fields) == name]
        return min(matches) if matches else None

    def upsert(self, record_id: str, fields: dict[str, Any]) -> list[str]:
        """Insert or replace a record, persist, and return the new snapshot."""
        return self.apply([(record_id, fields)], [])

    def remove(self, record_id: str) -> bool:
        """Remove a record and persist. Unknown IDs are a no-op."""
        if record_id not in self._records:
            return False
        self.apply([], [record_id])
        return True

    def apply(self, upserts: Iterable[tuple[str, dict[str, Any]]], deletions: Iterable[str]) -> list[str]:
        """
        Apply a batch of upserts followed by removals, then persist once.

        Re-applying the same batch leaves the cache unchanged. If persisting
        fails the in-memory state is rolled back and the error propagates.

        Returns:
            The new snapshot.
        """
        previous = self._records
        records = dict(previous)
        for record_id, fields in upserts:
            records[record_id] = copy.deepcopy(fields)
        for record_id in deletions:
            records.pop(record_id, None)

        self._records = records
        self._snapshot = None
        try:
            self.persist_to_storage()
        except PersistenceError:
            self._records = previous
            self._snapshot = None
            raise

        snapshot = self.snapshot()
        if self.listener is not None:
            self.listener(snapshot)
        return snapshot

    def clear(self) -> list[str]:
        """Remove every record and persist."""
        return self.apply([], list(self._records))

    def load_from_storage(self) -> None:
        """Replace in-memory records with the persisted document."""
        blob = self.storage.get_blob(self.storage_key)
        if blob is None:
            records: dict[str, dict[str, Any]] = {}
        else:
            try:
                data = yaml.safe_load(blob.decode("utf-8"))
            except (UnicodeDecodeError, yaml.YAMLError) as e:
                raise PersistenceError(f"Cached records are unreadable: {e}", key=self.storage_key) from e
            data = data or {}
            if not isinstance(data, dict) or not all(isinstance(f, dict) or f is None for f in data.values()):
                raise PersistenceError("Cached records are not a valid record document", key=self.storage_key)
            records = {str(rid): dict(fields or {}) for rid, fields in data.items()}

        self._records = records
        self._snapshot = None

    def persist_to_storage(self) -> None:
        """Write all records to durable storage."""
        content = yaml.safe_dump(self._records, default_flow_style=False, sort_keys=True, allow_unicode=True)
        self.storage.set_blob(self.storage_key, content.encode("utf-8"))

# ZoneSync Mutation Gateway
# Remote-first writes mirrored into the local cache on confirmation

from __future__ import annotations

import threading
from typing import Any, Optional

from zonesync.errors import RecordNotFound
from zonesync.remote.base import Record, RemoteStore
from zonesync.sync.cache import LocalCache


class MutationGateway:
    """
    Creates and deletes single records.

    The remote store is written first; the local cache only changes after
    the remote store confirmed the write. A failed remote call leaves the
    cache untouched.
    """

    def __init__(
        self,
        remote: RemoteStore,
        cache: LocalCache,
        *,
        zone: str,
        mutation_lock: Optional[threading.RLock] = None,
    ):
        self.remote = remote
        self.cache = cache
        self.zone = zone
        self.mutation_lock = mutation_lock or threading.RLock()

    def add_record(self, name: str, extra_fields: Optional[dict[str, Any]] = None) -> Record:
        """
        Save a new record remotely, then cache it.

        Args:
            name: Display value of the record.
            extra_fields: Additional fields stored with the record.

        Returns:
            The record as confirmed by the remote store.

        Raises:
            TransportError: If the remote save fails.
        """
        fields = dict(extra_fields or {})
        fields[self.cache.name_field] = name

        record = self.remote.save(self.zone, fields)

        with self.mutation_lock:
            self.cache.upsert(record.record_id, dict(record.fields))
        return record

    def delete_record(self, name: str) -> str:
        """
        Delete the record with this display name remotely, then locally.

        Returns:
            The deleted record ID.

        Raises:
            RecordNotFound: If no cached record has this name. No remote call is made.
            TransportError: If the remote delete fails.
        """
        with self.mutation_lock:
            record_id = self.cache.find_id_by_name(name)
        if record_id is None:
            raise RecordNotFound(name)

        self.remote.delete(self.zone, record_id)

        with self.mutation_lock:
            self.cache.remove(record_id)
        return record_id

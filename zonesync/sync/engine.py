# ZoneSync Delta Sync Engine
# Cursor-driven pull loop applying remote changesets to the local cache

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Optional

from zonesync.remote.base import Changeset, RemoteStore
from zonesync.sync.cache import LocalCache
from zonesync.sync.state import CursorStore


@dataclass
class PullResult:
    """Result of a complete pull."""

    pages: int = 0
    upserted: int = 0
    deleted: int = 0
    skipped: int = 0
    cursor: Optional[bytes] = None

    @property
    def has_changes(self) -> bool:
        """Check if any change was applied."""
        return self.upserted > 0 or self.deleted > 0


class DeltaSyncEngine:
    """
    Pulls changes from the remote store into the local cache.

    Each page is fetched without holding the mutation lock, then applied
    and persisted under it: cache first, cursor second. A crash between the
    two leaves the old cursor, so the page is fetched and applied again,
    which is harmless because upserts and removals are idempotent.
    """

    def __init__(
        self,
        remote: RemoteStore,
        cache: LocalCache,
        cursor_store: CursorStore,
        *,
        zone: str,
        mutation_lock: Optional[threading.RLock] = None,
    ):
        """
        Initialize sync engine.

        Args:
            remote: Remote store to pull from.
            cache: Local cache receiving the changes.
            cursor_store: Store holding the change cursor.
            zone: Fixed zone name.
            mutation_lock: Lock guarding every cache and cursor write.
        """
        self.remote = remote
        self.cache = cache
        self.cursor_store = cursor_store
        self.zone = zone
        self.mutation_lock = mutation_lock or threading.RLock()
        self._run_lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        """Check if a pull loop is in flight."""
        return self._run_lock.locked()

    @contextmanager
    def running(self) -> Iterator[None]:
        """Hold the run lock so no pull loop is in flight."""
        with self._run_lock:
            yield

    def pull_changes(self) -> PullResult:
        """
        Fetch and apply every pending page.

        Concurrent callers are serialized; only one loop runs at a time.

        Returns:
            PullResult with counts of applied changes.

        Raises:
            TransportError: If a fetch fails. The persisted cursor is left at
                the last fully applied page.
            PersistenceError: If the cache or cursor cannot be persisted.
        """
        with self.running():
            result = PullResult(cursor=self.cursor_store.cursor)

            while True:
                changeset = self.remote.fetch_changes(self.zone, result.cursor)
                self._apply_page(changeset, result)
                result.pages += 1
                result.cursor = changeset.cursor

                if not changeset.more_pending:
                    return result

    def _apply_page(self, changeset: Changeset, result: PullResult) -> None:
        upserts: list[tuple[str, dict[str, Any]]] = []
        for change in changeset.changed:
            # A record that failed to fetch is skipped, not fatal to the page
            if not change.ok or self.cache.display_name(change.fields) is None:
                result.skipped += 1
                continue
            upserts.append((change.record_id, change.fields))

        with self.mutation_lock:
            removed = [record_id for record_id in changeset.deleted if record_id in self.cache]
            self.cache.apply(upserts, changeset.deleted)
            self.cursor_store.save(changeset.cursor)

        result.upserted += len(upserts)
        result.deleted += len(removed)

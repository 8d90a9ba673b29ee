# ZoneSync Sync Session
# Wires storage, remote store and sync components into one surface

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from zonesync.remote.base import Record, RemoteStore
from zonesync.storage.kv import KeyValueStore
from zonesync.sync.bootstrap import BootstrapCoordinator, BootstrapResult
from zonesync.sync.cache import LocalCache, SnapshotListener
from zonesync.sync.engine import DeltaSyncEngine, PullResult
from zonesync.sync.mutations import MutationGateway
from zonesync.sync.state import CursorStore
from zonesync.sync.trigger import NotificationTrigger, SignalOutcome

if TYPE_CHECKING:
    from zonesync.config.schema import ZonesyncConfig

DEFAULT_ZONE = "Contacts"
DEFAULT_SUBSCRIPTION_ID = "changes-subscription-id"


@dataclass
class InitializeResult:
    """Result of session initialization."""

    bootstrap: BootstrapResult = field(default_factory=BootstrapResult)
    pull: Optional[PullResult] = None


@dataclass
class MutationResult:
    """Result of a mutation followed by a pull."""

    record_id: str
    pull: Optional[PullResult] = None


class SyncSession:
    """
    Single owner of the local cache and sync position.

    All cache and cursor writes go through one lock shared by the engine
    and the mutation gateway. Remote calls run outside of it.
    """

    def __init__(
        self,
        remote: RemoteStore,
        storage: KeyValueStore,
        *,
        zone: str = DEFAULT_ZONE,
        subscription_id: str = DEFAULT_SUBSCRIPTION_ID,
        name_field: str = "name",
        listener: Optional[SnapshotListener] = None,
    ):
        """
        Initialize sync session.

        Args:
            remote: Authoritative remote store.
            storage: Durable local storage.
            zone: Fixed zone name.
            subscription_id: Fixed subscription identity.
            name_field: Field holding the display value of a record.
            listener: Optional callback receiving the snapshot after each change.
        """
        self.remote = remote
        self.storage = storage
        self.zone = zone
        self.subscription_id = subscription_id
        self.lock = threading.RLock()

        self.cursor_store = CursorStore(storage, namespace=zone)
        self.cache = LocalCache(storage, name_field=name_field, namespace=zone, listener=listener)
        self.bootstrap = BootstrapCoordinator(remote, self.cursor_store, zone=zone, subscription_id=subscription_id)
        self.engine = DeltaSyncEngine(remote, self.cache, self.cursor_store, zone=zone, mutation_lock=self.lock)
        self.gateway = MutationGateway(remote, self.cache, zone=zone, mutation_lock=self.lock)
        self.trigger = NotificationTrigger(self.engine)
        self._loaded = False

    @classmethod
    def from_config(cls, config: "ZonesyncConfig", *, listener: Optional[SnapshotListener] = None) -> "SyncSession":
        """Build a session with file storage and a directory remote."""
        from zonesync.remote.directory import DirectoryRemoteStore
        from zonesync.storage.kv import FileKeyValueStore
        from zonesync.utils.paths import expand_path

        remote = DirectoryRemoteStore(expand_path(config.remote.path), page_size=config.remote.page_size)
        storage = FileKeyValueStore(expand_path(config.storage.path))
        return cls(
            remote,
            storage,
            zone=config.zone.zone_name,
            subscription_id=config.zone.subscription_id,
            name_field=config.zone.name_field,
            listener=listener,
        )

    def load(self) -> None:
        """Load the cache and cursor from durable storage."""
        with self.lock:
            self.cache.load_from_storage()
            self.cursor_store.load()
            self._loaded = True

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    @property
    def is_initialized(self) -> bool:
        """Check if the zone and subscription are provisioned."""
        return self.bootstrap.is_initialized

    def initialize(self) -> InitializeResult:
        """
        Load local state, provision the remote side, and pull.

        Raises:
            TransportError: If provisioning or the initial pull fails.
        """
        self._ensure_loaded()
        result = InitializeResult(bootstrap=self.bootstrap.ensure())
        if self.is_initialized:
            result.pull = self.engine.pull_changes()
        return result

    def pull_changes(self) -> PullResult:
        """Fetch and apply all pending remote changes."""
        self._ensure_loaded()
        return self.engine.pull_changes()

    def on_signal(self) -> SignalOutcome:
        """Handle an external wake-up signal."""
        self._ensure_loaded()
        return self.trigger.on_signal()

    def add_record(self, name: str, extra_fields: Optional[dict[str, Any]] = None) -> MutationResult:
        """Create a record remotely and locally, then pull."""
        self._ensure_loaded()
        record: Record = self.gateway.add_record(name, extra_fields)
        return MutationResult(record_id=record.record_id, pull=self.engine.pull_changes())

    def delete_record(self, name: str) -> MutationResult:
        """Delete a record by display name remotely and locally, then pull."""
        self._ensure_loaded()
        record_id = self.gateway.delete_record(name)
        return MutationResult(record_id=record_id, pull=self.engine.pull_changes())

    def current_names(self) -> list[str]:
        """Get sorted display names of all cached records."""
        self._ensure_loaded()
        with self.lock:
            return self.cache.snapshot()

    def last_cursor(self) -> Optional[bytes]:
        """Get the persisted change cursor."""
        self._ensure_loaded()
        return self.cursor_store.cursor

    def check_remote(self) -> list[str]:
        """Probe the remote store by listing its zones."""
        return self.remote.fetch_zones()

    def reset(self) -> None:
        """
        Forget the cursor and cached records; the next pull refetches everything.

        Waits for a running pull to finish. The cursor is cleared before the
        cache, so an interrupted reset still refetches the full history.
        """
        self._ensure_loaded()
        with self.engine.running(), self.lock:
            self.cursor_store.clear()
            self.cache.clear()

# ZoneSync Sync Module
# Core synchronization engine and components

from zonesync.sync.bootstrap import BootstrapCoordinator, BootstrapResult
from zonesync.sync.cache import LocalCache
from zonesync.sync.engine import DeltaSyncEngine, PullResult
from zonesync.sync.history import HistoryEntry, SyncHistory
from zonesync.sync.mutations import MutationGateway
from zonesync.sync.session import InitializeResult, MutationResult, SyncSession
from zonesync.sync.state import CursorStore
from zonesync.sync.trigger import NotificationTrigger, SignalOutcome

__all__ = [
    # State
    "CursorStore",
    # Cache
    "LocalCache",
    # Bootstrap
    "BootstrapCoordinator",
    "BootstrapResult",
    # Engine
    "DeltaSyncEngine",
    "PullResult",
    # Mutations
    "MutationGateway",
    # Trigger
    "NotificationTrigger",
    "SignalOutcome",
    # Session
    "SyncSession",
    "InitializeResult",
    "MutationResult",
    # History
    "SyncHistory",
    "HistoryEntry",
]

"""ZoneSync - incremental state synchronization for a remote record zone.

Keeps a local record cache consistent with an authoritative remote store
by pulling only the changes since the last change token, and writes new
records and deletions remote-first.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "SyncSession",
    "DeltaSyncEngine",
    "PullResult",
    "LocalCache",
    "CursorStore",
    "BootstrapCoordinator",
    "MutationGateway",
    "NotificationTrigger",
    "SignalOutcome",
    "SyncError",
    "TransportError",
    "RecordNotFound",
    "PersistenceError",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("SyncError", "TransportError", "RecordNotFound", "PersistenceError"):
        from zonesync import errors

        return getattr(errors, name)
    if name in (
        "SyncSession",
        "DeltaSyncEngine",
        "PullResult",
        "LocalCache",
        "CursorStore",
        "BootstrapCoordinator",
        "MutationGateway",
        "NotificationTrigger",
        "SignalOutcome",
    ):
        from zonesync import sync

        return getattr(sync, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

# ZoneSync Remote Module
# Remote store contract and implementations

from zonesync.remote.base import Changeset, Record, RecordChange, RemoteStore, Subscription
from zonesync.remote.directory import DirectoryRemoteStore
from zonesync.remote.memory import MemoryRemoteStore

__all__ = [
    # Contract
    "RemoteStore",
    "Record",
    "RecordChange",
    "Changeset",
    "Subscription",
    # Implementations
    "MemoryRemoteStore",
    "DirectoryRemoteStore",
]

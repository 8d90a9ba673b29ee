# ZoneSync Storage Module
# Durable key-value storage used for the cache, cursor and flags

from zonesync.storage.kv import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore

__all__ = [
    "KeyValueStore",
    "FileKeyValueStore",
    "MemoryKeyValueStore",
]

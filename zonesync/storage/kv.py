# ZoneSync Key-Value Storage
# Durable storage of opaque blobs, strings and flags

import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import yaml

from zonesync.errors import PersistenceError
from zonesync.utils.paths import atomic_write

STORE_VERSION = "1.0"


class KeyValueStore(ABC):
    """
    Synchronous, process-local durable storage.

    Values are either bytes, str or bool. Reading a missing key returns
    None (or False for flags).
    """

    @abstractmethod
    def _get(self, key: str) -> Any:
        """Return the raw stored value or None."""

    @abstractmethod
    def _set(self, key: str, value: Any) -> None:
        """Store a raw value, replacing any prior one."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it existed."""

    def get_blob(self, key: str) -> Optional[bytes]:
        value = self._get(key)
        if value is None:
            return None
        if not isinstance(value, bytes):
            raise PersistenceError(f"Value for '{key}' is not a blob", key=key)
        return value

    def set_blob(self, key: str, value: bytes) -> None:
        self._set(key, bytes(value))

    def get_string(self, key: str) -> Optional[str]:
        value = self._get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise PersistenceError(f"Value for '{key}' is not a string", key=key)
        return value

    def set_string(self, key: str, value: str) -> None:
        self._set(key, str(value))

    def get_bool(self, key: str) -> bool:
        return self._get(key) is True

    def set_bool(self, key: str, value: bool) -> None:
        self._set(key, bool(value))


class MemoryKeyValueStore(KeyValueStore):
    """Key-value store held in process memory only."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._values: dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def _get(self, key: str) -> Any:
        with self._lock:
            return self._values.get(key)

    def _set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._values.pop(key, None) is not None

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._values)


class FileKeyValueStore(KeyValueStore):
    """
    Key-value store persisted to a single YAML document.

    Every write rewrites the whole document through an atomic rename, so a
    crash leaves either the previous or the new contents on disk. Blobs are
    stored with the YAML binary tag.
    """

    def __init__(self, path: Path):
        """
        Initialize file store.

        Args:
            path: Path to the YAML document. Created on first write.
        """
        self.path = path
        self._values: Optional[dict[str, Any]] = None
        self._lock = threading.Lock()

    @property
    def values(self) -> dict[str, Any]:
        """Get current values, loading if necessary."""
        if self._values is None:
            self._values = self._load()
        return self._values

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise PersistenceError(f"Cannot read store {self.path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict) or not isinstance(data.get("values", {}), dict):
            raise PersistenceError(f"Store {self.path} is not a valid key-value document")
        return dict(data.get("values") or {})

    def _flush(self, key: str) -> None:
        document = {"version": STORE_VERSION, "values": self.values}
        try:
            content = yaml.safe_dump(document, default_flow_style=False, sort_keys=True, allow_unicode=True)
            atomic_write(self.path, content)
        except (OSError, yaml.YAMLError) as e:
            raise PersistenceError(f"Cannot write store {self.path}: {e}", key=key) from e

    def _get(self, key: str) -> Any:
        with self._lock:
            return self.values.get(key)

    def _set(self, key: str, value: Any) -> None:
        with self._lock:
            previous = self.values.get(key)
            self.values[key] = value
            try:
                self._flush(key)
            except PersistenceError:
                # Keep memory in line with what is on disk
                if previous is None:
                    self.values.pop(key, None)
                else:
                    self.values[key] = previous
                raise

    def delete(self, key: str) -> bool:
        with self._lock:
            if key not in self.values:
                return False
            previous = self.values.pop(key)
            try:
                self._flush(key)
            except PersistenceError:
                self.values[key] = previous
                raise
            return True

    def reload(self) -> None:
        """Drop in-memory values so the next read comes from disk."""
        with self._lock:
            self._values = None

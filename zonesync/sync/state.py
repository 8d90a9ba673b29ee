# ZoneSync Cursor Store
# Durable persistence of the change cursor and bootstrap flags

from typing import Optional

from zonesync.storage.kv import KeyValueStore

CURSOR_KEY = "last_change_token"
ZONE_CREATED_FLAG = "zone_created"
SUBSCRIPTION_CREATED_FLAG = "subscription_created"


class CursorStore:
    """
    Manages sync position persistence.

    Holds the last change cursor issued by the remote store and the
    one-time bootstrap flags. The cursor is opaque and only round-tripped.
    """

    def __init__(self, storage: KeyValueStore, *, namespace: str = ""):
        """
        Initialize cursor store.

        Args:
            storage: Durable key-value storage.
            namespace: Optional key prefix, e.g. the zone name.
        """
        self.storage = storage
        self.namespace = namespace
        self._cursor: Optional[bytes] = None
        self._loaded = False

    def _key(self, name: str) -> str:
        return f"{self.namespace}.{name}" if self.namespace else name

    @property
    def cursor(self) -> Optional[bytes]:
        """Get current cursor, loading if necessary."""
        if not self._loaded:
            return self.load()
        return self._cursor

    def load(self) -> Optional[bytes]:
        """Load cursor from storage. None means full history is needed."""
        self._cursor = self.storage.get_blob(self._key(CURSOR_KEY))
        self._loaded = True
        return self._cursor

    def save(self, cursor: bytes) -> None:
        """Persist cursor, replacing any prior value."""
        self.storage.set_blob(self._key(CURSOR_KEY), cursor)
        self._cursor = cursor
        self._loaded = True

    def clear(self) -> None:
        """Forget the cursor so the next pull fetches full history."""
        self.storage.delete(self._key(CURSOR_KEY))
        self._cursor = None
        self._loaded = True

    def load_flag(self, name: str) -> bool:
        """Load a bootstrap flag. Missing flags read as False."""
        return self.storage.get_bool(self._key(name))

    def save_flag(self, name: str, value: bool = True) -> None:
        """Persist a bootstrap flag."""
        self.storage.set_bool(self._key(name), value)

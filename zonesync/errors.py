# ZoneSync Errors
# Error kinds surfaced by the sync core

from typing import Optional


class SyncError(Exception):
    """Base exception for all sync failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class TransportError(SyncError):
    """
    A remote store call failed.

    Covers network, authentication and quota failures alike. Always
    retryable by re-invoking the same operation.
    """

    def __init__(self, message: str, operation: str = "", cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        super().__init__(message)


class RecordNotFound(SyncError):
    """A delete was requested for a name with no matching cache entry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No record named '{name}' in the local cache")


class PersistenceError(SyncError):
    """Durable local storage could not be read or written."""

    def __init__(self, message: str, key: str = ""):
        self.key = key
        super().__init__(message)

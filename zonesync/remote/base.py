# ZoneSync Remote Store
# Contract for the authoritative remote store and its data types

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Record:
    """A record acknowledged by the remote store."""

    record_id: str
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RecordChange:
    """
    One changed or created record inside a changeset.

    Either ``fields`` is set, or ``error`` describes why this single record
    could not be fetched.
    """

    record_id: str
    fields: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """Check if the record was fetched successfully."""
        return self.error is None and self.fields is not None


@dataclass(frozen=True)
class Changeset:
    """One page of changes returned by a single fetch."""

    cursor: bytes
    changed: list[RecordChange] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    more_pending: bool = False

    @property
    def is_empty(self) -> bool:
        """Check if the page carries no changes."""
        return not self.changed and not self.deleted


@dataclass(frozen=True)
class Subscription:
    """Remote registration delivering a wake signal when a zone changes."""

    subscription_id: str
    zone: str
    wants_content_wake: bool = True


class RemoteStore(ABC):
    """
    Authoritative remote store.

    Every operation raises TransportError when the call fails. Cursors are
    issued and interpreted by the store only.
    """

    @abstractmethod
    def fetch_zones(self) -> list[str]:
        """Return the names of all zones."""

    @abstractmethod
    def create_zone(self, zone: str) -> None:
        """Create a zone. Creating an existing zone succeeds."""

    @abstractmethod
    def fetch_subscription(self, subscription_id: str) -> Optional[Subscription]:
        """Return the subscription with this ID, or None."""

    @abstractmethod
    def create_subscription(self, zone: str, subscription_id: str, wants_content_wake: bool = True) -> None:
        """Register a subscription for every change in ``zone``."""

    @abstractmethod
    def fetch_changes(self, zone: str, cursor: Optional[bytes]) -> Changeset:
        """Return the next page of changes after ``cursor`` (full history for None)."""

    @abstractmethod
    def save(self, zone: str, fields: dict[str, Any]) -> Record:
        """Create a record and return it with its assigned identity."""

    @abstractmethod
    def delete(self, zone: str, record_id: str) -> None:
        """Delete a record by identity."""

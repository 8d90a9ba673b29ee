# ZoneSync Memory Remote Store
# In-process remote store with a change log, tombstones and paging

from __future__ import annotations

import copy
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Optional

from zonesync.errors import TransportError
from zonesync.remote.base import Changeset, Record, RecordChange, RemoteStore, Subscription

CURSOR_PREFIX = b"zs1:"


def empty_state() -> dict[str, Any]:
    """Return the initial remote state document."""
    return {
        "sequence": 0,
        "zones": {},
        "subscriptions": {},
    }


def encode_cursor(zone: str, sequence: int) -> bytes:
    """Encode a zone position as a store-issued cursor."""
    return CURSOR_PREFIX + f"{zone}@{sequence}".encode("utf-8")


def decode_cursor(zone: str, cursor: bytes) -> int:
    """Decode a cursor issued by this store for ``zone``."""
    if not cursor.startswith(CURSOR_PREFIX):
        raise TransportError("Change token was not issued by this store", operation="fetch_changes")

    body = cursor[len(CURSOR_PREFIX) :].decode("utf-8", errors="replace")
    cursor_zone, _, sequence = body.rpartition("@")
    if cursor_zone != zone or not sequence.isdigit():
        raise TransportError(f"Change token does not belong to zone '{zone}'", operation="fetch_changes")
    return int(sequence)


class MemoryRemoteStore(RemoteStore):
    """
    Remote store kept in process memory.

    Every change gets the next value of a store-wide sequence. Deleted
    records leave a tombstone carrying the sequence of the deletion, so a
    fetch from an older cursor reports the deletion.
    """

    def __init__(self, *, page_size: int = 100, state: Optional[dict[str, Any]] = None):
        """
        Initialize memory remote.

        Args:
            page_size: Maximum number of changes returned per fetch.
            state: Optional initial state document.
        """
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = page_size
        self._state = state if state is not None else empty_state()
        self._lock = threading.RLock()

    @contextmanager
    def _transaction(self, *, write: bool) -> Iterator[dict[str, Any]]:
        """Yield the state document for one operation."""
        with self._lock:
            yield self._state

    def _zone(self, state: dict[str, Any], zone: str, operation: str) -> dict[str, Any]:
        zone_state = state["zones"].get(zone)
        if zone_state is None:
            raise TransportError(f"Zone '{zone}' does not exist", operation=operation)
        return zone_state

    def _next_sequence(self, state: dict[str, Any]) -> int:
        state["sequence"] += 1
        return state["sequence"]

    def fetch_zones(self) -> list[str]:
        with self._transaction(write=False) as state:
            return sorted(state["zones"])

    def create_zone(self, zone: str) -> None:
        with self._transaction(write=True) as state:
            state["zones"].setdefault(zone, {"records": {}, "tombstones": {}})

    def fetch_subscription(self, subscription_id: str) -> Optional[Subscription]:
        with self._transaction(write=False) as state:
            data = state["subscriptions"].get(subscription_id)
            if data is None:
                return None
            return Subscription(
                subscription_id=subscription_id,
                zone=data["zone"],
                wants_content_wake=data.get("wants_content_wake", True),
            )

    def create_subscription(self, zone: str, subscription_id: str, wants_content_wake: bool = True) -> None:
        with self._transaction(write=True) as state:
            self._zone(state, zone, "create_subscription")
            state["subscriptions"][subscription_id] = {
                "zone": zone,
                "wants_content_wake": wants_content_wake,
            }

    def fetch_changes(self, zone: str, cursor: Optional[bytes]) -> Changeset:
        with self._transaction(write=False) as state:
            zone_state = self._zone(state, zone, "fetch_changes")
            since = decode_cursor(zone, cursor) if cursor is not None else 0

            # (sequence, kind, record_id) for every change after the cursor
            pending: list[tuple[int, str, str]] = []
            for record_id, data in zone_state["records"].items():
                if data["sequence"] > since:
                    pending.append((data["sequence"], "changed", record_id))
            # A full fetch has nothing to forget
            if cursor is not None:
                for record_id, sequence in zone_state["tombstones"].items():
                    if sequence > since:
                        pending.append((sequence, "deleted", record_id))
            pending.sort()

            page = pending[: self.page_size]
            more_pending = len(pending) > len(page)
            last = page[-1][0] if more_pending else max(since, state["sequence"])

            changed = [
                RecordChange(record_id=record_id, fields=copy.deepcopy(zone_state["records"][record_id]["fields"]))
                for _, kind, record_id in page
                if kind == "changed"
            ]
            deleted = [record_id for _, kind, record_id in page if kind == "deleted"]

            return Changeset(
                cursor=encode_cursor(zone, last),
                changed=changed,
                deleted=deleted,
                more_pending=more_pending,
            )

    def save(self, zone: str, fields: dict[str, Any]) -> Record:
        with self._transaction(write=True) as state:
            zone_state = self._zone(state, zone, "save")
            record_id = uuid.uuid4().hex
            zone_state["records"][record_id] = {
                "fields": copy.deepcopy(fields),
                "sequence": self._next_sequence(state),
            }
            return Record(record_id=record_id, fields=copy.deepcopy(fields))

    def delete(self, zone: str, record_id: str) -> None:
        with self._transaction(write=True) as state:
            zone_state = self._zone(state, zone, "delete")
            if record_id not in zone_state["records"]:
                raise TransportError(f"Record '{record_id}' does not exist", operation="delete")
            del zone_state["records"][record_id]
            zone_state["tombstones"][record_id] = self._next_sequence(state)

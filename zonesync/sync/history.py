# ZoneSync Sync History
# Append-only log of sync operations for later inspection

from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import yaml

from zonesync.utils.paths import atomic_write


@dataclass
class HistoryEntry:
    """One logged operation."""

    operation: str
    success: bool
    timestamp: str = ""  # ISO format datetime
    detail: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryEntry":
        """Create from dictionary."""
        return cls(
            operation=data.get("operation", ""),
            success=bool(data.get("success", False)),
            timestamp=data.get("timestamp", ""),
            detail=dict(data.get("detail") or {}),
        )


class SyncHistory:
    """
    Manages the sync history file.

    Keeps at most ``limit`` entries, newest last. An unreadable history file
    is moved aside to ``<name>.corrupt`` before a new entry is written.
    """

    def __init__(self, path: Path, *, limit: int = 200):
        self.path = path
        self.limit = limit

    @property
    def corrupt_path(self) -> Path:
        """Get path an unreadable history file is moved to."""
        return self.path.with_name(self.path.name + ".corrupt")

    def _load(self) -> list[HistoryEntry]:
        if not self.path.exists():
            return []

        with open(self.path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return []
        if not isinstance(data, list):
            raise yaml.YAMLError(f"History {self.path} is not a list of entries")
        return [HistoryEntry.from_dict(item) for item in data if isinstance(item, dict)]

    def entries(self, count: Optional[int] = None) -> list[HistoryEntry]:
        """Load entries, optionally only the last ``count``."""
        try:
            entries = self._load()
        except yaml.YAMLError:
            return []

        if count is not None:
            entries = entries[-count:] if count > 0 else []
        return entries

    def record(self, operation: str, success: bool, **detail: Any) -> HistoryEntry:
        """Append an entry and save."""
        entry = HistoryEntry(
            operation=operation,
            success=success,
            timestamp=datetime.now().isoformat(timespec="seconds"),
            detail=detail,
        )
        try:
            entries = self._load()
        except yaml.YAMLError:
            self.path.replace(self.corrupt_path)
            entries = []
        entries.append(entry)
        entries = entries[-self.limit :]

        content = yaml.safe_dump(
            [e.to_dict() for e in entries], default_flow_style=False, sort_keys=False, allow_unicode=True
        )
        atomic_write(self.path, content)
        return entry

    def clear(self) -> None:
        """Remove all entries."""
        if self.path.exists():
            self.path.unlink()

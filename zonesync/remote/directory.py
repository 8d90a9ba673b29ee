# ZoneSync Directory Remote Store
# Remote store persisted to a YAML document inside a directory

from __future__ import annotations

import fcntl
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import yaml

from zonesync.errors import TransportError
from zonesync.remote.memory import MemoryRemoteStore, empty_state
from zonesync.utils.paths import atomic_write, ensure_dir

REMOTE_FILE_NAME = "remote.yaml"
LOCK_FILE_NAME = ".lock"


class DirectoryRemoteStore(MemoryRemoteStore):
    """
    Remote store shared through a directory.

    The state document is read before and written after every operation,
    so separate processes pointing at the same directory see one store. An
    exclusive lock on a file in the directory serializes those operations.
    Read and write failures surface as TransportError.
    """

    def __init__(self, path: Path, *, page_size: int = 100):
        """
        Initialize directory remote.

        Args:
            path: Directory holding the remote state document.
            page_size: Maximum number of changes returned per fetch.
        """
        super().__init__(page_size=page_size)
        self.path = path

    @property
    def state_file(self) -> Path:
        """Get path of the state document."""
        return self.path / REMOTE_FILE_NAME

    def _read(self) -> dict[str, Any]:
        if not self.state_file.exists():
            return empty_state()
        try:
            with open(self.state_file, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise TransportError(f"Cannot read remote state {self.state_file}: {e}", cause=e) from e
        if data is None:
            return empty_state()
        state = empty_state()
        state.update(data)
        return state

    def _write(self, state: dict[str, Any]) -> None:
        try:
            content = yaml.safe_dump(state, default_flow_style=False, sort_keys=True, allow_unicode=True)
            atomic_write(self.state_file, content)
        except (OSError, yaml.YAMLError) as e:
            raise TransportError(f"Cannot write remote state {self.state_file}: {e}", cause=e) from e

    @property
    def lock_file(self) -> Path:
        """Get path of the inter-process lock file."""
        return self.path / LOCK_FILE_NAME

    @contextmanager
    def _file_lock(self) -> Iterator[None]:
        try:
            ensure_dir(self.path)
            fd = os.open(str(self.lock_file), os.O_CREAT | os.O_WRONLY)
        except OSError as e:
            raise TransportError(f"Cannot open remote lock {self.lock_file}: {e}", cause=e) from e

        try:
            fcntl.flock(fd, fcntl.LOCK_EX)
        except OSError as e:
            os.close(fd)
            raise TransportError(f"Cannot lock remote {self.lock_file}: {e}", cause=e) from e

        try:
            yield
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
            os.close(fd)

    @contextmanager
    def _transaction(self, *, write: bool) -> Iterator[dict[str, Any]]:
        # One file lock spans read and write across every process sharing the directory
        with self._lock, self._file_lock():
            state = self._read()
            yield state
            if write:
                self._write(state)

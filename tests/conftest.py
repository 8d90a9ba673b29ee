# ZoneSync Test Fixtures
# Pytest fixtures for ZoneSync tests

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
import yaml

from zonesync.remote.directory import DirectoryRemoteStore
from zonesync.remote.memory import MemoryRemoteStore
from zonesync.storage.kv import FileKeyValueStore, MemoryKeyValueStore
from zonesync.sync.session import SyncSession

ZONE = "Contacts"
SUBSCRIPTION_ID = "changes-subscription-id"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def storage() -> MemoryKeyValueStore:
    """In-memory durable storage."""
    return MemoryKeyValueStore()


@pytest.fixture
def file_storage(temp_dir: Path) -> FileKeyValueStore:
    """File-backed durable storage."""
    return FileKeyValueStore(temp_dir / "store.yaml")


@pytest.fixture
def remote() -> MemoryRemoteStore:
    """In-memory remote store with the zone already provisioned."""
    store = MemoryRemoteStore(page_size=100)
    store.create_zone(ZONE)
    return store


@pytest.fixture
def bare_remote() -> MemoryRemoteStore:
    """In-memory remote store without any zone."""
    return MemoryRemoteStore()


@pytest.fixture
def directory_remote(temp_dir: Path) -> DirectoryRemoteStore:
    """Directory-backed remote store."""
    return DirectoryRemoteStore(temp_dir / "remote", page_size=2)


@pytest.fixture
def session(bare_remote: MemoryRemoteStore, storage: MemoryKeyValueStore) -> SyncSession:
    """Session over in-memory collaborators, not yet initialized."""
    return SyncSession(bare_remote, storage, zone=ZONE, subscription_id=SUBSCRIPTION_ID)


@pytest.fixture
def sample_config(temp_dir: Path) -> dict:
    """Create sample configuration dict."""
    return {
        "storage": {"path": str(temp_dir / "device" / "store.yaml")},
        "remote": {"path": str(temp_dir / "remote"), "page_size": 2},
        "zone": {"zone_name": ZONE, "subscription_id": SUBSCRIPTION_ID, "name_field": "name"},
        "output": {
            "verbose": False,
            "colored": False,
            "sync_history": str(temp_dir / "device" / "history.yaml"),
            "history_limit": 50,
        },
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: dict, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a configuration file and point ZONESYNC_CONFIG at it."""
    config_path = temp_dir / "config.yaml"

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(sample_config, f, default_flow_style=False)

    monkeypatch.setenv("ZONESYNC_CONFIG", str(config_path))
    return config_path

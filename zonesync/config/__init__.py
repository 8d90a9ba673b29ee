# ZoneSync Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from zonesync.config.defaults import DEFAULT_CONFIG, generate_default_config
from zonesync.config.loader import (
    ensure_config_exists,
    get_config_path,
    load_config,
    load_or_create_config,
    save_config,
    validate_config_file,
)
from zonesync.config.schema import (
    OutputConfig,
    RemoteConfig,
    StorageConfig,
    ZoneConfig,
    ZonesyncConfig,
)

__all__ = [
    # Schema
    "ZonesyncConfig",
    "StorageConfig",
    "RemoteConfig",
    "ZoneConfig",
    "OutputConfig",
    # Loader
    "load_config",
    "save_config",
    "get_config_path",
    "ensure_config_exists",
    "load_or_create_config",
    "validate_config_file",
    # Defaults
    "DEFAULT_CONFIG",
    "generate_default_config",
]

# ZoneSync Configuration Schema
# Pydantic models for YAML configuration validation

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class StorageConfig(BaseModel):
    """Local durable storage settings."""

    path: str = Field(default="~/.config/zonesync/store.yaml", description="Path to the local state document")

    @field_validator("path")
    @classmethod
    def expand_path(cls, v: str) -> str:
        """Expand ~ in path."""
        return str(Path(v).expanduser())


class RemoteConfig(BaseModel):
    """Remote store settings."""

    path: str = Field(default="~/.config/zonesync/remote", description="Directory of the shared remote store")
    page_size: int = Field(default=100, ge=1, description="Maximum changes returned per fetch")

    @field_validator("path")
    @classmethod
    def expand_path(cls, v: str) -> str:
        """Expand ~ in path."""
        return str(Path(v).expanduser())


class ZoneConfig(BaseModel):
    """Fixed identities of the synced zone and its subscription."""

    zone_name: str = Field(default="Contacts", min_length=1, description="Remote zone holding the records")
    subscription_id: str = Field(
        default="changes-subscription-id", min_length=1, description="Identity of the change subscription"
    )
    name_field: str = Field(default="name", min_length=1, description="Field holding the display value")


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    verbose: bool = Field(default=False, description="Enable verbose output")
    colored: bool = Field(default=True, description="Enable colored output")
    sync_history: str | None = Field(default=None, description="Path to sync history file")
    history_limit: int = Field(default=200, ge=1, description="Maximum entries kept in the sync history")

    @field_validator("sync_history")
    @classmethod
    def expand_optional_paths(cls, v: str | None) -> str | None:
        """Expand ~ in optional paths."""
        if v is None:
            return None
        return str(Path(v).expanduser())


class ZonesyncConfig(BaseModel):
    """Root configuration model for ZoneSync."""

    storage: StorageConfig = Field(default_factory=StorageConfig, description="Local storage settings")
    remote: RemoteConfig = Field(default_factory=RemoteConfig, description="Remote store settings")
    zone: ZoneConfig = Field(default_factory=ZoneConfig, description="Zone and subscription identities")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")

# Ananta Sync Configuration Schema
# Pydantic models for YAML configuration validation

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class ServerConfig(BaseModel):
    """Remote sync API settings."""

    api_url: str = Field(default="http://localhost:8080/api", description="Base URL of the sync API")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    max_retries: int = Field(default=2, ge=0, description="Retries for transient status/pull failures")
    retry_base_delay: float = Field(default=0.5, ge=0, description="Base backoff delay in seconds")
    retry_max_delay: float = Field(default=10.0, ge=0, description="Maximum backoff delay in seconds")

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL."""
        return v.rstrip("/")


class StorageConfig(BaseModel):
    """Durable local store settings."""

    path: str = Field(default="~/.config/ananta-sync/storage.yaml", description="Local store file")

    @field_validator("path")
    @classmethod
    def expand_path(cls, v: str) -> str:
        """Expand ~ in path."""
        return str(Path(v).expanduser())


class CollectorConfig(BaseModel):
    """Local data collection settings."""

    history_days: int = Field(default=30, gt=0, description="How many days of history to collect")
    history_max_results: int = Field(default=500, gt=0, description="Maximum history entries")
    capabilities_file: str | None = Field(
        default=None, description="JSON/YAML snapshot of bookmarks, history and top sites"
    )
    user_agent: str | None = Field(default=None, description="User agent used for the device fingerprint")

    @field_validator("capabilities_file")
    @classmethod
    def expand_optional_path(cls, v: str | None) -> str | None:
        """Expand ~ in optional path."""
        if v is None:
            return None
        return str(Path(v).expanduser())


class AccountConfig(BaseModel):
    """Account partitioning settings."""

    partition_key: str | None = Field(
        default=None, description="Account partition key; defaults to the detected browser brand"
    )


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    verbose: bool = Field(default=False, description="Enable verbose output")
    colored: bool = Field(default=True, description="Enable colored output")
    log_file: str | None = Field(default=None, description="Path to log file")

    @field_validator("log_file")
    @classmethod
    def expand_optional_paths(cls, v: str | None) -> str | None:
        """Expand ~ in optional paths."""
        if v is None:
            return None
        return str(Path(v).expanduser())


class AnantaSyncConfig(BaseModel):
    """Root configuration model for Ananta Sync."""

    server: ServerConfig = Field(default_factory=ServerConfig, description="Sync API settings")
    storage: StorageConfig = Field(default_factory=StorageConfig, description="Local store settings")
    collector: CollectorConfig = Field(default_factory=CollectorConfig, description="Collection settings")
    account: AccountConfig = Field(default_factory=AccountConfig, description="Account settings")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")

# Ananta Sync Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from anantasync.config.defaults import DEFAULT_CONFIG, generate_default_config, get_default_config
from anantasync.config.loader import (
    ensure_config_exists,
    get_config_path,
    load_config,
    save_config,
    validate_config_file,
)
from anantasync.config.schema import (
    AccountConfig,
    AnantaSyncConfig,
    CollectorConfig,
    OutputConfig,
    ServerConfig,
    StorageConfig,
)

__all__ = [
    # Schema
    "AnantaSyncConfig",
    "ServerConfig",
    "StorageConfig",
    "CollectorConfig",
    "AccountConfig",
    "OutputConfig",
    # Loader
    "load_config",
    "save_config",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    # Defaults
    "DEFAULT_CONFIG",
    "get_default_config",
    "generate_default_config",
]

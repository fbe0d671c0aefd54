# Ananta Sync Default Configuration
# Full default configuration as Python dict and YAML generator

import copy
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "server": {
        "api_url": "http://localhost:8080/api",
        "timeout": 30.0,
        "max_retries": 2,
        "retry_base_delay": 0.5,
        "retry_max_delay": 10.0,
    },
    "storage": {
        "path": "~/.config/ananta-sync/storage.yaml",
    },
    "collector": {
        "history_days": 30,
        "history_max_results": 500,
        "capabilities_file": None,
        "user_agent": None,
    },
    "account": {
        "partition_key": None,
    },
    "output": {
        "verbose": False,
        "colored": True,
        "log_file": None,
    },
}


def get_default_config() -> dict[str, Any]:
    """Get a mutable copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def generate_default_config() -> str:
    """Generate default configuration as YAML string with comments."""
    header = """# Ananta Sync Configuration
#
# Reconciles the extension's local state (pinned apps, world clocks, settings)
# and browser snapshots (bookmarks, history, top sites, device info) with the
# account-scoped sync API.
#
# server.api_url:             base URL of the sync API
# collector.capabilities_file: exported browser data (bookmarks/history/topSites)
# account.partition_key:      defaults to the detected browser brand

"""
    return header + yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False, allow_unicode=True)

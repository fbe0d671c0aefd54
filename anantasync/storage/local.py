# Ananta Sync Local Store
# Durable key/value storage for mirrored categories, device id and sync metadata

import copy
import logging
import uuid
from pathlib import Path
from typing import Any, Optional

import yaml

from anantasync.category import DEVICE_ID_KEY
from anantasync.utils.paths import atomic_write

logger = logging.getLogger(__name__)


def get_default_storage_path() -> Path:
    """Get the default location of the local store."""
    return Path.home() / ".config" / "ananta-sync" / "storage.yaml"


class LocalStore:
    """
    Durable key/value store.

    Values are JSON-compatible structures kept in a single YAML document.
    Every mutation is written through with an atomic rename, so a crash
    never leaves a half-written store behind.
    """

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize local store.

        Args:
            path: Path to store file. Defaults to ~/.config/ananta-sync/storage.yaml
        """
        self.path = path or get_default_storage_path()
        self._data: Optional[dict[str, Any]] = None

    @property
    def data(self) -> dict[str, Any]:
        """Get current contents, loading if necessary."""
        if self._data is None:
            self._data = self.load()
        return self._data

    def load(self) -> dict[str, Any]:
        """Load store contents from file; unreadable files load as empty."""
        if not self.path.exists():
            return {}

        try:
            with open(self.path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("local_store_unreadable", extra={"path": str(self.path), "error": str(e)})
            return {}

        if not isinstance(data, dict):
            return {}
        return data

    def save(self) -> None:
        """Write store contents to file."""
        content = yaml.safe_dump(self.data, default_flow_style=False, sort_keys=True, allow_unicode=True)
        atomic_write(self.path, content)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a deep copy of a stored value."""
        if key not in self.data:
            return default
        return copy.deepcopy(self.data[key])

    def set(self, key: str, value: Any) -> None:
        """Replace a stored value wholesale and save."""
        self.data[key] = copy.deepcopy(value)
        self.save()

    def remove(self, key: str) -> bool:
        """Remove a key and save. Returns True if the key existed."""
        if key not in self.data:
            return False
        del self.data[key]
        self.save()
        return True

    def keys(self) -> list[str]:
        """List stored keys."""
        return sorted(self.data.keys())

    def __contains__(self, key: str) -> bool:
        return key in self.data

    def get_device_id(self) -> str:
        """Get the stable per-installation device id, creating it on first use."""
        device_id = self.data.get(DEVICE_ID_KEY)
        if isinstance(device_id, str) and device_id:
            return device_id

        device_id = str(uuid.uuid4())
        self.set(DEVICE_ID_KEY, device_id)
        logger.info("device_id_created", extra={"device_id": device_id})
        return device_id

# Ananta Sync Storage Module
# Durable local key/value store and sync metadata

from anantasync.storage.local import LocalStore, get_default_storage_path
from anantasync.storage.metadata import SyncMetadataEntry, SyncMetadataStore

__all__ = [
    "LocalStore",
    "get_default_storage_path",
    "SyncMetadataEntry",
    "SyncMetadataStore",
]

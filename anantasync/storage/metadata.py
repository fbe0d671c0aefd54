# Ananta Sync Metadata Store
# Per-category (version, checksum) last confirmed with the server

import logging
from dataclasses import asdict, dataclass
from typing import Any, Optional

from anantasync.category import SYNC_META_KEY, Category
from anantasync.storage.local import LocalStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncMetadataEntry:
    """Last state of a category this installation confirmed with the server."""

    version: int
    checksum: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncMetadataEntry":
        """Create from dictionary."""
        return cls(version=int(data["version"]), checksum=str(data["checksum"]))


class SyncMetadataStore:
    """
    Durable record mapping category to its last confirmed (version, checksum).

    The record is a single value in the local store. It remembers the account
    it was confirmed against; reading it under a different account yields an
    empty map so stale versions from another account are never trusted.
    """

    def __init__(self, store: LocalStore, account: Optional[str] = None):
        """
        Initialize metadata store.

        Args:
            store: Durable local store holding the record.
            account: Identity of the signed-in account, if known.
        """
        self.store = store
        self.account = account

    def get(self) -> dict[Category, SyncMetadataEntry]:
        """Load the current metadata map."""
        record = self.store.get(SYNC_META_KEY)
        if not isinstance(record, dict):
            return {}

        owner = record.get("account")
        if owner is not None and self.account is not None and owner != self.account:
            logger.info(
                "sync_metadata_account_mismatch",
                extra={"stored_account": owner, "active_account": self.account},
            )
            return {}

        entries: dict[Category, SyncMetadataEntry] = {}
        for name, data in (record.get("entries") or {}).items():
            try:
                entries[Category(name)] = SyncMetadataEntry.from_dict(data)
            except (ValueError, KeyError, TypeError):
                logger.warning("sync_metadata_entry_skipped", extra={"category": name})
        return entries

    def set(self, entries: dict[Category, SyncMetadataEntry]) -> None:
        """Persist the metadata map, replacing the previous record."""
        record = {
            "account": self.account,
            "entries": {category.value: entry.to_dict() for category, entry in sorted(entries.items())},
        }
        self.store.set(SYNC_META_KEY, record)

    def clear(self) -> bool:
        """Delete the whole record. Returns True if one existed."""
        return self.store.remove(SYNC_META_KEY)

# Ananta Sync Actions
# Decision table classifying each category for a reconciliation pass

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from anantasync.category import Category
from anantasync.storage.metadata import SyncMetadataEntry


class ActionType(str, Enum):
    """What a reconciliation pass does with a category."""

    # No action needed
    UNCHANGED = "unchanged"

    # Network writes and reads
    PUSH = "push"
    PULL = "pull"

    # Server no longer knows the category: drop it locally
    TOMBSTONE = "tombstone"

    # Absent on both sides
    SKIP = "skip"


@dataclass(frozen=True)
class RemoteState:
    """A category as reported by the server's status call."""

    checksum: str
    sync_version: int


@dataclass(frozen=True)
class SyncAction:
    """
    Classification of one category.

    ``base_version`` is only meaningful for pushes: it is the server
    version the push is declared against.
    """

    category: Category
    action_type: ActionType
    base_version: int = 0
    reason: str = ""

    @property
    def direction(self) -> str:
        """Get human-readable direction of action."""
        if self.action_type == ActionType.PUSH:
            return "local → server"
        elif self.action_type == ActionType.PULL:
            return "server → local"
        elif self.action_type == ActionType.TOMBSTONE:
            return "✗ local"
        else:
            return "—"


def determine_action(
    category: Category,
    local_checksum: Optional[str],
    remote: Optional[RemoteState],
    last_known: Optional[SyncMetadataEntry],
) -> SyncAction:
    """
    Determine what to do with a category.

    Args:
        category: The category being classified.
        local_checksum: Checksum of the current local value, None if absent locally.
        remote: Server status for the category, None if the server does not know it.
        last_known: Metadata last confirmed with the server, None if never synced.

    Returns:
        SyncAction describing what to do.
    """
    exists_local = local_checksum is not None
    exists_remote = remote is not None

    # Telemetry: refreshed every run against whatever version the server holds
    if category == Category.DEVICE_INFO:
        if not exists_local:
            return SyncAction(category, ActionType.SKIP, reason="No device fingerprint")
        return SyncAction(
            category,
            ActionType.PUSH,
            base_version=remote.sync_version if remote else 0,
            reason="Telemetry refresh",
        )

    # Server forgot a category we had confirmed: remote deletion
    if not exists_remote and last_known is not None:
        if category.is_mirrored or not exists_local:
            return SyncAction(category, ActionType.TOMBSTONE, reason="Deleted on server")
        return SyncAction(category, ActionType.PUSH, base_version=0, reason="Re-create on server")

    if not exists_local and not exists_remote:
        return SyncAction(category, ActionType.SKIP, reason="Absent locally and on server")

    if exists_local and not exists_remote:
        return SyncAction(category, ActionType.PUSH, base_version=0, reason="New locally")

    if not exists_local:
        # Snapshot categories may be unreadable this run; nothing to pull if
        # the server still holds what was last confirmed
        if (
            not category.is_mirrored
            and last_known is not None
            and last_known.checksum == remote.checksum
        ):
            return SyncAction(
                category, ActionType.UNCHANGED, reason="Not readable locally, server unchanged"
            )
        return SyncAction(category, ActionType.PULL, reason="Only on server")

    if local_checksum == remote.checksum:
        return SyncAction(category, ActionType.UNCHANGED, reason="Content identical")

    local_changed = last_known is None or local_checksum != last_known.checksum
    if local_changed:
        return SyncAction(
            category,
            ActionType.PUSH,
            base_version=remote.sync_version,
            reason="Local changed since last sync",
        )

    return SyncAction(category, ActionType.PULL, reason="Server changed since last sync")

# Ananta Sync Engine
# Reconciles local state with the account-scoped sync server

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import httpx

from anantasync.category import ALL_CATEGORIES, Category, is_valid_payload
from anantasync.collect.capabilities import BrowserCapabilities, load_capabilities
from anantasync.collect.collector import LocalDataCollector
from anantasync.collect.device import DeviceEnvironment
from anantasync.config.schema import AnantaSyncConfig
from anantasync.errors import NetworkOrServerError, SyncInProgress
from anantasync.storage.local import LocalStore
from anantasync.storage.metadata import SyncMetadataEntry, SyncMetadataStore
from anantasync.sync.actions import ActionType, RemoteState, SyncAction, determine_action
from anantasync.sync.client import RemoteSyncClient
from anantasync.sync.item import DataItem, build_items
from anantasync.sync.models import PullEntry, PushItem, PushResult, PushStatus
from anantasync.sync.session import SyncSession
from anantasync.utils.hashing import compute_checksum

logger = logging.getLogger(__name__)


@dataclass
class SyncSummary:
    """Result of a complete reconciliation pass."""

    pushed: list[Category] = field(default_factory=list)
    pulled: list[Category] = field(default_factory=list)
    conflicts: list[Category] = field(default_factory=list)
    unchanged: list[Category] = field(default_factory=list)
    removed: list[Category] = field(default_factory=list)
    telemetry: Optional[PushStatus] = None
    actions: dict[Category, SyncAction] = field(default_factory=dict)

    @property
    def has_changes(self) -> bool:
        """Check if anything was written on either side."""
        return bool(self.pushed or self.pulled or self.conflicts or self.removed)

    @property
    def needs_reload(self) -> bool:
        """Check if local mirrored state was overwritten during the run."""
        return bool(self.pulled or self.conflicts or self.removed)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "pushed": [c.value for c in self.pushed],
            "pulled": [c.value for c in self.pulled],
            "conflicts": [c.value for c in self.conflicts],
            "unchanged": [c.value for c in self.unchanged],
            "removed": [c.value for c in self.removed],
            "telemetry": self.telemetry.value if self.telemetry else None,
        }


@dataclass
class CategoryStatus:
    """Status of one category as seen by a dry status call."""

    category: Category
    local: Optional[DataItem]
    last_known: Optional[SyncMetadataEntry]
    remote: Optional[RemoteState]
    action: SyncAction

    @property
    def exists_local(self) -> bool:
        return self.local is not None


def classify(
    items: dict[Category, DataItem],
    remote: dict[Category, RemoteState],
    known: dict[Category, SyncMetadataEntry],
) -> dict[Category, SyncAction]:
    """Classify every category with the decision table."""
    actions: dict[Category, SyncAction] = {}
    for category in ALL_CATEGORIES:
        item = items.get(category)
        actions[category] = determine_action(
            category=category,
            local_checksum=item.checksum if item else None,
            remote=remote.get(category),
            last_known=known.get(category),
        )
    return actions


def _apply_push_result(
    result: PushResult,
    collector: LocalDataCollector,
    entries: dict[Category, SyncMetadataEntry],
    summary: SyncSummary,
) -> None:
    """Record one push outcome; mirrored conflicts take the server's value."""
    category = result.category
    entries[category] = SyncMetadataEntry(version=result.sync_version, checksum=result.checksum)

    if category == Category.DEVICE_INFO:
        summary.telemetry = result.status
        return

    if result.status in (PushStatus.CREATED, PushStatus.UPDATED):
        summary.pushed.append(category)
    elif result.status == PushStatus.UNCHANGED:
        summary.unchanged.append(category)
    else:
        summary.conflicts.append(category)
        if category.is_mirrored and result.server_payload is not None:
            if is_valid_payload(category, result.server_payload):
                collector.write_mirrored(category, result.server_payload)
            else:
                logger.warning("conflict_payload_rejected", extra={"category": category.value})
        logger.info(
            "sync_conflict",
            extra={"category": category.value, "server_version": result.sync_version},
        )


def _check_pulled(entries: list[PullEntry]) -> None:
    """Reject a pull body whose mirrored payloads do not match their schema."""
    for entry in entries:
        if entry.category.is_mirrored and not is_valid_payload(entry.category, entry.payload):
            raise NetworkOrServerError(f"pull returned a malformed {entry.category.value} payload", operation="pull")


async def reconcile(
    session: SyncSession,
    collector: LocalDataCollector,
    client: RemoteSyncClient,
    metadata: SyncMetadataStore,
) -> SyncSummary:
    """
    Run one reconciliation pass.

    Issues exactly one status call, at most one push and at most one pull,
    whatever the number of categories needing work. A status or pull call
    may resend its GET on transient failure; a push is never resent.
    Metadata is persisted after each phase completes, so a failure leaves
    it consistent with the phases that finished.

    Args:
        session: Per-run context (token, device id, partition key, cancellation).
        collector: Reads and writes local state.
        client: Open sync API client.
        metadata: Durable (version, checksum) record.

    Returns:
        SyncSummary of what was pushed, pulled, conflicted, unchanged and removed.

    Raises:
        NetworkOrServerError: If a round trip fails; later phases are skipped.
        SyncCancelled: If the session is cancelled before a network call.
    """
    summary = SyncSummary()

    # Snapshot
    items = build_items(await collector.collect())
    known = metadata.get()
    entries = dict(known)
    session.raise_if_cancelled()

    # Status call
    statuses = await client.status(session.partition_key, ALL_CATEGORIES, cancel=session.cancel)
    remote = {s.category: RemoteState(checksum=s.checksum, sync_version=s.sync_version) for s in statuses}

    # Classification
    actions = classify(items, remote, known)
    summary.actions = actions
    for category, action in actions.items():
        if action.action_type == ActionType.UNCHANGED:
            state = remote[category]
            entries[category] = SyncMetadataEntry(version=state.sync_version, checksum=state.checksum)
            summary.unchanged.append(category)
    if entries != known:
        metadata.set(entries)

    logger.info(
        "sync_classified",
        extra={"actions": {c.value: a.action_type.value for c, a in actions.items()}},
    )

    # Push phase
    to_push = [
        PushItem(
            category=category,
            payload=items[category].payload,
            checksum=items[category].checksum,
            base_version=action.base_version,
        )
        for category, action in actions.items()
        if action.action_type == ActionType.PUSH
    ]
    pushed_now = {item.category for item in to_push}
    if to_push:
        results = await client.push(session.partition_key, session.device_id, to_push, cancel=session.cancel)
        for result in results:
            if result.category not in pushed_now:
                logger.warning("push_result_unexpected", extra={"category": result.category.value})
                continue
            _apply_push_result(result, collector, entries, summary)
        metadata.set(entries)

    # Pull phase
    to_pull = [
        category
        for category, action in actions.items()
        if action.action_type == ActionType.PULL and category not in pushed_now
    ]
    if to_pull:
        pulled = await client.pull(session.partition_key, to_pull, cancel=session.cancel)
        _check_pulled(pulled)
        for entry in pulled:
            if entry.category not in to_pull:
                logger.warning("pull_entry_unexpected", extra={"category": entry.category.value})
                continue
            if entry.category.is_mirrored:
                collector.write_mirrored(entry.category, entry.payload)
            entries[entry.category] = SyncMetadataEntry(
                version=entry.sync_version, checksum=compute_checksum(entry.payload)
            )
            summary.pulled.append(entry.category)
        metadata.set(entries)

    # Tombstone sweep
    for category, action in actions.items():
        if action.action_type != ActionType.TOMBSTONE:
            continue
        if category.is_mirrored:
            collector.clear_mirrored(category)
        entries.pop(category, None)
        summary.removed.append(category)

    # Persist
    metadata.set(entries)

    logger.info("sync_completed", extra=summary.to_dict())
    return summary


class SyncEngine:
    """
    Main synchronization engine.

    Owns the local store and the collaborators needed to build a session,
    a collector and a client for each run.
    """

    def __init__(
        self,
        config: AnantaSyncConfig,
        store: Optional[LocalStore] = None,
        *,
        capabilities: Optional[BrowserCapabilities] = None,
        environment: Optional[DeviceEnvironment] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize sync engine.

        Args:
            config: Ananta Sync configuration.
            store: Optional local store (opened from config if not provided).
            capabilities: Browser capabilities (loaded from collector.capabilities_file if not provided).
            environment: Host facts for the device fingerprint.
            transport: Optional httpx transport for the sync API.
            clock: Returns the current time in seconds.
        """
        self.config = config
        self.store = store or LocalStore(Path(config.storage.path))
        if capabilities is None and config.collector.capabilities_file:
            capabilities = load_capabilities(Path(config.collector.capabilities_file))
        self.environment = environment or DeviceEnvironment.from_host(config.collector.user_agent)
        self.collector = LocalDataCollector(
            self.store,
            capabilities,
            self.environment,
            history_days=config.collector.history_days,
            history_max_results=config.collector.history_max_results,
            clock=clock,
        )
        self.transport = transport
        self._running = False

    @property
    def running(self) -> bool:
        """Check if a sync run is in flight."""
        return self._running

    def open_session(self, *, token: Optional[str] = None, cancel: Optional[asyncio.Event] = None) -> SyncSession:
        """Build the per-run session; raises AuthenticationRequired without a token."""
        return SyncSession.open(
            self.store,
            token=token,
            partition_key=self.config.account.partition_key,
            user_agent=self.environment.user_agent,
            cancel=cancel,
        )

    def create_client(self, session: SyncSession) -> RemoteSyncClient:
        """Create an API client bound to the session's token."""
        server = self.config.server
        return RemoteSyncClient(
            server.api_url,
            session.token,
            server.timeout,
            max_retries=server.max_retries,
            retry_base_delay=server.retry_base_delay,
            retry_max_delay=server.retry_max_delay,
            transport=self.transport,
        )

    async def smart_sync(
        self,
        *,
        token: Optional[str] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> SyncSummary:
        """
        Reconcile every category with the server.

        Args:
            token: Bearer token; read from the stored auth record when omitted.
            cancel: Event that stops the run before its next network call.

        Returns:
            SyncSummary with details of what was done.

        Raises:
            SyncInProgress: If a run is already in flight on this engine.
            AuthenticationRequired: If no token is available.
            NetworkOrServerError: If a round trip fails.
        """
        if self._running:
            raise SyncInProgress("A sync run is already in progress")

        self._running = True
        try:
            session = self.open_session(token=token, cancel=cancel)
            metadata = SyncMetadataStore(self.store, session.account)
            async with self.create_client(session) as client:
                return await reconcile(session, self.collector, client, metadata)
        finally:
            self._running = False

    async def get_status(self, *, token: Optional[str] = None) -> dict[Category, CategoryStatus]:
        """
        Ask the server for its status and classify every category without writing anything.

        Returns:
            Dict of category to status.
        """
        session = self.open_session(token=token)
        items = build_items(await self.collector.collect())
        known = SyncMetadataStore(self.store, session.account).get()

        async with self.create_client(session) as client:
            statuses = await client.status(session.partition_key, ALL_CATEGORIES, cancel=session.cancel)
        remote = {s.category: RemoteState(checksum=s.checksum, sync_version=s.sync_version) for s in statuses}

        actions = classify(items, remote, known)
        return {
            category: CategoryStatus(
                category=category,
                local=items.get(category),
                last_known=known.get(category),
                remote=remote.get(category),
                action=actions[category],
            )
            for category in ALL_CATEGORIES
        }

    def reset_state(self) -> bool:
        """
        Forget every confirmed (version, checksum).

        Returns:
            True if a metadata record existed.
        """
        return SyncMetadataStore(self.store).clear()

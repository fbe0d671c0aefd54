# Ananta Sync Local Data Collector
# Gathers the current value of every category from storage and browser capabilities

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any, Optional

from pydantic import ValidationError

from anantasync.category import (
    MIRRORED_CATEGORIES,
    Category,
    dump_payload,
    normalize_payload,
    parse_payload,
)
from anantasync.collect.capabilities import BrowserCapabilities
from anantasync.collect.device import DeviceEnvironment, compute_fingerprint
from anantasync.errors import LocalReadFailure
from anantasync.storage.local import LocalStore

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_DAYS = 30
DEFAULT_HISTORY_MAX_RESULTS = 500
_DAY_MS = 24 * 60 * 60 * 1000


def flatten_bookmark_tree(nodes: list[dict[str, Any]], path: str = "") -> list[dict[str, Any]]:
    """
    Flatten a bookmark tree depth-first into its leaves.

    Args:
        nodes: Tree nodes; folders carry ``children``, leaves carry ``url``.
        path: Slash-joined titles of the ancestor folders.

    Returns:
        List of ``{title, url, createdAt, folderPath}`` dicts in tree order.
    """
    bookmarks: list[dict[str, Any]] = []
    for node in nodes:
        title = node.get("title") or ""
        if node.get("url"):
            date_added = node.get("dateAdded")
            bookmarks.append(
                {
                    "title": title,
                    "url": node["url"],
                    "createdAt": int(date_added) if date_added is not None else None,
                    "folderPath": path,
                }
            )
        children = node.get("children")
        if children:
            child_path = f"{path}/{title}" if path else title
            bookmarks.extend(flatten_bookmark_tree(children, child_path))
    return bookmarks


class LocalDataCollector:
    """
    Collects the current payload of every category.

    Each reader is failure-tolerant: a malformed stored value or an
    unavailable capability leaves that category out of the snapshot and
    never aborts collection of the others.
    """

    def __init__(
        self,
        store: LocalStore,
        capabilities: Optional[BrowserCapabilities] = None,
        environment: Optional[DeviceEnvironment] = None,
        *,
        history_days: int = DEFAULT_HISTORY_DAYS,
        history_max_results: int = DEFAULT_HISTORY_MAX_RESULTS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize collector.

        Args:
            store: Durable local store holding the mirrored categories.
            capabilities: Browser capability sources (all unavailable if omitted).
            environment: Host facts for the device fingerprint.
            history_days: How far back to query history.
            history_max_results: Maximum history entries to keep.
            clock: Returns the current time in seconds.
        """
        self.store = store
        self.capabilities = capabilities or BrowserCapabilities()
        self.environment = environment or DeviceEnvironment.from_host()
        self.history_days = history_days
        self.history_max_results = history_max_results
        self.clock = clock

    # Mirrored categories

    def read_mirrored(self, category: Category) -> Any:
        """
        Read one mirrored category from local storage.

        The value is validated but returned exactly as stored, so its
        checksum matches the one recorded when it was written.

        Raises:
            LocalReadFailure: If the stored value does not match the category schema.
        """
        raw = self.store.get(category.storage_key)
        if raw is None:
            return None
        try:
            parse_payload(category, raw)
        except ValidationError as e:
            raise LocalReadFailure(category.value, f"{e.error_count()} schema errors") from e
        return raw

    def read_all_mirrored(self) -> dict[Category, Any]:
        """Read every mirrored category, skipping malformed ones."""
        values: dict[Category, Any] = {}
        for category in sorted(MIRRORED_CATEGORIES):
            try:
                value = self.read_mirrored(category)
            except LocalReadFailure as e:
                logger.warning("local_read_failed", extra={"category": e.category, "reason": e.reason})
                continue
            if value is not None:
                values[category] = value
        return values

    def write_mirrored(self, category: Category, payload: Any) -> None:
        """Replace a mirrored category's stored value wholesale."""
        if not category.is_mirrored:
            raise ValueError(f"Category is not mirrored locally: {category.value}")
        self.store.set(category.storage_key, payload)

    def clear_mirrored(self, category: Category) -> bool:
        """Remove a mirrored category from local storage."""
        if not category.is_mirrored:
            raise ValueError(f"Category is not mirrored locally: {category.value}")
        return self.store.remove(category.storage_key)

    # Browser capabilities

    async def collect_bookmarks(self) -> Optional[list[dict[str, Any]]]:
        source = self.capabilities.bookmarks
        if source is None:
            return None
        tree = await source.get_tree()
        return normalize_payload(Category.BOOKMARKS, flatten_bookmark_tree(tree))

    async def collect_history(self) -> Optional[list[dict[str, Any]]]:
        source = self.capabilities.history
        if source is None:
            return None
        start_time = self.clock() * 1000 - self.history_days * _DAY_MS
        results = await source.search(text="", start_time=start_time, max_results=self.history_max_results)
        history = [
            {
                "title": item.get("title") or "",
                "url": item["url"],
                "lastVisitTime": item.get("lastVisitTime"),
                "visitCount": item.get("visitCount") or 0,
            }
            for item in results[: self.history_max_results]
        ]
        return normalize_payload(Category.HISTORY, history)

    async def collect_top_sites(self) -> Optional[list[dict[str, Any]]]:
        source = self.capabilities.top_sites
        if source is None:
            return None
        sites = await source.get()
        return normalize_payload(Category.TOP_SITES, [{"title": s.get("title") or "", "url": s["url"]} for s in sites])

    async def collect_device_info(self) -> dict[str, Any]:
        return dump_payload(Category.DEVICE_INFO, compute_fingerprint(self.environment))

    async def _guarded(self, category: Category, reader: Callable[[], Any]) -> Any:
        """Run one capability reader, turning any failure into an absent category."""
        try:
            return await reader()
        except Exception as e:
            logger.warning(
                "capability_read_failed",
                extra={"category": category.value, "error": f"{type(e).__name__}: {e}"},
            )
            return None

    async def collect(self) -> dict[Category, Any]:
        """
        Collect the current payload of every available category.

        Mirrored categories are read from storage; the read-only capability
        readers and the fingerprint run concurrently.

        Returns:
            Map of category to JSON-ready payload; absent categories are omitted.
        """
        snapshot = self.read_all_mirrored()

        readers = {
            Category.BOOKMARKS: self.collect_bookmarks,
            Category.HISTORY: self.collect_history,
            Category.TOP_SITES: self.collect_top_sites,
            Category.DEVICE_INFO: self.collect_device_info,
        }
        results = await asyncio.gather(*(self._guarded(category, reader) for category, reader in readers.items()))

        for category, value in zip(readers, results):
            if value is not None:
                snapshot[category] = value

        logger.debug("local_snapshot_collected", extra={"categories": [c.value for c in snapshot]})
        return snapshot

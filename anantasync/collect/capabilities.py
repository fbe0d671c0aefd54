# Ananta Sync Browser Capabilities
# Read-only bookmark, history and top-sites sources consumed by the collector

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Protocol

import yaml

from anantasync.errors import LocalReadFailure

logger = logging.getLogger(__name__)


class BookmarkSource(Protocol):
    """Reports the full bookmark tree."""

    async def get_tree(self) -> list[dict[str, Any]]: ...


class HistorySource(Protocol):
    """Searches browsing history."""

    async def search(self, *, text: str, start_time: float, max_results: int) -> list[dict[str, Any]]: ...


class TopSitesSource(Protocol):
    """Reports the most visited sites."""

    async def get(self) -> list[dict[str, Any]]: ...


@dataclass
class BrowserCapabilities:
    """
    The browser capability surface available to this run.

    A capability left as None is unavailable; its category is reported
    absent rather than failing the run.
    """

    bookmarks: Optional[BookmarkSource] = None
    history: Optional[HistorySource] = None
    top_sites: Optional[TopSitesSource] = None


class SnapshotCapabilities:
    """
    Capability sources backed by already-exported data.

    The snapshot holds what the browser APIs would report: a bookmark tree
    (``bookmarks``), raw history items (``history``) and top sites
    (``topSites``). A key missing from the snapshot marks that capability
    as unavailable.
    """

    def __init__(self, data: dict[str, Any]):
        self.data = data

    @classmethod
    def from_file(cls, path: Path) -> "SnapshotCapabilities":
        """Load a JSON or YAML snapshot file."""
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Capability snapshot must be a mapping: {path}")
        return cls(data)

    async def get_tree(self) -> list[dict[str, Any]]:
        return list(self.data["bookmarks"])

    async def search(self, *, text: str, start_time: float, max_results: int) -> list[dict[str, Any]]:
        results = []
        for item in self.data["history"]:
            if (item.get("lastVisitTime") or 0) < start_time:
                continue
            if text and text.lower() not in f"{item.get('title', '')} {item.get('url', '')}".lower():
                continue
            results.append(item)
        results.sort(key=lambda item: item.get("lastVisitTime") or 0, reverse=True)
        return results[:max_results]

    async def get(self) -> list[dict[str, Any]]:
        return list(self.data["topSites"])

    def as_capabilities(self) -> BrowserCapabilities:
        """Expose the sources present in the snapshot."""
        return BrowserCapabilities(
            bookmarks=self if "bookmarks" in self.data else None,
            history=self if "history" in self.data else None,
            top_sites=self if "topSites" in self.data else None,
        )


def load_capabilities(path: Path) -> BrowserCapabilities:
    """
    Load a capability snapshot, degrading to no capabilities on failure.

    A missing, unparsable or non-mapping snapshot leaves bookmarks, history
    and top sites unavailable for the run instead of aborting it.

    Args:
        path: JSON or YAML snapshot file.

    Returns:
        The capabilities present in the snapshot.
    """
    try:
        return SnapshotCapabilities.from_file(path).as_capabilities()
    except (OSError, ValueError, yaml.YAMLError) as e:
        failure = LocalReadFailure("capability snapshot", f"{type(e).__name__}: {e}")
        logger.warning("capability_snapshot_unreadable", extra={"path": str(path), "reason": failure.reason})
        return BrowserCapabilities()

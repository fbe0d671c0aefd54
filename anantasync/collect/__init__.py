# Ananta Sync Collection Module
# Local data collection from storage, browser capabilities and the host device

from anantasync.collect.capabilities import (
    BookmarkSource,
    BrowserCapabilities,
    HistorySource,
    SnapshotCapabilities,
    TopSitesSource,
)
from anantasync.collect.collector import LocalDataCollector, flatten_bookmark_tree
from anantasync.collect.device import DeviceEnvironment, compute_fingerprint

__all__ = [
    # Capabilities
    "BookmarkSource",
    "HistorySource",
    "TopSitesSource",
    "BrowserCapabilities",
    "SnapshotCapabilities",
    # Device
    "DeviceEnvironment",
    "compute_fingerprint",
    # Collector
    "LocalDataCollector",
    "flatten_bookmark_tree",
]

"""Ananta Sync - account-scoped data synchronization for the Ananta extension.

Reconciles pinned apps, world clocks and settings with the sync server in
both directions, and uploads bookmark, history, top-sites and device
snapshots, using checksums and optimistic version numbers.
"""

__version__ = "1.0.0"
__author__ = "Ananta"
__email__ = "dev@ananta.app"

__all__ = [
    "__version__",
    "Category",
    "LocalStore",
    "SyncMetadataStore",
    "LocalDataCollector",
    "SyncEngine",
    "SyncSummary",
    "SyncAction",
    "ActionType",
    "compute_checksum",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name == "Category":
        from anantasync.category import Category

        return Category
    if name == "compute_checksum":
        from anantasync.utils.hashing import compute_checksum

        return compute_checksum
    if name in ("LocalStore", "SyncMetadataStore"):
        from anantasync import storage

        return getattr(storage, name)
    if name == "LocalDataCollector":
        from anantasync.collect.collector import LocalDataCollector

        return LocalDataCollector
    if name in ("SyncEngine", "SyncSummary"):
        from anantasync.sync import engine

        return getattr(engine, name)
    if name in ("SyncAction", "ActionType"):
        from anantasync.sync import actions

        return getattr(actions, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

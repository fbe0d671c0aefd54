# Ananta Sync Sync Module
# Core reconciliation engine and components

from anantasync.sync.actions import ActionType, RemoteState, SyncAction, determine_action
from anantasync.sync.client import RemoteSyncClient
from anantasync.sync.engine import CategoryStatus, SyncEngine, SyncSummary, classify, reconcile
from anantasync.sync.item import DataItem, build_items
from anantasync.sync.models import PullEntry, PushItem, PushResult, PushStatus, StatusEntry
from anantasync.sync.session import SyncSession

__all__ = [
    # Item
    "DataItem",
    "build_items",
    # Actions
    "ActionType",
    "RemoteState",
    "SyncAction",
    "determine_action",
    # Wire
    "StatusEntry",
    "PushItem",
    "PushResult",
    "PushStatus",
    "PullEntry",
    "RemoteSyncClient",
    # Session
    "SyncSession",
    # Engine
    "CategoryStatus",
    "SyncEngine",
    "SyncSummary",
    "classify",
    "reconcile",
]

# Ananta Sync Utilities Module
# Helper functions for hashing, file writes and platform detection

from anantasync.utils.hashing import (
    canonical_json,
    compute_checksum,
    content_hash,
)
from anantasync.utils.paths import (
    atomic_write,
    ensure_dir,
)
from anantasync.utils.platform import (
    detect_browser,
    detect_browser_version,
    detect_os,
    get_current_platform,
)

__all__ = [
    # Platform
    "get_current_platform",
    "detect_os",
    "detect_browser",
    "detect_browser_version",
    # Paths
    "ensure_dir",
    "atomic_write",
    # Hashing
    "content_hash",
    "canonical_json",
    "compute_checksum",
]

# Ananta Sync Errors
# Exception hierarchy for the synchronization engine


class SyncError(Exception):
    """Base exception for sync engine errors."""


class AuthenticationRequired(SyncError):
    """No valid bearer token is available; raised before any network access."""

    def __init__(self, message: str = "Not authenticated: sign in before syncing") -> None:
        super().__init__(message)


class NetworkOrServerError(SyncError):
    """A status, push or pull round trip failed or returned a malformed body."""

    def __init__(self, message: str, status_code: int | None = None, operation: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.operation = operation


class LocalReadFailure(SyncError):
    """Stored content or a browser capability for one category could not be read."""

    def __init__(self, category: str, reason: str) -> None:
        super().__init__(f"Cannot read {category}: {reason}")
        self.category = category
        self.reason = reason


class SyncCancelled(SyncError):
    """The caller cancelled the run before the next network call."""


class SyncInProgress(SyncError):
    """Another sync run is already active on this engine."""

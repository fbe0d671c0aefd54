# Ananta Sync Session
# Explicit per-run context threaded through every sync operation

import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional

from anantasync.category import AUTH_KEY
from anantasync.errors import AuthenticationRequired, SyncCancelled
from anantasync.storage.local import LocalStore
from anantasync.utils.platform import detect_browser


def read_auth(store: LocalStore) -> Optional[dict[str, Any]]:
    """Read the auth record written by the authentication subsystem."""
    auth = store.get(AUTH_KEY)
    if isinstance(auth, dict) and auth.get("accessToken"):
        return auth
    return None


def _account_of(auth: Optional[dict[str, Any]]) -> Optional[str]:
    user = (auth or {}).get("user")
    if isinstance(user, dict):
        account = user.get("id") or user.get("email")
        return str(account) if account else None
    return None


@dataclass
class SyncSession:
    """
    Everything one sync run needs to know about who is syncing.

    A session is built per call and never shared between runs, so two
    engines can run side by side in the same process.
    """

    token: str
    device_id: str
    partition_key: str
    account: Optional[str] = None
    cancel: asyncio.Event = field(default_factory=asyncio.Event)

    @classmethod
    def open(
        cls,
        store: LocalStore,
        *,
        token: Optional[str] = None,
        partition_key: Optional[str] = None,
        user_agent: str = "",
        cancel: Optional[asyncio.Event] = None,
    ) -> "SyncSession":
        """
        Build a session from an explicit token or the stored auth record.

        Args:
            store: Local store holding the auth record and device id.
            token: Bearer token; read from the auth record when omitted.
            partition_key: Account partition key; defaults to the browser brand.
            user_agent: User agent used to detect the browser brand.
            cancel: Event that, once set, stops the run before its next network call.

        Raises:
            AuthenticationRequired: If no token is available.
        """
        auth = read_auth(store)
        token = token or (auth or {}).get("accessToken")
        if not token:
            raise AuthenticationRequired()

        return cls(
            token=token,
            device_id=store.get_device_id(),
            partition_key=partition_key or detect_browser(user_agent),
            account=_account_of(auth),
            cancel=cancel or asyncio.Event(),
        )

    @property
    def cancelled(self) -> bool:
        return self.cancel.is_set()

    def raise_if_cancelled(self) -> None:
        """Stop the run if the caller asked for cancellation."""
        if self.cancelled:
            raise SyncCancelled("Sync cancelled")

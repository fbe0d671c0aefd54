"""Remote sync API client."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from anantasync.errors import AuthenticationRequired, NetworkOrServerError, SyncCancelled
from anantasync.sync.models import (
    PullEntry,
    PullResponse,
    PushItem,
    PushRequest,
    PushResult,
    PushResponse,
    StatusEntry,
    StatusResponse,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable
    from typing import Self

    from anantasync.category import Category

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

# HTTP status codes that should trigger a retry
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}

# Default retry configuration
DEFAULT_MAX_RETRIES = 2
DEFAULT_BASE_DELAY = 0.5  # seconds
DEFAULT_MAX_DELAY = 10.0  # seconds
DEFAULT_JITTER = 0.1  # 10% jitter

STATUS_PATH = "/ananta/sync/status"
PUSH_PATH = "/ananta/sync/push"
PULL_PATH = "/ananta/sync/pull"


def _is_retryable_error(exc: Exception) -> bool:
    """Check if an exception is retryable."""
    if isinstance(exc, NetworkOrServerError):
        return exc.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, (httpx.ConnectError, httpx.TimeoutException))


def _calculate_delay(attempt: int, base_delay: float, max_delay: float, jitter: float) -> float:
    """Calculate delay with exponential backoff and jitter.

    Args:
        attempt: Current attempt number (0-indexed)
        base_delay: Base delay in seconds
        max_delay: Maximum delay in seconds
        jitter: Jitter factor (0.1 = 10% random variation)

    Returns:
        Delay in seconds
    """
    delay = min(base_delay * (2**attempt), max_delay)
    return delay + delay * jitter * random.random()


async def retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    *,
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    jitter: float = DEFAULT_JITTER,
    operation_name: str = "operation",
) -> T:
    """Execute an async function with exponential backoff retry.

    Non-retryable errors propagate immediately; retryable ones propagate
    once the retry budget is spent.
    """
    for attempt in range(max_retries + 1):
        try:
            return await func()
        except Exception as e:
            if not _is_retryable_error(e) or attempt == max_retries:
                raise

            delay = _calculate_delay(attempt, base_delay, max_delay, jitter)
            logger.warning(
                "sync_retry_attempt",
                extra={
                    "operation": operation_name,
                    "attempt": attempt + 1,
                    "max_retries": max_retries,
                    "delay_seconds": round(delay, 2),
                    "error": str(e),
                },
            )
            await asyncio.sleep(delay)

    # Should not reach here, but type checker needs this
    raise NetworkOrServerError(f"{operation_name} failed", operation=operation_name)


def _unwrap(body: Any) -> Any:
    """Strip the optional top-level ``data`` envelope."""
    if isinstance(body, dict) and "data" in body and isinstance(body["data"], dict):
        return body["data"]
    return body


class RemoteSyncClient:
    """Authenticated async client for the account-scoped sync API."""

    def __init__(
        self,
        api_url: str,
        token: str | None,
        timeout: float = 30.0,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_base_delay: float = DEFAULT_BASE_DELAY,
        retry_max_delay: float = DEFAULT_MAX_DELAY,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize sync client.

        Args:
            api_url: Base URL of the API (e.g., http://localhost:8080/api)
            token: Bearer token issued by the authentication subsystem
            timeout: Request timeout in seconds
            max_retries: Retry attempts for transient failures of status and pull
            retry_base_delay: Base delay between retries in seconds
            retry_max_delay: Maximum delay between retries in seconds
            transport: Optional httpx transport (used to plug in test servers)
        """
        self.api_url = api_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.retry_max_delay = retry_max_delay
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Self:
        """Enter async context."""
        if not self.token:
            raise AuthenticationRequired()
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            headers={
                "Authorization": f"Bearer {self.token}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        """Exit async context."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client."""
        if not self.token:
            raise AuthenticationRequired()
        if self._client is None:
            raise RuntimeError("Client not initialized. Use async context manager.")
        return self._client

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        model: type[M],
        *,
        cancel: asyncio.Event | None = None,
        **kwargs: Any,
    ) -> M:
        """Send one request and validate the response body against ``model``."""
        if cancel is not None and cancel.is_set():
            raise SyncCancelled(f"Sync cancelled before {operation}")

        client = self.client
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            if _is_retryable_error(e):
                raise
            raise NetworkOrServerError(f"{operation} failed: {e}", operation=operation) from e

        if not response.is_success:
            message = f"{operation} failed with HTTP {response.status_code}"
            try:
                detail = response.json().get("message")
            except (ValueError, AttributeError):
                detail = None
            if detail:
                message = f"{message}: {detail}"
            raise NetworkOrServerError(message, status_code=response.status_code, operation=operation)

        try:
            return model.model_validate(_unwrap(response.json()))
        except (ValueError, ValidationError) as e:
            raise NetworkOrServerError(
                f"{operation} returned a malformed body", status_code=response.status_code, operation=operation
            ) from e

    async def _with_retry(self, func: Callable[[], Awaitable[T]], operation_name: str) -> T:
        try:
            return await retry_with_backoff(
                func,
                max_retries=self.max_retries,
                base_delay=self.retry_base_delay,
                max_delay=self.retry_max_delay,
                operation_name=operation_name,
            )
        except httpx.HTTPError as e:
            raise NetworkOrServerError(f"{operation_name} failed: {e}", operation=operation_name) from e

    async def status(
        self,
        partition_key: str,
        categories: Iterable[Category],
        *,
        cancel: asyncio.Event | None = None,
    ) -> list[StatusEntry]:
        """Get the server's checksum and version for each known category.

        Categories missing from the result are not yet known to the server.
        This is one logical call: a transient failure resends the identical
        GET up to ``max_retries`` times, and nothing else is requested.
        """
        params = {"accountPartitionKey": partition_key, "categories": ",".join(c.value for c in categories)}

        async def _fetch() -> StatusResponse:
            return await self._request("status", "GET", STATUS_PATH, StatusResponse, params=params, cancel=cancel)

        response = await self._with_retry(_fetch, "status")
        return response.items

    async def push(
        self,
        partition_key: str,
        device_id: str,
        items: list[PushItem],
        *,
        cancel: asyncio.Event | None = None,
    ) -> list[PushResult]:
        """Offer whole category values to the server in one batch.

        Never retried: a replayed push could be judged against a version it
        already advanced.
        """
        body = PushRequest(account_partition_key=partition_key, device_id=device_id, items=items)
        try:
            response = await self._request(
                "push",
                "POST",
                PUSH_PATH,
                PushResponse,
                json=body.model_dump(mode="json", by_alias=True),
                cancel=cancel,
            )
        except httpx.HTTPError as e:
            raise NetworkOrServerError(f"push failed: {e}", operation="push") from e
        return response.results

    async def pull(
        self,
        partition_key: str,
        categories: Iterable[Category],
        *,
        cancel: asyncio.Event | None = None,
    ) -> list[PullEntry]:
        """Download the server's current value for each requested category.

        Retried like ``status``: the same GET is resent on transient failure.
        """
        params = {"accountPartitionKey": partition_key, "categories": ",".join(c.value for c in categories)}

        async def _fetch() -> PullResponse:
            return await self._request("pull", "GET", PULL_PATH, PullResponse, params=params, cancel=cancel)

        response = await self._with_retry(_fetch, "pull")
        return response.items

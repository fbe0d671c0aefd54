# Tests for anantasync.sync.client
# HTTP round trips, error mapping and retries

import asyncio
import json

import httpx
import pytest

from anantasync.category import Category
from anantasync.errors import AuthenticationRequired, NetworkOrServerError, SyncCancelled
from anantasync.sync.client import RemoteSyncClient, _calculate_delay, retry_with_backoff
from anantasync.sync.models import PushItem, PushStatus

from conftest import API_URL, TOKEN


def make_client(handler, **kwargs) -> RemoteSyncClient:
    kwargs.setdefault("retry_base_delay", 0)
    kwargs.setdefault("retry_max_delay", 0)
    return RemoteSyncClient(API_URL, TOKEN, transport=httpx.MockTransport(handler), **kwargs)


class TestStatus:
    """Tests for RemoteSyncClient.status."""

    @pytest.mark.asyncio
    async def test_request_shape(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"items": [{"category": "settings", "checksum": "abc", "syncVersion": 3}]})

        async with make_client(handler) as client:
            entries = await client.status("chrome", [Category.SETTINGS, Category.HISTORY])

        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/api/ananta/sync/status"
        assert request.url.params["accountPartitionKey"] == "chrome"
        assert request.url.params["categories"] == "settings,history"
        assert request.headers["Authorization"] == f"Bearer {TOKEN}"
        assert entries[0].category == Category.SETTINGS
        assert entries[0].sync_version == 3

    @pytest.mark.asyncio
    async def test_data_envelope(self):
        def handler(request):
            return httpx.Response(200, json={"data": {"items": [{"category": "top_sites", "checksum": "x", "syncVersion": 1}]}})

        async with make_client(handler) as client:
            entries = await client.status("chrome", [Category.TOP_SITES])
        assert entries[0].category == Category.TOP_SITES

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        def handler(request):
            return httpx.Response(200, json={"items": [{"category": "nope"}]})

        async with make_client(handler) as client:
            with pytest.raises(NetworkOrServerError, match="malformed"):
                await client.status("chrome", [Category.SETTINGS])

    @pytest.mark.asyncio
    async def test_not_json(self):
        def handler(request):
            return httpx.Response(200, text="<html>")

        async with make_client(handler) as client:
            with pytest.raises(NetworkOrServerError):
                await client.status("chrome", [Category.SETTINGS])

    @pytest.mark.asyncio
    async def test_retried_on_server_error(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) == 1:
                return httpx.Response(502)
            return httpx.Response(200, json={"items": []})

        async with make_client(handler, max_retries=2) as client:
            assert await client.status("chrome", [Category.SETTINGS]) == []
        assert len(attempts) == 2

    @pytest.mark.asyncio
    async def test_single_request_without_retries(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(503)

        async with make_client(handler, max_retries=0) as client:
            with pytest.raises(NetworkOrServerError):
                await client.status("chrome", [Category.SETTINGS])
        assert len(attempts) == 1

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(403, json={"message": "forbidden partition"})

        async with make_client(handler, max_retries=2) as client:
            with pytest.raises(NetworkOrServerError, match="forbidden partition") as exc_info:
                await client.status("chrome", [Category.SETTINGS])
        assert exc_info.value.status_code == 403
        assert len(attempts) == 1

    @pytest.mark.asyncio
    async def test_connect_error_mapped(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        async with make_client(handler, max_retries=1) as client:
            with pytest.raises(NetworkOrServerError) as exc_info:
                await client.status("chrome", [Category.SETTINGS])
        assert exc_info.value.operation == "status"

    @pytest.mark.asyncio
    async def test_cancelled(self):
        cancel = asyncio.Event()
        cancel.set()

        def handler(request):
            raise AssertionError("no request expected")

        async with make_client(handler) as client:
            with pytest.raises(SyncCancelled):
                await client.status("chrome", [Category.SETTINGS], cancel=cancel)


class TestPush:
    """Tests for RemoteSyncClient.push."""

    @pytest.mark.asyncio
    async def test_body_and_results(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(
                200,
                json={
                    "results": [
                        {
                            "category": "settings",
                            "status": "conflict",
                            "syncVersion": 6,
                            "checksum": "srv",
                            "serverPayload": {"fmt24h": "0"},
                        }
                    ]
                },
            )

        item = PushItem(category=Category.SETTINGS, payload={"fmt24h": "1"}, checksum="mine", base_version=5)
        async with make_client(handler) as client:
            results = await client.push("chrome", "device-1", [item])

        assert bodies == [
            {
                "accountPartitionKey": "chrome",
                "deviceId": "device-1",
                "items": [{"category": "settings", "payload": {"fmt24h": "1"}, "checksum": "mine", "baseVersion": 5}],
            }
        ]
        assert results[0].status == PushStatus.CONFLICT
        assert results[0].server_payload == {"fmt24h": "0"}

    @pytest.mark.asyncio
    async def test_not_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(503)

        async with make_client(handler, max_retries=3) as client:
            with pytest.raises(NetworkOrServerError) as exc_info:
                await client.push("chrome", "device-1", [])
        assert exc_info.value.operation == "push"
        assert len(attempts) == 1


class TestPull:
    """Tests for RemoteSyncClient.pull."""

    @pytest.mark.asyncio
    async def test_entries(self):
        def handler(request):
            assert request.url.path == "/api/ananta/sync/pull"
            return httpx.Response(
                200, json={"items": [{"category": "pinned_apps", "payload": [], "syncVersion": 2}]}
            )

        async with make_client(handler) as client:
            entries = await client.pull("chrome", [Category.PINNED_APPS])
        assert entries[0].payload == []
        assert entries[0].sync_version == 2


class TestClientLifecycle:
    """Tests for the async context manager."""

    @pytest.mark.asyncio
    async def test_missing_token(self):
        client = RemoteSyncClient(API_URL, None)
        with pytest.raises(AuthenticationRequired):
            async with client:
                pass

    def test_not_entered(self):
        client = RemoteSyncClient(API_URL, TOKEN)
        with pytest.raises(RuntimeError):
            client.client


class TestRetryHelpers:
    """Tests for backoff helpers."""

    def test_delay_capped(self):
        assert _calculate_delay(10, 0.5, 2.0, 0) == 2.0

    def test_delay_grows(self):
        assert _calculate_delay(0, 1.0, 10.0, 0) == 1.0
        assert _calculate_delay(2, 1.0, 10.0, 0) == 4.0

    @pytest.mark.asyncio
    async def test_non_retryable_propagates(self):
        calls = []

        async def func():
            calls.append(1)
            raise ValueError("bad")

        with pytest.raises(ValueError):
            await retry_with_backoff(func, max_retries=3, base_delay=0)
        assert len(calls) == 1

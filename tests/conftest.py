# Ananta Sync Test Fixtures
# Pytest fixtures and an in-memory sync server for Ananta Sync tests

import json
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest

from anantasync.category import AUTH_KEY, Category
from anantasync.collect.capabilities import BrowserCapabilities
from anantasync.collect.device import DeviceEnvironment
from anantasync.config.schema import AnantaSyncConfig
from anantasync.storage.local import LocalStore
from anantasync.sync.engine import SyncEngine
from anantasync.utils.hashing import compute_checksum

CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.6099.71 Safari/537.36"
)
API_URL = "http://sync.test/api"
TOKEN = "test-token"

PINNED_APPS = [
    {"id": "a1", "name": "Mail", "url": "https://mail.example.com", "icon": "", "createdAt": 1700000000000},
]

WORLD_CLOCKS = [
    {"id": "c1", "timezone": "Asia/Kolkata", "cities": [{"name": "Pune", "state": "MH", "country": "India"}]},
]


class FakeSyncServer:
    """
    In-memory sync API with optimistic concurrency.

    A push is accepted as an update only when its base version equals the
    stored version; otherwise it is reported as a conflict carrying the
    stored payload. Served through httpx.MockTransport.
    """

    def __init__(self, token: str = TOKEN):
        self.token = token
        self.records: dict[tuple[str, str], dict[str, Any]] = {}
        self.calls: list[str] = []
        self.pushed: list[dict[str, Any]] = []
        self.failures: dict[str, int] = {}
        self.after_status: Optional[Callable[[], None]] = None

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def count(self, operation: str) -> int:
        return self.calls.count(operation)

    def seed(self, category: Category, payload: Any, version: int, partition: str = "chrome") -> None:
        self.records[(partition, category.value)] = {
            "payload": payload,
            "checksum": compute_checksum(payload),
            "syncVersion": version,
        }

    def record(self, category: Category, partition: str = "chrome") -> Optional[dict[str, Any]]:
        return self.records.get((partition, category.value))

    def remove(self, category: Category, partition: str = "chrome") -> None:
        self.records.pop((partition, category.value), None)

    def handle(self, request: httpx.Request) -> httpx.Response:
        if request.headers.get("Authorization") != f"Bearer {self.token}":
            return httpx.Response(401, json={"message": "invalid token"})

        operation = request.url.path.rsplit("/", 1)[-1]
        self.calls.append(operation)
        if operation in self.failures:
            return httpx.Response(self.failures[operation], json={"message": "server unavailable"})

        if operation == "status":
            response = self._status(request)
            if self.after_status is not None:
                self.after_status()
            return response
        if operation == "push":
            return self._push(json.loads(request.content))
        if operation == "pull":
            return self._pull(request)
        return httpx.Response(404, json={"message": "not found"})

    def _requested(self, request: httpx.Request) -> tuple[str, list[str]]:
        partition = request.url.params.get("accountPartitionKey", "")
        categories = [c for c in request.url.params.get("categories", "").split(",") if c]
        return partition, categories

    def _status(self, request: httpx.Request) -> httpx.Response:
        partition, categories = self._requested(request)
        items = []
        for category in categories:
            record = self.records.get((partition, category))
            if record is not None:
                items.append(
                    {"category": category, "checksum": record["checksum"], "syncVersion": record["syncVersion"]}
                )
        return httpx.Response(200, json={"items": items})

    def _push(self, body: dict[str, Any]) -> httpx.Response:
        partition = body["accountPartitionKey"]
        results = []
        for item in body["items"]:
            self.pushed.append(item)
            key = (partition, item["category"])
            record = self.records.get(key)
            result = {"category": item["category"]}

            if record is None:
                record = {"payload": item["payload"], "checksum": item["checksum"], "syncVersion": 1}
                self.records[key] = record
                result["status"] = "created"
            elif record["checksum"] == item["checksum"]:
                result["status"] = "unchanged"
            elif record["syncVersion"] == item["baseVersion"]:
                record.update(
                    payload=item["payload"], checksum=item["checksum"], syncVersion=record["syncVersion"] + 1
                )
                result["status"] = "updated"
            else:
                result["status"] = "conflict"
                result["serverPayload"] = record["payload"]

            result["syncVersion"] = record["syncVersion"]
            result["checksum"] = record["checksum"]
            results.append(result)
        return httpx.Response(200, json={"results": results})

    def _pull(self, request: httpx.Request) -> httpx.Response:
        partition, categories = self._requested(request)
        items = []
        for category in categories:
            record = self.records.get((partition, category))
            if record is not None:
                items.append(
                    {"category": category, "payload": record["payload"], "syncVersion": record["syncVersion"]}
                )
        return httpx.Response(200, json={"items": items})


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("ANANTA_SYNC_CONFIG", raising=False)
    monkeypatch.delenv("ANANTA_SYNC_TOKEN", raising=False)
    return home


@pytest.fixture
def store(temp_dir: Path) -> LocalStore:
    """Create an empty local store."""
    return LocalStore(temp_dir / "storage.yaml")


@pytest.fixture
def environment() -> DeviceEnvironment:
    """Fixed host facts so the device fingerprint is stable across runs."""
    return DeviceEnvironment(
        user_agent=CHROME_UA,
        screen_width=1920,
        screen_height=1080,
        pixel_ratio=2.0,
        language="en-US",
        hardware_concurrency=8,
    )


@pytest.fixture
def server() -> FakeSyncServer:
    """Create an empty sync server."""
    return FakeSyncServer()


@pytest.fixture
def make_engine(
    temp_dir: Path, server: FakeSyncServer, environment: DeviceEnvironment
) -> Callable[..., SyncEngine]:
    """Factory for engines representing separate installations of one account."""

    def _make(
        name: str = "device-a",
        *,
        capabilities: Optional[BrowserCapabilities] = None,
        signed_in: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> SyncEngine:
        config = AnantaSyncConfig.model_validate(
            {
                "server": {"api_url": API_URL, "max_retries": 1, "retry_base_delay": 0, "retry_max_delay": 0},
                "storage": {"path": str(temp_dir / name / "storage.yaml")},
            }
        )
        local = LocalStore(Path(config.storage.path))
        if signed_in:
            local.set(AUTH_KEY, {"accessToken": server.token, "user": {"id": "user-1"}})
        return SyncEngine(
            config,
            local,
            capabilities=capabilities,
            environment=environment,
            transport=transport or server.transport,
        )

    return _make

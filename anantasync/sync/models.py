# Ananta Sync Wire Models
# Pydantic models for the status, push and pull JSON bodies

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from anantasync.category import Category


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PushStatus(str, Enum):
    """Server outcome of pushing one category."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    CONFLICT = "conflict"


class StatusEntry(WireModel):
    category: Category
    checksum: str
    sync_version: int = Field(ge=0)


class StatusResponse(WireModel):
    items: list[StatusEntry] = Field(default_factory=list)


class PushItem(WireModel):
    """One category offered to the server, declared against ``base_version``."""

    category: Category
    payload: Any
    checksum: str
    base_version: int = Field(default=0, ge=0)


class PushRequest(WireModel):
    account_partition_key: str
    device_id: str
    items: list[PushItem]


class PushResult(WireModel):
    category: Category
    status: PushStatus
    sync_version: int = Field(ge=0)
    checksum: str
    server_payload: Optional[Any] = None


class PushResponse(WireModel):
    results: list[PushResult] = Field(default_factory=list)


class PullEntry(WireModel):
    category: Category
    payload: Any
    sync_version: int = Field(ge=0)


class PullResponse(WireModel):
    items: list[PullEntry] = Field(default_factory=list)

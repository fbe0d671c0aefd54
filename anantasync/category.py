# Ananta Sync Categories
# Category identifiers, payload schemas and local storage keys

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel


class Category(str, Enum):
    """Data categories synchronized independently."""

    PINNED_APPS = "pinned_apps"
    WORLD_CLOCKS = "world_clocks"
    SETTINGS = "settings"
    BOOKMARKS = "bookmarks"
    HISTORY = "history"
    TOP_SITES = "top_sites"
    DEVICE_INFO = "device_info"

    @property
    def is_mirrored(self) -> bool:
        """Check if this category is read from and written back to local storage."""
        return self in MIRRORED_CATEGORIES

    @property
    def storage_key(self) -> str | None:
        """Local storage key for mirrored categories."""
        return STORAGE_KEYS.get(self)


ALL_CATEGORIES: tuple[Category, ...] = tuple(Category)

MIRRORED_CATEGORIES: frozenset[Category] = frozenset(
    {Category.PINNED_APPS, Category.WORLD_CLOCKS, Category.SETTINGS}
)

STORAGE_KEYS: dict[Category, str] = {
    Category.PINNED_APPS: "pinnedApps",
    Category.WORLD_CLOCKS: "worldClocks",
    Category.SETTINGS: "anantaSettings",
}

DEVICE_ID_KEY = "anantaDeviceId"
SYNC_META_KEY = "anantaSyncMeta"
AUTH_KEY = "anantaAuth"


class PayloadModel(BaseModel):
    """Base for payload schemas: camelCase on the wire, unknown keys preserved."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class PinnedApp(PayloadModel):
    """A pinned launchpad shortcut."""

    id: str
    name: str
    url: str
    icon: str = ""
    created_at: int | None = None


class WorldClockCity(PayloadModel):
    name: str
    state: str = ""
    country: str = ""


class WorldClock(PayloadModel):
    """A world clock card: one timezone shared by one or more cities."""

    id: str
    timezone: str
    cities: list[WorldClockCity] = Field(default_factory=list)


class Settings(PayloadModel):
    """UI settings: clock format and bookmark panel state."""

    # to_camel would turn this into "fmt24H"
    fmt24h: str = Field(default="0", alias="fmt24h")
    selected_bookmark_folder: str | None = None
    open_bookmark_folders: list[str] | None = None


class BookmarkEntry(PayloadModel):
    """A flattened bookmark leaf."""

    title: str = ""
    url: str
    created_at: int | None = None
    folder_path: str = ""


class HistoryEntry(PayloadModel):
    title: str = ""
    url: str
    last_visit_time: float | None = None
    visit_count: int = 0


class TopSite(PayloadModel):
    title: str = ""
    url: str


class ScreenInfo(PayloadModel):
    width: int = 0
    height: int = 0
    pixel_ratio: float = 1.0
    color_depth: int = 24


class DeviceInfo(PayloadModel):
    """Device and browser fingerprint, recomputed every run."""

    os: str
    browser: str
    browser_version: str | None = None
    screen: ScreenInfo = Field(default_factory=ScreenInfo)
    language: str = "en-US"
    hardware_concurrency: int = 1
    touch_support: bool = False


# Tagged union: each category tag selects exactly one payload schema
PAYLOAD_SCHEMAS: dict[Category, TypeAdapter] = {
    Category.PINNED_APPS: TypeAdapter(list[PinnedApp]),
    Category.WORLD_CLOCKS: TypeAdapter(list[WorldClock]),
    Category.SETTINGS: TypeAdapter(Settings),
    Category.BOOKMARKS: TypeAdapter(list[BookmarkEntry]),
    Category.HISTORY: TypeAdapter(list[HistoryEntry]),
    Category.TOP_SITES: TypeAdapter(list[TopSite]),
    Category.DEVICE_INFO: TypeAdapter(DeviceInfo),
}


def parse_payload(category: Category, raw: Any) -> Any:
    """
    Validate a raw JSON value against the category's schema.

    Args:
        category: Category the value belongs to.
        raw: Raw JSON-compatible value.

    Returns:
        Typed payload (a model or a list of models).

    Raises:
        ValidationError: If the value does not match the schema.
    """
    return PAYLOAD_SCHEMAS[category].validate_python(raw)


def dump_payload(category: Category, payload: Any) -> Any:
    """
    Convert a typed payload into its JSON-ready wire form.

    Only fields that were actually set are emitted, so a value read from
    storage dumps back to the same keys it was stored with.
    """
    return PAYLOAD_SCHEMAS[category].dump_python(payload, mode="json", by_alias=True, exclude_unset=True)


def normalize_payload(category: Category, raw: Any) -> Any:
    """Validate a raw value and return its JSON-ready form."""
    return dump_payload(category, parse_payload(category, raw))


def is_valid_payload(category: Category, raw: Any) -> bool:
    """Check whether a raw value matches the category's schema."""
    try:
        parse_payload(category, raw)
    except ValidationError:
        return False
    return True

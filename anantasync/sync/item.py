# Ananta Sync Data Item
# One category's current value together with its checksum

from dataclasses import dataclass
from typing import Any

from anantasync.category import ALL_CATEGORIES, Category
from anantasync.utils.hashing import compute_checksum


@dataclass(frozen=True)
class DataItem:
    """
    The current value of one data category.

    Values are whole replacements; there are no deltas or partial updates.
    """

    category: Category
    payload: Any
    checksum: str

    @classmethod
    def from_payload(cls, category: Category, payload: Any) -> "DataItem":
        """Build an item, computing its checksum."""
        return cls(category=category, payload=payload, checksum=compute_checksum(payload))

    @property
    def is_mirrored(self) -> bool:
        """Check if the item's category is mirrored locally."""
        return self.category.is_mirrored


def build_items(snapshot: dict[Category, Any]) -> dict[Category, DataItem]:
    """
    Turn a collected snapshot into checksummed items.

    Args:
        snapshot: Map of category to JSON-ready payload.

    Returns:
        Map of category to DataItem, in canonical category order.
    """
    return {
        category: DataItem.from_payload(category, snapshot[category])
        for category in ALL_CATEGORIES
        if category in snapshot
    }

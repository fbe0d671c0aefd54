# Ananta Sync Hashing Utilities
# Content hashing for change detection

import hashlib
import json
from typing import Any


def content_hash(content: str | bytes, *, algorithm: str = "sha256") -> str:
    """
    Calculate hash of content.

    Args:
        content: String or bytes content.
        algorithm: Hash algorithm (default sha256).

    Returns:
        Hex digest of hash.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    hasher = hashlib.new(algorithm)
    hasher.update(content)
    return hasher.hexdigest()


def canonical_json(payload: Any) -> str:
    """
    Serialize a JSON-compatible value canonically.

    Object keys are sorted at every depth and separators carry no whitespace,
    so two structurally equal values always produce the same text regardless
    of the order their keys were inserted in.

    Args:
        payload: JSON-compatible value (dicts, lists, scalars).

    Returns:
        Canonical JSON text.
    """
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def compute_checksum(payload: Any) -> str:
    """
    Compute the sync checksum of a category payload.

    Args:
        payload: JSON-compatible payload.

    Returns:
        SHA-256 hex digest of the canonical serialization.
    """
    return content_hash(canonical_json(payload))

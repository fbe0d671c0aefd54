# Ananta Sync Path Utilities
# Safe file operations with atomic writes

import os
import tempfile
from pathlib import Path


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path.

    Returns:
        The path that was ensured.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write(path: Path, content: str | bytes, *, encoding: str = "utf-8") -> None:
    """
    Atomically write content to file.

    Uses a temporary file and atomic rename.

    Args:
        path: Target file path.
        content: Content to write (str or bytes).
        encoding: Encoding for string content (default utf-8).
    """
    ensure_dir(path.parent)

    # Create temp file in same directory for atomic rename
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        if isinstance(content, str):
            with os.fdopen(fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
        os.replace(temp_path, path)
    except Exception:
        # Cleanup on failure
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise

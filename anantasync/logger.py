"""Logging configuration for Ananta Sync."""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "anantasync"

# LogRecord attributes that are not caller-supplied context
_STANDARD_FIELDS = frozenset(
    {
        "args",
        "msg",
        "name",
        "levelno",
        "levelname",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
    }
)


class ContextFormatter(logging.Formatter):
    """Formatter appending the record's ``extra`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        context = [
            f"{key}={self._render(value)}"
            for key, value in record.__dict__.items()
            if not key.startswith("_") and key not in _STANDARD_FIELDS
        ]
        if not context:
            return text
        return f"{text} {' '.join(context)}"

    @staticmethod
    def _render(value: Any) -> str:
        if isinstance(value, str):
            return value
        return json.dumps(value, ensure_ascii=False, default=str, separators=(",", ":"))


def setup_logging(
    *,
    verbose: bool = False,
    log_file: Optional[Path] = None,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Configure package-wide logging.

    Console output goes through rich; warnings only unless verbose.
    A log file, when given, always records at DEBUG level.

    Args:
        verbose: Show info and debug records on the console.
        log_file: Optional path of a log file.
        console: Rich console to render to (stderr by default).

    Returns:
        The package logger.
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(logging.DEBUG)

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    # Console handler
    ch = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    ch.setLevel(logging.DEBUG if verbose else logging.WARNING)
    ch.setFormatter(ContextFormatter("%(message)s"))
    root.addHandler(ch)

    # File handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(
            ContextFormatter(
                "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(fh)

    return root

# Tests for anantasync.output.console
# Rich-based console output

import logging
from io import StringIO

from rich.console import Console as RichConsole

from anantasync.category import Category
from anantasync.logger import setup_logging
from anantasync.output.console import Console, create_console
from anantasync.storage.metadata import SyncMetadataEntry
from anantasync.sync.actions import ActionType, RemoteState, SyncAction
from anantasync.sync.engine import CategoryStatus, SyncSummary
from anantasync.sync.item import DataItem
from anantasync.sync.models import PushStatus


def _make_console(verbose: bool = False) -> Console:
    """Create a console with captured output."""
    return Console(verbose=verbose, rich_console=RichConsole(file=StringIO(), no_color=True, width=120))


def _get_output(console: Console) -> str:
    """Get captured output from console."""
    console.rich.file.seek(0)
    return console.rich.file.read()


def _status(category: Category, action_type: ActionType, *, local: bool, remote: int | None) -> CategoryStatus:
    return CategoryStatus(
        category=category,
        local=DataItem.from_payload(category, {}) if local else None,
        last_known=SyncMetadataEntry(1, "x") if remote else None,
        remote=RemoteState("x", remote) if remote else None,
        action=SyncAction(category, action_type, reason="because"),
    )


class TestConsoleBasic:
    """Tests for basic console methods."""

    def test_print_error(self):
        c = _make_console()
        c.print_error("something failed")
        output = _get_output(c)
        assert "Error:" in output
        assert "something failed" in output

    def test_print_warning(self):
        c = _make_console()
        c.print_warning("be careful")
        assert "Warning: be careful" in _get_output(c)

    def test_create_console(self):
        c = create_console(verbose=True, colored=False)
        assert c.verbose is True


class TestSyncSummary:
    """Tests for print_sync_summary."""

    def test_in_sync(self):
        c = _make_console()
        c.print_sync_summary(SyncSummary(unchanged=[Category.SETTINGS], telemetry=PushStatus.UNCHANGED))
        output = _get_output(c)
        assert "Everything is in sync" in output
        assert "Device info: unchanged" in output
        assert "Unchanged" not in output

    def test_verbose_lists_unchanged(self):
        c = _make_console(verbose=True)
        c.print_sync_summary(SyncSummary(unchanged=[Category.SETTINGS]))
        assert "Unchanged: settings" in _get_output(c)

    def test_changes(self):
        c = _make_console()
        c.print_sync_summary(
            SyncSummary(pushed=[Category.PINNED_APPS], pulled=[Category.WORLD_CLOCKS], removed=[Category.SETTINGS])
        )
        output = _get_output(c)
        assert "Sync completed" in output
        assert "Pushed: pinned_apps" in output
        assert "Pulled: world_clocks" in output
        assert "Removed: settings" in output


class TestStatusTable:
    """Tests for print_status."""

    def test_skips_hidden_unless_verbose(self):
        statuses = {
            Category.SETTINGS: _status(Category.SETTINGS, ActionType.PUSH, local=True, remote=3),
            Category.HISTORY: _status(Category.HISTORY, ActionType.SKIP, local=False, remote=None),
        }
        c = _make_console()
        c.print_status(statuses)
        output = _get_output(c)
        assert "settings" in output
        assert "v3" in output
        assert "local → server" in output
        assert "history" not in output

        c = _make_console(verbose=True)
        c.print_status(statuses)
        output = _get_output(c)
        assert "history" in output
        assert "because" in output

    def test_empty(self):
        c = _make_console()
        c.print_status({})
        assert "No categories" in _get_output(c)


class TestSummaryDict:
    """Tests for SyncSummary helpers."""

    def test_to_dict(self):
        summary = SyncSummary(pushed=[Category.PINNED_APPS], telemetry=PushStatus.CREATED)
        assert summary.to_dict() == {
            "pushed": ["pinned_apps"],
            "pulled": [],
            "conflicts": [],
            "unchanged": [],
            "removed": [],
            "telemetry": "created",
        }

    def test_flags(self):
        assert not SyncSummary(unchanged=[Category.SETTINGS]).has_changes
        assert SyncSummary(pushed=[Category.SETTINGS]).has_changes
        assert not SyncSummary(pushed=[Category.SETTINGS]).needs_reload


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_file_handler(self, temp_dir):
        log_file = temp_dir / "logs" / "sync.log"
        logger = setup_logging(log_file=log_file, console=RichConsole(file=StringIO()))

        logging.getLogger("anantasync.sync.engine").info("sync_completed")
        for handler in logger.handlers:
            handler.flush()

        assert "sync_completed" in log_file.read_text(encoding="utf-8")
        assert len(logger.handlers) == 2

    def test_reconfigure_replaces_handlers(self):
        setup_logging(console=RichConsole(file=StringIO()))
        logger = setup_logging(verbose=True, console=RichConsole(file=StringIO()))
        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.DEBUG

    def test_extra_fields_rendered(self, temp_dir):
        log_file = temp_dir / "sync.log"
        output = StringIO()
        logger = setup_logging(log_file=log_file, console=RichConsole(file=output, width=200))

        logging.getLogger("anantasync.collect.collector").warning(
            "capability_read_failed", extra={"category": "bookmarks", "error": "OSError: gone"}
        )
        logging.getLogger("anantasync.sync.engine").info("sync_classified", extra={"actions": {"settings": "push"}})
        for handler in logger.handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "capability_read_failed category=bookmarks error=OSError: gone" in text
        assert 'actions={"settings":"push"}' in text
        assert "category=bookmarks" in output.getvalue()

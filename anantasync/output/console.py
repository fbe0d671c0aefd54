# Ananta Sync Console Output
# Rich-based console output for user-friendly display

from typing import Any

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from anantasync.category import Category
from anantasync.sync.actions import ActionType
from anantasync.sync.engine import CategoryStatus, SyncSummary


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for sync operations.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True, rich_console: RichConsole | None = None):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
            rich_console: Optional pre-built Rich console.
        """
        self.verbose = verbose
        self._console = rich_console or RichConsole(no_color=not colored, highlight=False)

    @property
    def rich(self) -> RichConsole:
        """Underlying Rich console."""
        return self._console

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {message}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {message}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{message}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{message}[/blue]")

    def _get_action_icon(self, action_type: ActionType) -> str:
        """Get icon for action type."""
        icons = {
            ActionType.UNCHANGED: "[green]✓[/green]",
            ActionType.PUSH: "[yellow]↑[/yellow]",
            ActionType.PULL: "[cyan]↓[/cyan]",
            ActionType.TOMBSTONE: "[red]×[/red]",
            ActionType.SKIP: "[dim]○[/dim]",
        }
        return icons.get(action_type, "?")

    def print_sync_summary(self, summary: SyncSummary) -> None:
        """
        Print the outcome of a sync run.

        Args:
            summary: Summary returned by the engine.
        """
        rows: list[tuple[str, list[Category], str]] = [
            ("Pushed", summary.pushed, "yellow"),
            ("Pulled", summary.pulled, "cyan"),
            ("Conflicts", summary.conflicts, "red"),
            ("Removed", summary.removed, "red"),
        ]
        if self.verbose:
            rows.append(("Unchanged", summary.unchanged, "green"))

        self._console.print()
        lines = []
        for label, categories, color in rows:
            names = ", ".join(c.value for c in categories) if categories else "[dim]none[/dim]"
            lines.append(f"[{color}]{label}:[/{color}] {names}")
        if summary.telemetry is not None:
            lines.append(f"[dim]Device info: {summary.telemetry.value}[/dim]")

        if summary.conflicts:
            lines.append("")
            lines.append("[yellow]Server values were kept for conflicting categories.[/yellow]")

        border = "yellow" if summary.conflicts else "green"
        title = "Sync completed" if summary.has_changes else "Everything is in sync"
        self._console.print(Panel("\n".join(lines), title=title, border_style=border))

    def print_status(self, statuses: dict[Category, CategoryStatus]) -> None:
        """
        Print per-category status.

        Args:
            statuses: Dict of category to status.
        """
        if not statuses:
            self._console.print("[dim]No categories to display[/dim]")
            return

        table = Table(title="Sync Status", show_header=True, header_style="bold")
        table.add_column("Category", style="cyan")
        table.add_column("Local", justify="center")
        table.add_column("Confirmed", justify="right")
        table.add_column("Server", justify="right")
        table.add_column("Action")
        table.add_column("Direction")

        for category, status in statuses.items():
            if status.action.action_type == ActionType.SKIP and not self.verbose:
                continue

            local = "[green]✓[/green]" if status.exists_local else "[red]✗[/red]"
            confirmed = f"v{status.last_known.version}" if status.last_known else "[dim]never[/dim]"
            server = f"v{status.remote.sync_version}" if status.remote else "[dim]absent[/dim]"
            icon = self._get_action_icon(status.action.action_type)
            action = f"{icon} {status.action.action_type.value}"
            if self.verbose and status.action.reason:
                action += f" [dim]({status.action.reason})[/dim]"

            table.add_row(category.value, local, confirmed, server, action, status.action.direction)

        self._console.print()
        self._console.print(table)
        self._console.print()

    def print_mapping(self, title: str, data: dict[str, Any]) -> None:
        """Print a flat key/value table."""
        table = Table(title=title, show_header=False)
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        for key, value in data.items():
            table.add_row(key, "[dim]—[/dim]" if value is None else str(value))
        self._console.print(table)

    def confirm(self, message: str, default: bool = False) -> bool:
        """
        Ask for confirmation.

        Args:
            message: Confirmation message.
            default: Default value if user just presses enter.

        Returns:
            True if confirmed.
        """
        suffix = " [Y/n]" if default else " [y/N]"
        response = self._console.input(f"{message}{suffix}: ").strip().lower()

        if not response:
            return default

        return response in ("y", "yes")


def create_console(*, verbose: bool = False, colored: bool = True) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored)

"""Click-based CLI for Ananta Sync."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click

from anantasync import __version__
from anantasync.collect.capabilities import load_capabilities
from anantasync.collect.device import compute_fingerprint
from anantasync.config import (
    AnantaSyncConfig,
    ensure_config_exists,
    generate_default_config,
    get_config_path,
    load_config,
    validate_config_file,
)
from anantasync.errors import AuthenticationRequired, NetworkOrServerError, SyncError
from anantasync.logger import setup_logging
from anantasync.output import Console
from anantasync.sync.engine import SyncEngine


def _load_config_or_exit(console: Console) -> AnantaSyncConfig:
    """Load configuration, exiting with code 1 if it is missing or invalid."""
    try:
        return load_config()
    except FileNotFoundError as e:
        console.print_error(str(e))
        sys.exit(1)
    except ValueError as e:
        console.print_error(f"Invalid configuration: {e}")
        sys.exit(1)


def _build_engine(config: AnantaSyncConfig, capabilities: Optional[Path]) -> SyncEngine:
    """Create the engine, preferring a capability snapshot given on the command line."""
    if capabilities is not None:
        return SyncEngine(config, capabilities=load_capabilities(capabilities))
    return SyncEngine(config)


def _log_file(config: AnantaSyncConfig) -> Optional[Path]:
    return Path(config.output.log_file) if config.output.log_file else None


@click.group()
@click.version_option(version=__version__, prog_name="ananta-sync")
def cli() -> None:
    """Ananta Sync - reconcile extension data with your account.

    Pinned apps, world clocks and settings are synchronized both ways;
    bookmarks, history, top sites and device info are uploaded as snapshots.

    \b
    Workflows:
      ananta-sync config init    # create ~/.config/ananta-sync/config.yaml
      ananta-sync status         # compare local, confirmed and server state
      ananta-sync sync           # push, pull and resolve conflicts
    """
    pass


@cli.command()
@click.option("--token", envvar="ANANTA_SYNC_TOKEN", help="Bearer token (defaults to the stored sign-in)")
@click.option(
    "--capabilities",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON/YAML snapshot of bookmarks, history and top sites",
)
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def sync(token: Optional[str], capabilities: Optional[Path], as_json: bool, verbose: bool) -> None:
    """Synchronize local data with the server.

    Unchanged categories are left alone, local edits are pushed, server
    edits are pulled. When both sides changed, the server's value wins and
    the category is reported as a conflict.
    """
    console = Console(verbose=verbose)
    config = _load_config_or_exit(console)
    setup_logging(verbose=verbose or config.output.verbose, log_file=_log_file(config))

    try:
        engine = _build_engine(config, capabilities)
        summary = asyncio.run(engine.smart_sync(token=token))
    except AuthenticationRequired as e:
        console.print_error(str(e))
        sys.exit(1)
    except NetworkOrServerError as e:
        console.print_error(f"Sync failed: {e}")
        sys.exit(1)
    except SyncError as e:
        console.print_error(str(e))
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(summary.to_dict(), indent=2))
        return

    console.print_sync_summary(summary)
    if summary.needs_reload:
        console.print_info("Local data changed; reload open extension pages to see it.")


@cli.command()
@click.option("--token", envvar="ANANTA_SYNC_TOKEN", help="Bearer token (defaults to the stored sign-in)")
@click.option(
    "--capabilities",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON/YAML snapshot of bookmarks, history and top sites",
)
@click.option("--verbose", "-v", is_flag=True, help="Show skipped categories and reasons")
def status(token: Optional[str], capabilities: Optional[Path], verbose: bool) -> None:
    """Show what a sync would do, without changing anything."""
    console = Console(verbose=verbose)
    config = _load_config_or_exit(console)
    setup_logging(verbose=verbose or config.output.verbose, log_file=_log_file(config))

    try:
        engine = _build_engine(config, capabilities)
        statuses = asyncio.run(engine.get_status(token=token))
    except SyncError as e:
        console.print_error(str(e))
        sys.exit(1)

    console.print_status(statuses)


@cli.command()
def device() -> None:
    """Show this installation's device id and fingerprint."""
    console = Console()
    config = _load_config_or_exit(console)

    engine = SyncEngine(config)
    info = compute_fingerprint(engine.environment)
    data = {"device_id": engine.store.get_device_id()}
    data.update(info.model_dump(mode="json"))
    console.print_mapping("Device", data)


@cli.command()
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
def reset(yes: bool) -> None:
    """Forget all confirmed sync versions.

    The next sync then treats every category as never synced.
    """
    console = Console()
    config = _load_config_or_exit(console)

    if not yes and not console.confirm("Clear sync metadata?", default=False):
        console.print_warning("Reset cancelled")
        return

    if SyncEngine(config).reset_state():
        console.print_success("Sync metadata cleared")
    else:
        console.print_info("No sync metadata to clear")


@cli.group()
def config() -> None:
    """Configuration management.

    \b
    Keys:
      server.api_url           Sync API base URL
      storage.path             Local store file
      collector.history_days   Days of history to upload
      account.partition_key    Account partition (default: browser brand)
    """
    pass


@config.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing file")
def config_init(force: bool) -> None:
    """Create the default configuration file."""
    console = Console()
    path = get_config_path()

    if force and path.exists():
        path.write_text(generate_default_config(), encoding="utf-8")
        console.print_success(f"Configuration overwritten: {path}")
        return

    path, created = ensure_config_exists(path)
    if created:
        console.print_success(f"Configuration created: {path}")
    else:
        console.print_info(f"Configuration already exists: {path}")


@config.command("show")
def config_show() -> None:
    """Print the configuration file."""
    console = Console()
    path = get_config_path()
    if not path.exists():
        console.print_warning(f"Configuration file not found: {path}")
        return
    console.print(path.read_text(encoding="utf-8"), markup=False)


@config.command("path")
def config_path() -> None:
    """Print the configuration file location."""
    click.echo(str(get_config_path()))


@config.command("validate")
def config_validate() -> None:
    """Validate the configuration file."""
    console = Console()
    valid, errors = validate_config_file()
    if valid:
        console.print_success("Configuration is valid")
        return

    console.print_error("Configuration has errors:")
    for error in errors:
        console.print(f"  • {error}", markup=False)
    sys.exit(1)


if __name__ == "__main__":
    cli()

"""Click-based CLI for ZoneSync - incremental zone synchronization."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, NoReturn, Optional

import click
from pydantic import ValidationError

from zonesync import __version__
from zonesync.config import (
    ensure_config_exists,
    get_config_path,
    load_config,
    validate_config_file,
)
from zonesync.config.schema import ZonesyncConfig
from zonesync.errors import SyncError
from zonesync.output.console import Console, create_console
from zonesync.sync.history import SyncHistory
from zonesync.sync.session import SyncSession
from zonesync.utils.paths import expand_path


def _fail(console: Console, message: str) -> NoReturn:
    console.print_error(message)
    sys.exit(1)


def _load(verbose: bool = False) -> tuple[ZonesyncConfig, Console]:
    """Load configuration and build a console from its output settings."""
    try:
        config = load_config()
    except FileNotFoundError as e:
        _fail(create_console(), str(e))
    except ValidationError as e:
        _fail(create_console(), f"Invalid configuration: {e}")

    console = create_console(verbose=verbose or config.output.verbose, colored=config.output.colored)
    return config, console


def _history(config: ZonesyncConfig) -> Optional[SyncHistory]:
    if not config.output.sync_history:
        return None
    return SyncHistory(expand_path(config.output.sync_history), limit=config.output.history_limit)


def _run(
    config: ZonesyncConfig,
    console: Console,
    operation: str,
    action: Callable[[], Any],
    detail: Callable[[Any], dict[str, Any]],
) -> Any:
    """Run one session operation, log it to history, and exit 1 on sync errors."""
    history = _history(config)
    try:
        result = action()
    except SyncError as e:
        if history is not None:
            history.record(operation, False, error=e.message)
        _fail(console, e.message)

    if history is not None:
        history.record(operation, True, **detail(result))
    return result


def _pull_detail(result: Any) -> dict[str, Any]:
    return {"pages": result.pages, "updated": result.upserted, "deleted": result.deleted}


@click.group()
@click.version_option(version=__version__, prog_name="zonesync")
def cli() -> None:
    """ZoneSync - keep a local record cache in sync with a remote zone.

    \b
    Workflow:
        zonesync config init     Create a default configuration
        zonesync init            Provision zone + subscription, initial pull
        zonesync add NAME        Create a record (remote first), then pull
        zonesync signal          Handle a change notification
    """
    pass


@cli.command()
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def init(verbose: bool) -> None:
    """Provision the zone and subscription, then pull all changes.

    Safe to run repeatedly; provisioning happens only once.
    """
    config, console = _load(verbose)
    session = SyncSession.from_config(config)

    result = _run(
        config,
        console,
        "init",
        session.initialize,
        lambda r: _pull_detail(r.pull) if r.pull else {},
    )

    console.print_bootstrap_result(result.bootstrap)
    if result.pull is not None:
        console.print_pull_result(result.pull)
    console.print_success(f"Zone '{config.zone.zone_name}' is ready")


@cli.command()
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def pull(verbose: bool) -> None:
    """Fetch and apply remote changes since the last change token."""
    config, console = _load(verbose)
    session = SyncSession.from_config(config)

    def pull_initialized() -> Any:
        if not session.is_initialized:
            raise SyncError("Zone is not initialized. Run 'zonesync init' first.")
        return session.pull_changes()

    result = _run(config, console, "pull", pull_initialized, _pull_detail)
    console.print_pull_result(result)


@cli.command()
@click.argument("name")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def add(name: str, verbose: bool) -> None:
    """Create a record named NAME on the remote, then locally."""
    config, console = _load(verbose)
    session = SyncSession.from_config(config)

    result = _run(
        config,
        console,
        "add",
        lambda: session.add_record(name),
        lambda r: {"name": name, "record_id": r.record_id},
    )
    console.print_success(f"Added '{name}'")
    if verbose and result.pull is not None:
        console.print_pull_result(result.pull)


@cli.command()
@click.argument("name")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def delete(name: str, verbose: bool) -> None:
    """Delete the record named NAME on the remote, then locally.

    With duplicate names the record with the smallest ID is deleted.
    """
    config, console = _load(verbose)
    session = SyncSession.from_config(config)

    result = _run(
        config,
        console,
        "delete",
        lambda: session.delete_record(name),
        lambda r: {"name": name, "record_id": r.record_id},
    )

    console.print_success(f"Deleted '{name}'")
    if verbose and result.pull is not None:
        console.print_pull_result(result.pull)


@cli.command("list")
def list_records() -> None:
    """List cached record names (no remote access)."""
    config, console = _load()
    session = SyncSession.from_config(config)

    try:
        names = session.current_names()
    except SyncError as e:
        _fail(console, e.message)
    console.print_names(names)


@cli.command()
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def signal(verbose: bool) -> None:
    """Handle a zone-changed notification by pulling changes.

    Failures are reported but never fatal; the next signal retries.
    """
    config, console = _load(verbose)
    session = SyncSession.from_config(config)

    try:
        outcome = session.on_signal()
    except SyncError as e:
        _fail(console, e.message)
    error = session.trigger.last_error

    history = _history(config)
    if history is not None:
        history.record("signal", error is None, outcome=outcome.value)

    console.print_signal_outcome(outcome, error.message if error else None)
    if verbose and session.trigger.last_result is not None:
        console.print_pull_result(session.trigger.last_result)


@cli.command()
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def status(verbose: bool) -> None:
    """Show provisioning state, change token and remote reachability."""
    config, console = _load(verbose)
    session = SyncSession.from_config(config)

    remote_zones: Optional[list[str]] = None
    remote_error: Optional[str] = None
    try:
        remote_zones = session.check_remote()
    except SyncError as e:
        remote_error = e.message

    try:
        session.load()
    except SyncError as e:
        _fail(console, e.message)

    console.print_status(
        zone=session.zone,
        zone_created=session.bootstrap.is_zone_created,
        subscription_created=session.bootstrap.is_subscription_created,
        cursor=session.last_cursor(),
        record_count=len(session.cache),
        remote_zones=remote_zones,
        remote_error=remote_error,
    )


@cli.command()
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def reset(yes: bool) -> None:
    """Forget the change token and cached records.

    The next pull fetches the full history again. Provisioning flags are kept.
    """
    config, console = _load()
    session = SyncSession.from_config(config)

    if not yes and not click.confirm("Forget the change token and all cached records?", default=False):
        console.print_warning("Reset cancelled")
        return

    _run(config, console, "reset", session.reset, lambda r: {})
    console.print_success("Local sync state reset")


@cli.command()
@click.option("--lines", "-n", default=20, help="Number of entries to show")
def log(lines: int) -> None:
    """Show recent sync operations."""
    config, console = _load()
    history = _history(config)

    if history is None:
        console.print_info("Sync history is disabled (output.sync_history not set)")
        return

    console.print_history(history.entries(lines))


# ============================================================================
# Configuration Commands
# ============================================================================


@cli.group()
def config() -> None:
    """Configuration file management commands."""
    pass


@config.command("init")
def config_init() -> None:
    """Create a default configuration file if none exists."""
    console = create_console()
    config_path, created = ensure_config_exists()

    if created:
        console.print_success(f"Created configuration: {config_path}")
    else:
        console.print_info(f"Configuration already exists: {config_path}")


@config.command("show")
def config_show() -> None:
    """Show the effective configuration."""
    cfg, console = _load()
    console.print_config_summary(str(get_config_path()), cfg.zone.zone_name)

    console.print(f"  Storage: {cfg.storage.path}")
    console.print(f"  Remote:  {cfg.remote.path} (page size {cfg.remote.page_size})")
    console.print(f"  Subscription: {cfg.zone.subscription_id}")
    console.print(f"  History: {cfg.output.sync_history or 'disabled'}")


@config.command("check")
@click.argument("file", type=click.Path(exists=True, path_type=Path), required=False)
def config_check(file: Optional[Path]) -> None:
    """Validate a configuration FILE (defaults to the active one)."""
    console = create_console()
    valid, errors = validate_config_file(file)

    if valid:
        console.print_success("Configuration is valid")
        return

    for error in errors:
        console.print_error(error)
    sys.exit(1)


if __name__ == "__main__":
    cli()

# ZoneSync Console Output
# Rich-based console output for user-friendly display

from typing import Optional

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from zonesync.sync.bootstrap import BootstrapResult
from zonesync.sync.engine import PullResult
from zonesync.sync.history import HistoryEntry
from zonesync.sync.trigger import SignalOutcome


def format_cursor(cursor: Optional[bytes], *, width: int = 16) -> str:
    """Short printable form of an opaque cursor."""
    if cursor is None:
        return "none"
    text = cursor.hex()
    return text if len(text) <= width else f"{text[:width]}…"


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for sync operations.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
        """
        self.verbose = verbose
        self._console = RichConsole(no_color=not colored, highlight=False)

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

    def print_names(self, names: list[str]) -> None:
        """Print cached display names."""
        if not names:
            self._console.print("[dim]No records[/dim]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Name", style="cyan")
        for index, name in enumerate(names, start=1):
            table.add_row(str(index), name)
        self._console.print(table)

    def print_bootstrap_result(self, result: BootstrapResult) -> None:
        """Print what provisioning did."""
        if result.zone_created:
            self._console.print("[green]✓[/green] Created zone")
        if result.subscription_created:
            self._console.print("[green]✓[/green] Created change subscription")
        if result.subscription_found:
            self._console.print("[green]✓[/green] Found existing change subscription")
        if not result.remote_calls_made and self.verbose:
            self._console.print("[dim]○ Zone and subscription already provisioned[/dim]")

    def print_pull_result(self, result: PullResult) -> None:
        """
        Print pull result summary.

        Args:
            result: Pull result to display.
        """
        lines = [
            "[green]Pull completed[/green]" if result.has_changes else "[green]Already up to date[/green]",
            f"Pages: {result.pages}",
            f"Records: {result.upserted} updated, {result.deleted} deleted",
        ]
        if result.skipped:
            lines.append(f"[yellow]Skipped: {result.skipped} unreadable records[/yellow]")
        if self.verbose:
            lines.append(f"Change token: {format_cursor(result.cursor)}")

        self._console.print(
            Panel(
                "\n".join(lines),
                title="Summary",
                border_style="yellow" if result.skipped else "green",
            )
        )

    def print_signal_outcome(self, outcome: SignalOutcome, error: Optional[str] = None) -> None:
        """Print outcome of a handled wake-up signal."""
        if outcome == SignalOutcome.NEW_DATA:
            self.print_success("Signal handled: new data applied")
        elif outcome == SignalOutcome.NO_DATA:
            self.print_info("Signal handled: no new data")
        elif outcome == SignalOutcome.COALESCED:
            self.print_info("Signal coalesced into the running pull")
        else:
            self.print_warning(f"Signal handling failed, will retry on next signal: {error}")

    def print_status(
        self,
        *,
        zone: str,
        zone_created: bool,
        subscription_created: bool,
        cursor: Optional[bytes],
        record_count: int,
        remote_zones: Optional[list[str]] = None,
        remote_error: Optional[str] = None,
    ) -> None:
        """Print local sync state and remote reachability."""
        table = Table(title=f"Zone: {zone}", show_header=True, header_style="bold")
        table.add_column("Item")
        table.add_column("State")

        def flag(value: bool) -> str:
            return "[green]✓[/green]" if value else "[red]✗[/red]"

        table.add_row("Zone created", flag(zone_created))
        table.add_row("Subscription created", flag(subscription_created))
        table.add_row("Change token", format_cursor(cursor, width=32 if self.verbose else 16))
        table.add_row("Cached records", str(record_count))

        if remote_error is not None:
            table.add_row("Remote", f"[red]unreachable[/red] [dim]{remote_error}[/dim]")
        elif remote_zones is not None:
            present = zone in remote_zones
            table.add_row("Remote", f"{flag(present)} {len(remote_zones)} zone(s)")

        self._console.print()
        self._console.print(table)
        self._console.print()

    def print_history(self, entries: list[HistoryEntry]) -> None:
        """Print sync history entries."""
        if not entries:
            self._console.print("[dim]No sync history[/dim]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Time", style="dim")
        table.add_column("Operation", style="cyan")
        table.add_column("Result", justify="center")
        table.add_column("Detail")

        for entry in entries:
            result = "[green]✓[/green]" if entry.success else "[red]✗[/red]"
            detail = ", ".join(f"{key}={value}" for key, value in entry.detail.items())
            table.add_row(entry.timestamp, entry.operation, result, detail)

        self._console.print(table)

    def print_config_summary(self, config_path: str, zone: str) -> None:
        """Print configuration summary."""
        self._console.print(
            Panel(
                f"Config: {config_path}\n" f"Zone: {zone}",
                title="ZoneSync Configuration",
                border_style="blue",
            )
        )


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

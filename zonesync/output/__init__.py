# ZoneSync Output Module
# Rich console output

from zonesync.output.console import Console, create_console, format_cursor

__all__ = [
    "Console",
    "create_console",
    "format_cursor",
]

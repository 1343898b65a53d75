"""History commands for viewing past cleanups.

This module provides the `dustpan history` command group for viewing
recorded cleanups and the space they freed.
"""

import json
from datetime import datetime
from typing import Annotated

import typer
from rich.table import Table

from dustpan.cli.types import confirm_or_abort
from dustpan.core.state import HistoryManager
from dustpan.models.history import CleanupSession
from dustpan.utils.formatting import (
    console,
    format_relative_time,
    format_size,
    print_info,
    print_success,
)

app = typer.Typer(
    name="history",
    help="View history of cleanups.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of entries to show.",
        ),
    ] = 20,
    days: Annotated[
        int | None,
        typer.Option(
            "--days",
            min=1,
            help="Only show cleanups from the last N days.",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show recent cleanups.

    Examples:
        dustpan history              # Show last 20 cleanups
        dustpan history -n 50        # Show last 50 cleanups
        dustpan history --days 7     # Cleanups of the past week
        dustpan history --json       # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    manager = HistoryManager()
    if days is not None:
        sessions = manager.get_sessions_since(days)[:limit]
    else:
        sessions = manager.get_sessions(limit=limit)

    if not sessions:
        print_info("No cleanups recorded yet.")
        return

    if json_output:
        _print_json(sessions)
    else:
        _print_table(sessions)


@app.command()
def stats() -> None:
    """Show total space freed across all cleanups."""
    manager = HistoryManager()
    sessions = manager.get_sessions()
    if not sessions:
        print_info("No cleanups recorded yet.")
        return

    console.print(f"Cleanups:         {len(sessions)}")
    console.print(f"Total freed:      [success]{format_size(manager.total_freed())}[/]")
    console.print(f"Average per run:  {format_size(manager.average_per_session())}")
    console.print(f"Last cleanup:     {format_relative_time(sessions[0].timestamp)}")


@app.command()
def clear(
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Delete all recorded cleanups."""
    if not yes:
        confirm_or_abort("Delete all cleanup history?")
    HistoryManager().clear()
    print_success("History cleared.")


def _print_table(sessions: list[CleanupSession]) -> None:
    """Print sessions as Rich table.

    Args:
        sessions: Sessions to display, newest first.
    """
    table = Table(title="Cleanup History", header_style="bold_header", border_style="border")
    table.add_column("ID", style="dim")
    table.add_column("Timestamp", style="info")
    table.add_column("Type")
    table.add_column("Items", justify="right")
    table.add_column("Freed", justify="right", style="success")
    table.add_column("Details", style="muted")

    for session in sessions:
        table.add_row(
            session.id[:8],
            _format_timestamp(session.timestamp),
            session.cleanup_type.label,
            str(session.item_count),
            format_size(session.freed_bytes),
            ", ".join(session.details[:3]),
        )

    console.print(table)


def _format_timestamp(iso_timestamp: str) -> str:
    """Format ISO timestamp as YYYY-MM-DD HH:MM."""
    dt = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    return dt.strftime("%Y-%m-%d %H:%M")


def _print_json(sessions: list[CleanupSession]) -> None:
    """Print sessions as JSON for scripting."""
    output = [session.to_dict() for session in sessions]
    console.print_json(json.dumps(output))

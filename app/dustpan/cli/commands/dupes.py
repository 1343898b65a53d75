"""Duplicate file commands.

Provides commands to find files with identical size and content
prefix, and to remove every copy but one.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.progress import Progress

from dustpan.cli.display import create_duplicates_table, print_report
from dustpan.cli.types import OutputFormat, confirm_or_abort, create_engine, save_to_history
from dustpan.engine import CleanupEngine
from dustpan.models.history import CleanupType
from dustpan.scan.models import DuplicateGroup
from dustpan.utils.formatting import (
    console,
    err_console,
    format_size,
    print_info,
    print_success,
)

app = typer.Typer(
    help="Find and remove duplicate files.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def scan(
    roots: Annotated[
        list[Path] | None,
        typer.Argument(help="Directories to search. Defaults to your content folders."),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-l", help="Limit number of groups shown."),
    ] = None,
) -> None:
    """Find duplicate files without deleting anything."""
    with create_engine() as engine:
        groups = _run_scan(engine, roots)

    if not groups:
        print_success("No duplicate files found.")
        return

    display_groups = groups[:limit] if limit else groups

    if output_format == OutputFormat.JSON:
        _print_json(display_groups)
        return

    console.print(create_duplicates_table(display_groups))

    wasted = sum(g.wasted_bytes for g in groups)
    console.print(
        f"\n[dim]Found {len(groups)} duplicate groups, {format_size(wasted)} reclaimable[/dim]"
    )
    if limit and len(display_groups) < len(groups):
        console.print(
            f"[dim](showing {len(display_groups)} of {len(groups)}, limited to {limit})[/dim]"
        )


@app.command()
def clean(
    roots: Annotated[
        list[Path] | None,
        typer.Argument(help="Directories to search. Defaults to your content folders."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Remove every duplicate except the first file of each group."""
    with create_engine(dry_run=dry_run) as engine:
        groups = _run_scan(engine, roots)
        if not groups:
            print_info("No duplicate files found.")
            return

        console.print(create_duplicates_table(groups))
        wasted = sum(g.wasted_bytes for g in groups)
        extras = sum(g.count - 1 for g in groups)
        if not dry_run and not yes:
            confirm_or_abort(f"\nRemove {extras} duplicate(s) and free {format_size(wasted)}?")

        report = engine.remove_duplicate_extras()

    print_report(report)

    if not dry_run:
        details = [f"{len(groups)} groups", f"{report.removed_count} files removed"]
        save_to_history(CleanupType.DUPLICATES, report.freed_bytes, report.removed_count, details)

    if report.failures and not dry_run:
        raise typer.Exit(code=1)


# === Private helper functions ===


def _run_scan(engine: CleanupEngine, roots: list[Path] | None) -> list[DuplicateGroup]:
    """Run a duplicate scan behind a progress bar."""
    scan_roots = [r.expanduser() for r in roots] if roots else None
    with Progress(console=err_console, transient=True) as progress:
        task = progress.add_task("Collecting files…", total=1.0)

        def on_progress(fraction: float, status: str) -> None:
            progress.update(task, completed=fraction, description=status)

        return engine.find_duplicates(scan_roots, on_progress=on_progress)


def _print_json(groups: list[DuplicateGroup]) -> None:
    """Display duplicate groups as JSON."""
    data = [
        {
            "size_bytes": g.size,
            "fingerprint": g.fingerprint,
            "wasted_bytes": g.wasted_bytes,
            "paths": [str(p) for p in g.paths],
        }
        for g in groups
    ]
    console.print_json(json.dumps(data))

"""Large file commands.

Provides commands to list files above a size threshold and to remove them.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.progress import Progress

from dustpan.cli.display import create_large_files_table, print_report
from dustpan.cli.types import OutputFormat, confirm_or_abort, create_engine, save_to_history
from dustpan.engine import CleanupEngine
from dustpan.models.history import CleanupType
from dustpan.scan.models import LargeFile
from dustpan.utils.formatting import (
    console,
    err_console,
    format_size,
    print_info,
    print_success,
)

app = typer.Typer(
    help="Find and remove large files.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def scan(
    roots: Annotated[
        list[Path] | None,
        typer.Argument(help="Directories to search. Defaults to your user folders."),
    ] = None,
    threshold: Annotated[
        int | None,
        typer.Option("--threshold", "-t", min=1, help="Minimum size in bytes."),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-l", help="Limit number of results."),
    ] = None,
) -> None:
    """List large files without deleting anything."""
    with create_engine() as engine:
        files = _run_scan(engine, roots, threshold)

    if not files:
        print_success("No large files found.")
        return

    display_files = files[:limit] if limit else files

    if output_format == OutputFormat.JSON:
        _print_json(display_files)
        return

    console.print(create_large_files_table(display_files))
    total = sum(f.size for f in files)
    console.print(f"\n[dim]Found {len(files)} large files ({format_size(total)} total)[/dim]")
    if limit and len(display_files) < len(files):
        console.print(
            f"[dim](showing {len(display_files)} of {len(files)}, limited to {limit})[/dim]"
        )


@app.command()
def clean(
    roots: Annotated[
        list[Path] | None,
        typer.Argument(help="Directories to search. Defaults to your user folders."),
    ] = None,
    threshold: Annotated[
        int | None,
        typer.Option("--threshold", "-t", min=1, help="Minimum size in bytes."),
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
    """Remove every large file found."""
    with create_engine(dry_run=dry_run) as engine:
        files = _run_scan(engine, roots, threshold)
        if not files:
            print_info("No large files found.")
            return

        console.print(create_large_files_table(files))
        total = sum(f.size for f in files)
        if not dry_run and not yes:
            confirm_or_abort(f"\nRemove {len(files)} file(s) and free {format_size(total)}?")

        report = engine.large_files.delete([f.id for f in files], engine.executor)

    print_report(report)

    if not dry_run:
        details = [f"{f.path.name}: {format_size(f.size)}" for f in files[:5]]
        save_to_history(CleanupType.LARGE_FILES, report.freed_bytes, report.removed_count, details)

    if report.failures and not dry_run:
        raise typer.Exit(code=1)


# === Private helper functions ===


def _run_scan(
    engine: CleanupEngine,
    roots: list[Path] | None,
    threshold: int | None,
) -> list[LargeFile]:
    """Run a large file scan behind a progress bar."""
    scan_roots = [r.expanduser() for r in roots] if roots else None
    with Progress(console=err_console, transient=True) as progress:
        task = progress.add_task("Scanning…", total=1.0)

        def on_progress(fraction: float, status: str) -> None:
            progress.update(task, completed=fraction, description=status)

        return engine.find_large_files(threshold, scan_roots, on_progress=on_progress)


def _print_json(files: list[LargeFile]) -> None:
    """Display large files as JSON."""
    data = [{"id": f.id, "path": str(f.path), "size_bytes": f.size} for f in files]
    console.print_json(json.dumps(data))

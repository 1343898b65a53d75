"""Junk scanning and cleanup commands.

Provides commands to measure well-known cache, log and temporary file
locations, and to clean a selection of them.
"""

import json
from typing import Annotated

import typer
from rich.progress import Progress

from dustpan.cli.display import create_categories_table, create_items_table, print_report
from dustpan.cli.types import OutputFormat, confirm_or_abort, create_engine, save_to_history
from dustpan.engine import CleanupEngine
from dustpan.junk.catalog import build_catalog
from dustpan.junk.models import JunkCategory, SortMode
from dustpan.models.history import CleanupType
from dustpan.utils.formatting import (
    console,
    err_console,
    format_size,
    print_error,
    print_info,
    print_success,
)

app = typer.Typer(
    help="Scan and clean caches, logs and temporary files.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def scan(
    sort: Annotated[
        SortMode,
        typer.Option("--sort", "-s", help="Category order.", case_sensitive=False),
    ] = SortMode.SIZE_DESC,
    details: Annotated[
        bool,
        typer.Option("--details", "-d", help="List the items of every category."),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
) -> None:
    """Measure junk locations without deleting anything."""
    engine = create_engine(catalog=build_catalog())
    with engine:
        _run_scan(engine)
        categories = engine.junk.sorted_categories(sort)

        if not categories:
            print_success("No junk found.")
            return

        if output_format == OutputFormat.JSON:
            _print_json(categories)
            return

        console.print(create_categories_table(categories))
        if details:
            for category in categories:
                console.print(create_items_table(category))

        console.print(
            f"\n[dim]Found {format_size(engine.junk.total)} in {len(categories)} categories, "
            f"{format_size(engine.junk.selected_bytes)} recommended for cleaning[/dim]"
        )


@app.command()
def clean(
    select_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Clean every item, not just recommended ones."),
    ] = False,
    smart: Annotated[
        bool,
        typer.Option("--smart", help="Clean only recommended items (default)."),
    ] = False,
    categories: Annotated[
        list[str] | None,
        typer.Option("--category", "-c", help="Restrict cleaning to a category key."),
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
    """Clean junk locations.

    Directories are emptied but kept. Files go to the trash first and
    are deleted permanently only if that fails.
    """
    if select_all and smart:
        print_error("--all and --smart cannot be combined.")
        raise typer.Exit(code=1)

    engine = create_engine(dry_run=dry_run, catalog=build_catalog())
    with engine:
        _run_scan(engine)
        analyzer = engine.junk

        if select_all:
            for category in analyzer.categories:
                analyzer.toggle_category(category.id, True)
        else:
            analyzer.apply_smart_selection()

        if categories:
            unknown = [k for k in categories if analyzer.category_by_key(k) is None]
            if unknown:
                print_info(f"No junk found for: {', '.join(unknown)}")
            for category in analyzer.categories:
                if category.key not in categories:
                    analyzer.toggle_category(category.id, False)

        selected = [c for c in analyzer.categories if c.selected_size > 0]
        if not selected:
            print_info("Nothing selected to clean.")
            return

        console.print(create_categories_table(selected))
        if not dry_run and not yes:
            confirm_or_abort(f"\nClean {format_size(analyzer.selected_bytes)} of junk?")

        report = engine.clean_junk()
        print_report(report)

        if not dry_run:
            details = [f"{c.name}: {format_size(c.selected_size)}" for c in selected]
            cleanup_type = CleanupType.QUICK if select_all else CleanupType.SMART
            save_to_history(cleanup_type, report.freed_bytes, report.removed_count, details)

        if report.failures and not dry_run:
            raise typer.Exit(code=1)


# === Private helper functions ===


def _run_scan(engine: CleanupEngine) -> None:
    """Run a junk scan behind a progress bar."""
    with Progress(console=err_console, transient=True) as progress:
        task = progress.add_task("Scanning junk locations…", total=1.0)

        def on_progress(fraction: float, path: str) -> None:
            progress.update(task, completed=fraction, description=f"Measuring {path}")

        engine.analyze_junk(on_progress=on_progress)


def _print_json(categories: list[JunkCategory]) -> None:
    """Display categories as JSON."""
    data = [
        {
            "key": c.key,
            "name": c.name,
            "size_bytes": c.size,
            "selected": c.selected,
            "items": [
                {
                    "name": i.name,
                    "path": i.path,
                    "size_bytes": i.size,
                    "recommended": i.recommended,
                }
                for i in c.items
            ],
        }
        for c in categories
    ]
    console.print_json(json.dumps(data))

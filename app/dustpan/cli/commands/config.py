"""Settings commands.

Provides commands to show the effective scan settings and to write a
settings file with the defaults.
"""

from typing import Annotated

import typer
from rich.table import Table

from dustpan.cli.types import require_settings
from dustpan.core.paths import ensure_config_dir, get_settings_path
from dustpan.core.settings import ScanSettings, SettingsError, save_settings
from dustpan.utils.formatting import console, format_size, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialize scan settings.",
    invoke_without_command=True,
    no_args_is_help=True,
)

_SIZE_FIELDS = {"large_file_threshold", "duplicate_min_size", "fingerprint_bytes"}


@app.command()
def show() -> None:
    """Show the effective settings."""
    settings = require_settings()
    path = get_settings_path()

    table = Table(title="Settings", header_style="bold_header", border_style="border")
    table.add_column("Key", style="path")
    table.add_column("Value")
    table.add_column("Description", style="muted")

    for name, field_info in ScanSettings.model_fields.items():
        value = getattr(settings, name)
        if value is None:
            shown = "[muted]built-in[/]"
        elif name in _SIZE_FIELDS:
            shown = f"{value} ({format_size(value)})"
        elif isinstance(value, list):
            shown = ", ".join(value) or "[muted](none)[/]"
        else:
            shown = str(value)
        table.add_row(name, shown, field_info.description or "")

    console.print(table)
    source = str(path) if path.exists() else "defaults (no settings file)"
    console.print(f"\n[dim]Source: {source}[/dim]")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file with default values."""
    path = get_settings_path()
    if path.exists() and not force:
        print_info(f"Settings already exist: {path} (use --force to overwrite)")
        return

    try:
        ensure_config_dir()
        saved = save_settings(ScanSettings(), path)
    except (RuntimeError, SettingsError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Settings written to {saved}")

"""Directory size command.

Provides the `dustpan size` command for measuring files and directory trees.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from dustpan.scan.sizes import directory_size
from dustpan.utils.formatting import console, styled_size


def size(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Files or directories to measure."),
    ],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Show the size of files and directory trees.

    Hidden entries are skipped and symbolic links are not followed.
    Paths that do not exist measure 0 bytes.
    """
    sizes = [(p, directory_size(p.expanduser())) for p in paths]

    if json_output:
        data = [{"path": str(p), "size_bytes": s} for p, s in sizes]
        console.print_json(json.dumps(data))
        return

    table = Table(show_header=True, header_style="bold_header", border_style="border")
    table.add_column("Path", style="path")
    table.add_column("Size", justify="right")
    for p, s in sizes:
        table.add_row(str(p), styled_size(s))
    if len(sizes) > 1:
        table.add_row("[bold]Total[/]", styled_size(sum(s for _, s in sizes)))
    console.print(table)

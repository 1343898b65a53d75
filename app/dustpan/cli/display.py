"""Shared Rich display functions for scan and cleanup results.

Provides reusable table builders and summary printers for junk
categories, duplicate groups, large files and deletion reports.
"""

from rich.table import Table

from dustpan.cleanup.executor import CleanupReport, DeletionResult, FailureKind
from dustpan.junk.models import JunkCategory
from dustpan.scan.models import DuplicateGroup, LargeFile
from dustpan.utils.formatting import (
    console,
    format_size,
    print_info,
    print_success,
    print_warning,
    styled_size,
)


def _new_table(title: str) -> Table:
    return Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )


def create_categories_table(categories: list[JunkCategory]) -> Table:
    """Create a Rich table of junk categories.

    Args:
        categories: Categories in display order.

    Returns:
        Rich Table with Selected, Key, Category, Items and Size columns.
    """
    table = _new_table("Junk")
    table.add_column("", width=3, justify="center")
    table.add_column("Key", style="muted")
    table.add_column("Category", style="path")
    table.add_column("Items", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Description", style="muted")

    for category in categories:
        table.add_row(
            "[selected]✓[/]" if category.selected else "",
            category.key,
            category.name,
            str(len(category.items)),
            styled_size(category.size),
            category.description,
        )
    return table


def create_items_table(category: JunkCategory) -> Table:
    """Create a Rich table of the items of one category.

    Recommended items are highlighted.
    """
    table = _new_table(category.name)
    table.add_column("", width=3, justify="center")
    table.add_column("Item")
    table.add_column("Path", style="muted")
    table.add_column("Size", justify="right")

    for item in sorted(category.items, key=lambda i: i.size, reverse=True):
        name = f"[recommended]{item.name}[/]" if item.recommended else item.name
        table.add_row(
            "[selected]✓[/]" if item.selected else "",
            name,
            item.path,
            styled_size(item.size),
        )
    return table


def create_duplicates_table(groups: list[DuplicateGroup]) -> Table:
    """Create a Rich table of duplicate groups.

    The first member of each group is the copy that ``dupes clean`` keeps.

    Args:
        groups: Groups in display order.

    Returns:
        Rich Table with one row per member.
    """
    table = _new_table("Duplicate Files")
    table.add_column("#", justify="right", style="muted")
    table.add_column("Path", style="path")
    table.add_column("Size", justify="right")
    table.add_column("Keep", justify="center")

    for idx, group in enumerate(groups, start=1):
        for pos, path in enumerate(group.paths):
            table.add_row(
                str(idx) if pos == 0 else "",
                str(path),
                styled_size(group.size) if pos == 0 else "",
                "[success]keep[/]" if pos == 0 else "",
            )
    return table


def create_large_files_table(files: list[LargeFile]) -> Table:
    """Create a Rich table of large files, biggest first."""
    table = _new_table("Large Files")
    table.add_column("Path", style="path")
    table.add_column("Size", justify="right")
    table.add_column("ID", style="muted")

    for f in files:
        table.add_row(str(f.path), styled_size(f.size), f.id[:8])
    return table


def create_report_table(report: CleanupReport) -> Table:
    """Create a Rich table of deletion results.

    Directory targets show one row for the directory and one per failed child.
    """
    table = _new_table("Cleanup Results")
    table.add_column("Path", style="path")
    table.add_column("Status", width=10)
    table.add_column("Freed", justify="right")
    table.add_column("Details", style="muted")

    for result in report.results:
        table.add_row(*_result_row(result))
        for child in result.children:
            for failed in child.iter_failures():
                table.add_row(*_result_row(failed, indent=True))
    return table


def _result_row(result: DeletionResult, indent: bool = False) -> tuple[str, str, str, str]:
    path = f"  └ {result.path}" if indent else result.path
    if result.failure == FailureKind.NOT_FOUND:
        return path, "[muted]gone[/]", "-", "Already removed"
    if result.failure is not None:
        return path, "[error]failed[/]", "-", result.error or result.failure.value
    if result.dry_run:
        return path, "[info]dry-run[/]", format_size(result.freed_bytes), "Would delete"
    if result.children:
        removed = CleanupReport(results=[result]).removed_count
        failed = sum(1 for _ in result.iter_failures())
        detail = f"{removed} removed, {failed} failed"
        return path, "[success]cleaned[/]", format_size(result.freed_bytes), detail
    method = result.method.value if result.method is not None else ""
    return path, "[success]removed[/]", format_size(result.freed_bytes), method


def print_report(report: CleanupReport) -> None:
    """Display a deletion report and a one-line summary."""
    console.print(create_report_table(report))

    freed = format_size(report.freed_bytes)
    failures = report.failures
    if report.dry_run:
        print_info(f"Dry-run: {freed} would be freed.")
    elif failures:
        print_warning(f"Freed {freed}, {len(failures)} item(s) could not be removed")
    else:
        print_success(f"Freed {freed}.")

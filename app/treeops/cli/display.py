"""Shared Rich display functions for operation results.

Provides table builders and JSON rendering for the statistics, errors
and collected entries of a tree operation, used by all tree commands.
"""

import json
from dataclasses import asdict, fields
from typing import Any

from rich.table import Table

from treeops.errors import TreeOpsError
from treeops.filesystem.profile import DirectoryProfile
from treeops.models.entry import EntryInfo
from treeops.models.permissions import format_octal
from treeops.models.results import OperationResult
from treeops.utils.formatting import (
    console,
    create_table,
    format_entry_type,
    format_size,
    print_error,
    print_success,
    print_warning,
)


def _label(name: str) -> str:
    return name.replace("_", " ").capitalize()


def create_stats_table(result: OperationResult[Any]) -> Table:
    """Create a Rich table with one row per statistics counter.

    Counters whose name mentions bytes are shown in human-readable form.

    Args:
        result: Operation result to display.

    Returns:
        Rich Table with Counter and Value columns.
    """
    table = create_table(f"{result.operation} statistics")
    table.add_column("Counter", style="text")
    table.add_column("Value", justify="right", style="info")

    for f in fields(result.stats):
        value = getattr(result.stats, f.name)
        shown = format_size(value) if "bytes" in f.name else str(value)
        table.add_row(_label(f.name), shown)

    return table


def create_files_table(files: list[EntryInfo], title: str) -> Table:
    """Create a Rich table listing files with type, size and mode.

    Args:
        files: Entries to list, in walk order.
        title: Table title.

    Returns:
        Rich Table configured for file display.
    """
    table = create_table(title)
    table.add_column("Path", no_wrap=True)
    table.add_column("Type", width=9)
    table.add_column("Size", justify="right", style="info")
    table.add_column("Modified", style="muted")

    for entry in files:
        table.add_row(
            entry.path,
            format_entry_type(entry.entry_type),
            format_size(entry.size),
            entry.mtime.astimezone().strftime("%Y-%m-%d %H:%M"),
        )

    return table


def create_errors_table(errors: list[TreeOpsError]) -> Table:
    """Create a Rich table listing errors with the path they concern."""
    table = create_table("Errors")
    table.add_column("Kind", style="warning")
    table.add_column("Path", no_wrap=True)
    table.add_column("Message", style="muted")

    for error in errors:
        table.add_row(type(error).__name__, error.path or "-", error.message)

    return table


def create_profile_table(profile: DirectoryProfile, root: str) -> Table:
    """Create a Rich table summarizing a directory profile."""
    table = create_table(f"Profile of {root}")
    table.add_column("Entries", style="text")
    table.add_column("Count", justify="right", style="info")
    table.add_column("Size", justify="right", style="info")

    table.add_row("[entry.directory]Directories[/]", str(profile.directories), "-")
    table.add_row(
        "[entry.regular]Regular files[/]",
        str(profile.regular_files),
        format_size(profile.regular_bytes),
    )
    table.add_row(
        "[entry.symlink]Symlinks[/]",
        str(profile.symlink_files),
        format_size(profile.symlink_bytes),
    )
    table.add_row(
        "[entry.other]Other files[/]",
        str(profile.other_files),
        format_size(profile.other_bytes),
    )
    table.add_row("Total files", str(profile.total_files), format_size(profile.total_bytes))
    return table


def error_to_dict(error: TreeOpsError) -> dict[str, object]:
    """Convert an error into a JSON-serializable dictionary."""
    return {
        "kind": type(error).__name__,
        "operation": error.operation,
        "path": error.path,
        "message": error.message,
        "fatal": error.is_fatal,
    }


def entry_to_dict(entry: EntryInfo) -> dict[str, object]:
    """Convert a file entry into a JSON-serializable dictionary."""
    return {
        "path": entry.path,
        "type": entry.entry_type.value,
        "size": entry.size,
        "mtime": entry.mtime.isoformat(),
        "mode": format_octal(entry.permission_bits),
    }


def result_to_dict(result: OperationResult[Any]) -> dict[str, object]:
    """Convert an operation result into a JSON-serializable dictionary."""
    return {
        "operation": result.operation,
        "stats": asdict(result.stats),
        "fatal": error_to_dict(result.fatal) if result.fatal is not None else None,
        "errors": [error_to_dict(e) for e in result.errors],
        "directories": result.directories.paths(),
        "files": [entry_to_dict(e) for e in result.files],
    }


def print_json(data: object) -> None:
    """Print data as pretty-printed JSON."""
    console.print_json(json.dumps(data))


def print_result(result: OperationResult[Any], *, show_files: bool = False) -> None:
    """Display an operation result as tables followed by a status line.

    Args:
        result: Operation result to display.
        show_files: Also list the collected files.
    """
    if show_files and len(result.files):
        console.print(create_files_table(list(result.files), "Files"))
    console.print(create_stats_table(result))

    if result.errors:
        console.print(create_errors_table(list(result.errors)))

    if result.fatal is not None:
        print_error(str(result.fatal))
    elif result.errors:
        print_warning(f"{result.operation} finished with {len(result.errors)} error(s)")
    else:
        print_success(f"{result.operation} completed successfully.")

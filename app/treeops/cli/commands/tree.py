"""Directory tree commands.

Provides commands to copy, move, delete and find files in directory
trees by name pattern, age and permissions, and to profile a tree.
"""

from pathlib import Path
from typing import Annotated, Any

import typer

from treeops.cli.display import (
    create_errors_table,
    create_files_table,
    create_profile_table,
    error_to_dict,
    print_json,
    print_result,
    result_to_dict,
)
from treeops.cli.types import (
    OutputFormat,
    ScopeChoice,
    build_criteria,
    build_file_types,
    build_scope,
)
from treeops.core.config import ConfigError, TreeOpsConfig, load_config_or_default
from treeops.errors import TreeOpsError
from treeops.filesystem.executor import TreeOperator
from treeops.filesystem.profile import profile_tree
from treeops.models.filters import FileTypeFilter
from treeops.models.results import OperationResult
from treeops.utils.formatting import console, print_error, print_info

app = typer.Typer(
    help="Copy, move, delete and find files in directory trees.",
    invoke_without_command=True,
    no_args_is_help=True,
)

# Options shared by all selection commands
PatternOption = Annotated[
    list[str] | None,
    typer.Option("--pattern", "-p", help="Glob matched against file names (repeatable)."),
]
RegexOption = Annotated[
    list[str] | None,
    typer.Option("--regex", help="Regular expression searched in file names (repeatable)."),
]
OlderThanOption = Annotated[
    str | None,
    typer.Option("--older-than", help="Select files modified before this ISO 8601 time."),
]
NewerThanOption = Annotated[
    str | None,
    typer.Option("--newer-than", help="Select files modified after this ISO 8601 time."),
]
ModeOption = Annotated[
    str | None,
    typer.Option("--mode", help="Select files with exactly these permissions (644 or rw-r--r--)."),
]
AnyOption = Annotated[
    bool,
    typer.Option("--any", help="Select files matching any criterion instead of all."),
]
ScopeOption = Annotated[
    ScopeChoice,
    typer.Option("--scope", help="Part of the tree to cover.", case_sensitive=False),
]
SymlinksOption = Annotated[
    bool,
    typer.Option("--symlinks", help="Include symbolic links."),
]
OtherOption = Annotated[
    bool,
    typer.Option("--other", help="Include devices, pipes and sockets."),
]
NoRegularOption = Annotated[
    bool,
    typer.Option("--no-regular", help="Exclude regular files."),
]
FormatOption = Annotated[
    OutputFormat,
    typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
]
EmptyDirsOption = Annotated[
    bool,
    typer.Option("--empty-dirs", help="Recreate source directories even if nothing is copied."),
]


@app.command()
def copy(
    source: Annotated[Path, typer.Argument(help="Source directory.")],
    target: Annotated[Path, typer.Argument(help="Target directory.")],
    pattern: PatternOption = None,
    regex: RegexOption = None,
    older_than: OlderThanOption = None,
    newer_than: NewerThanOption = None,
    mode: ModeOption = None,
    match_any: AnyOption = False,
    scope: ScopeOption = ScopeChoice.ALL,
    symlinks: SymlinksOption = False,
    other: OtherOption = False,
    no_regular: NoRegularOption = False,
    empty_dirs: EmptyDirsOption = False,
    output_format: FormatOption = OutputFormat.TABLE,
) -> None:
    """Copy selected files from SOURCE into TARGET, keeping the tree layout."""
    config = _load_config()
    criteria = build_criteria(
        config,
        patterns=pattern,
        regexes=regex,
        older_than=older_than,
        newer_than=newer_than,
        mode=mode,
        match_any=match_any,
    )
    file_types = build_file_types(config, symlinks=symlinks, other=other, no_regular=no_regular)

    operator = TreeOperator(directory_permissions=config.directory_permissions)
    result = operator.copy_tree(
        source,
        target,
        file_types=file_types,
        criteria=criteria,
        scope=build_scope(scope),
        copy_empty_directories=empty_dirs or config.copy_empty_directories,
        collect=True,
    )
    _report(result, output_format)


@app.command()
def move(
    source: Annotated[Path, typer.Argument(help="Source directory.")],
    target: Annotated[Path, typer.Argument(help="Target directory.")],
    pattern: PatternOption = None,
    regex: RegexOption = None,
    older_than: OlderThanOption = None,
    newer_than: NewerThanOption = None,
    mode: ModeOption = None,
    match_any: AnyOption = False,
    scope: ScopeOption = ScopeChoice.ALL,
    symlinks: SymlinksOption = False,
    other: OtherOption = False,
    no_regular: NoRegularOption = False,
    empty_dirs: EmptyDirsOption = False,
    prune_empty: Annotated[
        bool,
        typer.Option("--prune-empty", help="Remove source directories left empty."),
    ] = False,
    output_format: FormatOption = OutputFormat.TABLE,
) -> None:
    """Move selected files from SOURCE into TARGET, keeping the tree layout."""
    config = _load_config()
    criteria = build_criteria(
        config,
        patterns=pattern,
        regexes=regex,
        older_than=older_than,
        newer_than=newer_than,
        mode=mode,
        match_any=match_any,
    )
    file_types = build_file_types(config, symlinks=symlinks, other=other, no_regular=no_regular)

    operator = TreeOperator(directory_permissions=config.directory_permissions)
    result = operator.move_tree(
        source,
        target,
        file_types=file_types,
        criteria=criteria,
        scope=build_scope(scope),
        copy_empty_directories=empty_dirs or config.copy_empty_directories,
        delete_empty_source_directories=prune_empty or config.delete_empty_source_directories,
        collect=True,
    )
    _report(result, output_format)


@app.command()
def delete(
    root: Annotated[Path, typer.Argument(help="Root directory.")],
    pattern: PatternOption = None,
    regex: RegexOption = None,
    older_than: OlderThanOption = None,
    newer_than: NewerThanOption = None,
    mode: ModeOption = None,
    match_any: AnyOption = False,
    scope: ScopeOption = ScopeChoice.ALL,
    symlinks: SymlinksOption = False,
    other: OtherOption = False,
    no_regular: NoRegularOption = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    output_format: FormatOption = OutputFormat.TABLE,
) -> None:
    """Delete selected files under ROOT. Directories are never deleted."""
    config = _load_config()
    criteria = build_criteria(
        config,
        patterns=pattern,
        regexes=regex,
        older_than=older_than,
        newer_than=newer_than,
        mode=mode,
        match_any=match_any,
    )
    file_types = build_file_types(config, symlinks=symlinks, other=other, no_regular=no_regular)
    operation_scope = build_scope(scope)
    operator = TreeOperator(directory_permissions=config.directory_permissions)

    # Preview with a read-only walk unless the user skipped confirmation
    if dry_run or not yes:
        preview = operator.find_tree(
            root, file_types=file_types, criteria=criteria, scope=operation_scope
        )
        if preview.aborted:
            _report(preview, output_format)
            return

        if dry_run:
            if output_format == OutputFormat.JSON:
                print_json(result_to_dict(preview))
            else:
                if len(preview.files):
                    table = create_files_table(list(preview.files), "Planned Deletions (dry-run)")
                    console.print(table)
                print_info(f"Dry-run: {preview.stats.files_found} file(s) would be deleted.")
            _exit_on_errors(preview)
            return

        if not len(preview.files):
            print_info("No files match the selection.")
            return

        console.print(create_files_table(list(preview.files), "Planned Deletions"))
        confirmed = typer.confirm(
            f"\nDelete {len(preview.files)} file(s) under {root}?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    result = operator.delete_tree(
        root,
        file_types=file_types,
        criteria=criteria,
        scope=operation_scope,
        collect=True,
    )
    _report(result, output_format)


@app.command()
def find(
    root: Annotated[Path, typer.Argument(help="Root directory.")],
    pattern: PatternOption = None,
    regex: RegexOption = None,
    older_than: OlderThanOption = None,
    newer_than: NewerThanOption = None,
    mode: ModeOption = None,
    match_any: AnyOption = False,
    scope: ScopeOption = ScopeChoice.ALL,
    no_symlinks: Annotated[
        bool,
        typer.Option("--no-symlinks", help="Exclude symbolic links."),
    ] = False,
    no_other: Annotated[
        bool,
        typer.Option("--no-other", help="Exclude devices, pipes and sockets."),
    ] = False,
    no_regular: NoRegularOption = False,
    output_format: FormatOption = OutputFormat.TABLE,
) -> None:
    """List files under ROOT matching the selection. Nothing is modified."""
    config = _load_config()
    criteria = build_criteria(
        config,
        patterns=pattern,
        regexes=regex,
        older_than=older_than,
        newer_than=newer_than,
        mode=mode,
        match_any=match_any,
    )
    file_types = FileTypeFilter(
        include_regular=not no_regular,
        include_symlink=not no_symlinks,
        include_other=not no_other,
    )

    result = TreeOperator().find_tree(
        root, file_types=file_types, criteria=criteria, scope=build_scope(scope)
    )
    _report(result, output_format, show_files=True)


@app.command()
def profile(
    root: Annotated[Path, typer.Argument(help="Root directory.")],
    scope: ScopeOption = ScopeChoice.ALL,
    output_format: FormatOption = OutputFormat.TABLE,
) -> None:
    """Count directories and files by type under ROOT."""
    try:
        tree_profile, errors = profile_tree(root, build_scope(scope))
    except TreeOpsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        data = {
            "root": str(root),
            "directories": tree_profile.directories,
            "regular_files": tree_profile.regular_files,
            "regular_bytes": tree_profile.regular_bytes,
            "symlink_files": tree_profile.symlink_files,
            "symlink_bytes": tree_profile.symlink_bytes,
            "other_files": tree_profile.other_files,
            "other_bytes": tree_profile.other_bytes,
            "errors": [error_to_dict(e) for e in errors],
        }
        print_json(data)
    else:
        console.print(create_profile_table(tree_profile, str(root)))
        if errors:
            console.print(create_errors_table(list(errors)))

    if errors:
        raise typer.Exit(code=1)


# === Private helper functions ===


def _load_config() -> TreeOpsConfig:
    """Load the user config, exiting with an error if it is invalid."""
    try:
        return load_config_or_default()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def _report(
    result: OperationResult[Any],
    output_format: OutputFormat,
    *,
    show_files: bool = False,
) -> None:
    """Display a result and exit non-zero if it has any error."""
    if output_format == OutputFormat.JSON:
        print_json(result_to_dict(result))
    else:
        print_result(result, show_files=show_files)
    _exit_on_errors(result)


def _exit_on_errors(result: OperationResult[Any]) -> None:
    if result.aborted or result.errors:
        raise typer.Exit(code=1)

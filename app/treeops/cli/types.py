"""Shared types and utilities for CLI commands.

This module provides common enums and the helpers that turn command-line
options into the selection, file type and scope objects the tree
operations take.
"""

from dataclasses import replace
from datetime import datetime
from enum import Enum

import typer

from treeops.core.config import TreeOpsConfig
from treeops.models.criteria import SelectCriterionMode, SelectionCriteria
from treeops.models.filters import FileTypeFilter, OperationScope
from treeops.models.permissions import parse_mode


class ScopeChoice(str, Enum):
    """Part of the tree a command covers."""

    ALL = "all"
    PARENT = "parent"
    SUBTREE = "subtree"


class OutputFormat(str, Enum):
    """Output format options for tree commands."""

    TABLE = "table"
    JSON = "json"


def build_scope(choice: ScopeChoice) -> OperationScope:
    """Get the OperationScope for a scope choice."""
    if choice == ScopeChoice.PARENT:
        return OperationScope.parent_only()
    if choice == ScopeChoice.SUBTREE:
        return OperationScope.subtree_only()
    return OperationScope.full_tree()


def build_file_types(
    config: TreeOpsConfig,
    *,
    symlinks: bool,
    other: bool,
    no_regular: bool,
) -> FileTypeFilter:
    """Build the file type filter from flags and configured defaults.

    Flags can only widen what the config selects, except --no-regular.
    """
    configured = config.file_types()
    return replace(
        configured,
        include_regular=configured.include_regular and not no_regular,
        include_symlink=configured.include_symlink or symlinks,
        include_other=configured.include_other or other,
    )


def parse_timestamp(value: str | None, option: str) -> datetime | None:
    """Parse an ISO 8601 timestamp option.

    Raises:
        typer.BadParameter: If the value is not a valid timestamp.
    """
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        msg = f"{option}: not an ISO 8601 timestamp: {value!r}"
        raise typer.BadParameter(msg) from None


def build_criteria(
    config: TreeOpsConfig,
    *,
    patterns: list[str] | None,
    regexes: list[str] | None,
    older_than: str | None,
    newer_than: str | None,
    mode: str | None,
    match_any: bool,
) -> SelectionCriteria:
    """Build selection criteria from command-line options.

    Raises:
        typer.BadParameter: If a timestamp or mode cannot be parsed.
    """
    mode_bits: int | None = None
    if mode is not None:
        try:
            mode_bits = parse_mode(mode)
        except ValueError as e:
            raise typer.BadParameter(f"--mode: {e}") from None

    return SelectionCriteria(
        name_patterns=tuple(patterns or ()),
        name_regexes=tuple(regexes or ()),
        older_than=parse_timestamp(older_than, "--older-than"),
        newer_than=parse_timestamp(newer_than, "--newer-than"),
        mode=mode_bits,
        combine=SelectCriterionMode.OR if match_any else config.combine,
    )

"""Data models for treeops.

This module exports the core data structures used throughout the application.
"""

from treeops.models.collections import DirectoryCollection, FileCollection
from treeops.models.criteria import SelectCriterionMode, SelectionCriteria
from treeops.models.entry import DirectoryNode, EntryInfo, EntryType
from treeops.models.filters import FileTypeFilter, OperationScope
from treeops.models.permissions import format_mode, format_octal, parse_mode
from treeops.models.results import OperationResult
from treeops.models.stats import TreeCopyStats, TreeDeleteStats, TreeFindStats, TreeMoveStats

__all__ = [
    "DirectoryCollection",
    "DirectoryNode",
    "EntryInfo",
    "EntryType",
    "FileCollection",
    "FileTypeFilter",
    "OperationResult",
    "OperationScope",
    "SelectCriterionMode",
    "SelectionCriteria",
    "TreeCopyStats",
    "TreeDeleteStats",
    "TreeFindStats",
    "TreeMoveStats",
    "format_mode",
    "format_octal",
    "parse_mode",
]

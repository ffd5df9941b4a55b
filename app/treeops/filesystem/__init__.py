"""Directory tree operations module.

This module provides the file type classifier, selection criteria
evaluation, the tree walker, and the bulk copy/move/delete/find
operations built on top of them.
"""

from treeops.filesystem.classifier import classify_mode, classify_path
from treeops.filesystem.executor import TreeOperator
from treeops.filesystem.profile import DirectoryProfile, profile_directory, profile_tree
from treeops.filesystem.selection import SelectionEvaluator, matches
from treeops.filesystem.walker import TreeWalker

__all__ = [
    "DirectoryProfile",
    "SelectionEvaluator",
    "TreeOperator",
    "TreeWalker",
    "classify_mode",
    "classify_path",
    "matches",
    "profile_directory",
    "profile_tree",
]

"""Directory profiling.

Counts the entries of a single directory or of a whole tree by type,
without selection criteria and without modifying anything.
"""

import logging
import os
from dataclasses import dataclass

from treeops.errors import EntryError, RootNotFoundError
from treeops.filesystem import primitives
from treeops.filesystem.walker import TreeWalker
from treeops.models.entry import DirectoryNode, EntryInfo, EntryType
from treeops.models.filters import OperationScope

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DirectoryProfile:
    """Entry counts for a directory or a directory tree.

    Attributes:
        directories: Subdirectories (single directory) or directories
            visited (tree).
        regular_files: Number of regular files.
        regular_bytes: Total size of the regular files.
        symlink_files: Number of symbolic links.
        symlink_bytes: Total lstat size of the symbolic links.
        other_files: Number of other non-regular files.
        other_bytes: Total size of the other non-regular files.
    """

    directories: int = 0
    regular_files: int = 0
    regular_bytes: int = 0
    symlink_files: int = 0
    symlink_bytes: int = 0
    other_files: int = 0
    other_bytes: int = 0

    @property
    def total_files(self) -> int:
        """Number of non-directory entries."""
        return self.regular_files + self.symlink_files + self.other_files

    @property
    def total_bytes(self) -> int:
        """Total size of all non-directory entries."""
        return self.regular_bytes + self.symlink_bytes + self.other_bytes

    def add(self, entry: EntryInfo) -> None:
        """Count one entry."""
        match entry.entry_type:
            case EntryType.DIRECTORY:
                self.directories += 1
            case EntryType.REGULAR:
                self.regular_files += 1
                self.regular_bytes += entry.size
            case EntryType.SYMLINK:
                self.symlink_files += 1
                self.symlink_bytes += entry.size
            case EntryType.OTHER:
                self.other_files += 1
                self.other_bytes += entry.size


def profile_directory(path: str | os.PathLike[str]) -> DirectoryProfile:
    """Profile the immediate children of one directory.

    Args:
        path: Directory to profile.

    Returns:
        DirectoryProfile counting subdirectories and files by type.

    Raises:
        RootNotFoundError: If path is not an existing directory.
        DirectoryReadError: If the directory cannot be listed.
    """
    node = _existing_root(path, "profile_directory")
    profile = DirectoryProfile()
    for entry in primitives.read_directory_entries(node.path):
        profile.add(entry)
    return profile


def profile_tree(
    root: str | os.PathLike[str],
    scope: OperationScope | None = None,
) -> tuple[DirectoryProfile, list[EntryError]]:
    """Profile every directory a tree walk visits.

    Here ``directories`` counts the directories visited by the walk, not
    their subdirectory entries.

    Args:
        root: Root of the tree.
        scope: Part of the tree to cover (full tree by default).

    Returns:
        Tuple of (profile, non-fatal errors encountered during the walk).

    Raises:
        ConfigurationError: If the scope is empty.
        RootNotFoundError: If root is not an existing directory.
    """
    profile = DirectoryProfile()

    def on_directory(node: DirectoryNode) -> None:
        profile.directories += 1

    def on_file(node: DirectoryNode, entry: EntryInfo) -> None:
        profile.add(entry)

    errors = TreeWalker(scope).walk(root, on_directory, on_file, operation="profile_tree")
    logger.info(
        "profile_tree %s: %d directories, %d files, %d bytes",
        os.fspath(root),
        profile.directories,
        profile.total_files,
        profile.total_bytes,
    )
    return profile, errors


def _existing_root(path: str | os.PathLike[str], operation: str) -> DirectoryNode:
    node = DirectoryNode.from_path(path)
    if not node.exists:
        raise RootNotFoundError(
            "Root directory does not exist", operation=operation, path=node.path
        )
    return node

"""Directory and file entry models.

This module defines the structures the tree walker hands to callers:
resolved directories (DirectoryNode) and the metadata of a single
directory entry (EntryInfo), together with the entry type used by the
file type classifier.
"""

import os
import stat
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path


class EntryType(str, Enum):
    """Classification of a filesystem entry.

    Attributes:
        DIRECTORY: Directory. Never subject to file type filtering.
        REGULAR: Regular file (ordinary byte stream).
        SYMLINK: Symbolic link, whatever it points to.
        OTHER: Any other non-regular file (device, pipe, socket).
    """

    DIRECTORY = "directory"
    REGULAR = "regular"
    SYMLINK = "symlink"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class DirectoryNode:
    """A resolved directory visited during a tree walk.

    Attributes:
        path: Absolute directory path.
        exists: Whether the directory existed when the node was built.
        parent: Absolute path of the parent directory (lookup only).
        volume: Volume identifier (drive on Windows, anchor on POSIX).
    """

    path: str
    exists: bool
    parent: str
    volume: str

    def __post_init__(self) -> None:
        """Validate directory node data after initialization."""
        if not self.path:
            msg = "Directory path cannot be empty"
            raise ValueError(msg)

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> "DirectoryNode":
        """Build a node from a path string, resolving it to an absolute path.

        Args:
            path: Directory path, absolute or relative to the working directory.

        Returns:
            DirectoryNode for the normalized absolute path.
        """
        absolute = os.path.abspath(os.fspath(path))
        return cls(
            path=absolute,
            exists=os.path.isdir(absolute),
            parent=os.path.dirname(absolute),
            volume=Path(absolute).anchor,
        )

    @property
    def name(self) -> str:
        """Base name of the directory."""
        return os.path.basename(self.path)

    def relative_to(self, root: "DirectoryNode") -> str:
        """Path of this directory relative to another node ("." for itself)."""
        return os.path.relpath(self.path, root.path)


@dataclass(frozen=True, slots=True)
class EntryInfo:
    """Metadata for a single directory entry.

    Attributes:
        path: Absolute path of the entry.
        name: Base name of the entry.
        size: Size in bytes as reported by lstat.
        mtime: Last modification time (timezone-aware).
        mode: Raw st_mode from lstat (type and permission bits).
        entry_type: Classified entry type.
    """

    path: str
    name: str
    size: int
    mtime: datetime
    mode: int
    entry_type: EntryType

    @property
    def directory(self) -> str:
        """Absolute path of the directory containing this entry."""
        return os.path.dirname(self.path)

    @property
    def permission_bits(self) -> int:
        """Permission bits of the entry (st_mode without type bits)."""
        return stat.S_IMODE(self.mode)

    @property
    def is_directory(self) -> bool:
        """Check if this entry is a directory."""
        return self.entry_type == EntryType.DIRECTORY

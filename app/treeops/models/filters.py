"""File type filter and traversal scope.

Both are small immutable configuration objects that every tree
operation validates before it touches the filesystem.
"""

from dataclasses import dataclass

from treeops.errors import ConfigurationError
from treeops.models.entry import EntryType


@dataclass(frozen=True, slots=True)
class FileTypeFilter:
    """Which kinds of non-directory entries an operation may select.

    Attributes:
        include_regular: Select regular files.
        include_symlink: Select symbolic links.
        include_other: Select other non-regular files (devices, pipes, sockets).
    """

    include_regular: bool = True
    include_symlink: bool = False
    include_other: bool = False

    @classmethod
    def all(cls) -> "FileTypeFilter":
        """Create a filter that admits every non-directory entry."""
        return cls(include_regular=True, include_symlink=True, include_other=True)

    @property
    def is_empty(self) -> bool:
        """Check if the filter admits nothing."""
        return not (self.include_regular or self.include_symlink or self.include_other)

    def allows(self, entry_type: EntryType) -> bool:
        """Check if an entry type passes the filter.

        Directories never pass; they are structural, not selectable.
        """
        if entry_type == EntryType.REGULAR:
            return self.include_regular
        if entry_type == EntryType.SYMLINK:
            return self.include_symlink
        if entry_type == EntryType.OTHER:
            return self.include_other
        return False

    def validate(self, operation: str = "") -> None:
        """Reject a filter that admits nothing.

        Raises:
            ConfigurationError: If all three file type flags are false.
        """
        if self.is_empty:
            raise ConfigurationError(
                "File type filter is empty: regular, symlink and other files are all excluded",
                operation=operation,
            )


@dataclass(frozen=True, slots=True)
class OperationScope:
    """Which part of a directory tree an operation covers.

    Attributes:
        include_parent_directory: Cover the root directory itself.
        include_subtree: Cover the descendants of the root directory.
    """

    include_parent_directory: bool = True
    include_subtree: bool = True

    @classmethod
    def full_tree(cls) -> "OperationScope":
        """Root directory and all of its descendants."""
        return cls(include_parent_directory=True, include_subtree=True)

    @classmethod
    def parent_only(cls) -> "OperationScope":
        """Root directory only."""
        return cls(include_parent_directory=True, include_subtree=False)

    @classmethod
    def subtree_only(cls) -> "OperationScope":
        """Descendants of the root directory, excluding the root itself."""
        return cls(include_parent_directory=False, include_subtree=True)

    @property
    def is_empty(self) -> bool:
        """Check if the scope covers nothing."""
        return not (self.include_parent_directory or self.include_subtree)

    def validate(self, operation: str = "") -> None:
        """Reject the null scope.

        Raises:
            ConfigurationError: If both flags are false.
        """
        if self.is_empty:
            raise ConfigurationError(
                "Operation scope is empty: "
                "neither the parent directory nor the subtree is included",
                operation=operation,
            )

"""Error types for directory tree operations.

Errors are split into two classes. Non-fatal errors (subclasses of
EntryError) are scoped to a single file or directory and are collected
while the operation keeps going. Everything else is fatal and stops the
operation.
"""


class TreeOpsError(Exception):
    """Base exception for all tree operation errors.

    Attributes:
        operation: Logical operation name (e.g., "copy_tree").
        path: Filesystem path involved, if any.
    """

    def __init__(self, message: str, *, operation: str = "", path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.path = path

    def __str__(self) -> str:
        text = f"{self.operation}: {self.message}" if self.operation else self.message
        if self.path:
            text = f"{text} [{self.path}]"
        return text

    @property
    def is_fatal(self) -> bool:
        """Whether this error halts the operation."""
        return True


class ConfigurationError(TreeOpsError):
    """Raised when an operation is configured with invalid parameters."""


class RootNotFoundError(TreeOpsError):
    """Raised when the root directory of an operation does not exist."""


class FileDeleteError(TreeOpsError):
    """Raised when a file selected for deletion cannot be removed."""


class EntryError(TreeOpsError):
    """Base class for non-fatal, per-entry errors."""

    @property
    def is_fatal(self) -> bool:
        return False


class DirectoryReadError(EntryError):
    """A directory could not be listed; its subtree was skipped."""


class DirectoryCreateError(EntryError):
    """A target directory could not be created."""


class DirectoryRemoveError(EntryError):
    """An emptied source directory could not be removed."""


class FileCopyError(EntryError):
    """A single file could not be copied."""


class FileMoveError(EntryError):
    """A copied file could not be removed from its source location."""

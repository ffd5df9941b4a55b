"""Operation result container.

Every tree operation returns an OperationResult: its statistics, the
non-fatal errors collected along the way, the fatal error that stopped
it (if any) and the optional result collections.
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from treeops.errors import EntryError, TreeOpsError
from treeops.models.collections import DirectoryCollection, FileCollection
from treeops.models.stats import TreeCopyStats, TreeDeleteStats, TreeFindStats, TreeMoveStats

S = TypeVar("S", TreeCopyStats, TreeMoveStats, TreeDeleteStats, TreeFindStats)


@dataclass(slots=True)
class OperationResult(Generic[S]):
    """Outcome of a tree operation.

    Attributes:
        operation: Logical operation name (e.g., "copy_tree").
        stats: Operation-specific statistics.
        errors: Non-fatal errors, in the order they occurred.
        fatal: Error that halted the operation, None if it ran to completion.
        directories: Directories visited (populated on request).
        files: Files processed (populated on request).
    """

    operation: str
    stats: S
    errors: list[EntryError] = field(default_factory=list)
    fatal: TreeOpsError | None = None
    directories: DirectoryCollection = field(default_factory=DirectoryCollection)
    files: FileCollection = field(default_factory=FileCollection)

    @property
    def aborted(self) -> bool:
        """Check if the operation was halted by a fatal error."""
        return self.fatal is not None

    @property
    def ok(self) -> bool:
        """Check if the operation completed without any error."""
        return self.fatal is None and not self.errors

"""Statistics records for tree operations.

Each operation owns one record for its whole run. Counters only ever
increase while the operation runs; the caller receives a copy once the
operation has finished.
"""

from dataclasses import dataclass, replace
from typing import Self


@dataclass(slots=True)
class _Stats:
    def snapshot(self) -> Self:
        """Return an independent copy of the counters."""
        return replace(self)


@dataclass(slots=True)
class TreeCopyStats(_Stats):
    """Statistics for a copy-tree operation.

    Attributes:
        total_dirs_scanned: Source directories visited.
        dirs_copied: Target directories that received content or were
            created for an empty source directory.
        dirs_created: Target directories that did not exist and were created.
        total_files_processed: Non-directory entries examined.
        files_copied: Entries copied to the target tree.
        file_bytes_copied: Bytes of the copied entries.
        files_not_copied: Entries skipped by the filters or failed to copy.
        file_bytes_not_copied: Bytes of the entries not copied.
    """

    total_dirs_scanned: int = 0
    dirs_copied: int = 0
    dirs_created: int = 0
    total_files_processed: int = 0
    files_copied: int = 0
    file_bytes_copied: int = 0
    files_not_copied: int = 0
    file_bytes_not_copied: int = 0


@dataclass(slots=True)
class TreeMoveStats(_Stats):
    """Statistics for a move-tree operation.

    Attributes:
        total_dirs_scanned: Source directories visited.
        dirs_created: Target directories created.
        total_src_files_processed: Non-directory source entries examined.
        source_files_moved: Entries copied to the target and removed from the source.
        source_file_bytes_moved: Bytes of the moved entries.
        source_files_remaining: Entries left in the source tree.
        source_file_bytes_remaining: Bytes of the entries left in the source.
        source_dirs_deleted: Emptied source directories that were removed.
    """

    total_dirs_scanned: int = 0
    dirs_created: int = 0
    total_src_files_processed: int = 0
    source_files_moved: int = 0
    source_file_bytes_moved: int = 0
    source_files_remaining: int = 0
    source_file_bytes_remaining: int = 0
    source_dirs_deleted: int = 0


@dataclass(slots=True)
class TreeDeleteStats(_Stats):
    """Statistics for a delete-tree operation.

    Attributes:
        total_dirs_scanned: Directories visited.
        total_files_processed: Non-directory entries examined.
        files_deleted: Entries deleted.
        files_deleted_bytes: Bytes of the deleted entries.
        files_remaining: Entries not selected for deletion.
        files_remaining_bytes: Bytes of the remaining entries.
        dirs_with_deletions: Directories in which at least one entry was deleted.
    """

    total_dirs_scanned: int = 0
    total_files_processed: int = 0
    files_deleted: int = 0
    files_deleted_bytes: int = 0
    files_remaining: int = 0
    files_remaining_bytes: int = 0
    dirs_with_deletions: int = 0


@dataclass(slots=True)
class TreeFindStats(_Stats):
    """Statistics for a find-tree operation.

    Attributes:
        total_dirs_scanned: Directories visited.
        total_files_processed: Non-directory entries examined.
        files_found: Entries that passed the filters.
        file_bytes_found: Bytes of the found entries.
        files_skipped: Entries rejected by the filters.
    """

    total_dirs_scanned: int = 0
    total_files_processed: int = 0
    files_found: int = 0
    file_bytes_found: int = 0
    files_skipped: int = 0

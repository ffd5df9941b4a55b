"""Bulk tree operations.

TreeOperator drives the TreeWalker for the four tree operations:
copy, move, delete and find. Each operation validates its configuration
before touching the filesystem, accumulates statistics while walking,
and returns an OperationResult that separates non-fatal per-entry errors
from the fatal error (if any) that stopped the operation.

Operations are synchronous and run to completion or failure; there is
no cancellation. Callers that need to cancel must run the operator in a
thread or process they control.
"""

import logging
import os

from treeops.errors import (
    ConfigurationError,
    DirectoryCreateError,
    DirectoryRemoveError,
    EntryError,
    FileCopyError,
    FileDeleteError,
    FileMoveError,
    RootNotFoundError,
    TreeOpsError,
)
from treeops.filesystem.primitives import (
    DEFAULT_DIRECTORY_PERMISSIONS,
    copy_file,
    copy_symlink,
    delete_file,
    make_directory,
)
from treeops.filesystem.selection import SelectionEvaluator
from treeops.filesystem.walker import TreeWalker
from treeops.models.collections import DirectoryCollection, FileCollection
from treeops.models.criteria import SelectionCriteria
from treeops.models.entry import DirectoryNode, EntryInfo, EntryType
from treeops.models.filters import FileTypeFilter, OperationScope
from treeops.models.results import OperationResult, S
from treeops.models.stats import TreeCopyStats, TreeDeleteStats, TreeFindStats, TreeMoveStats

logger = logging.getLogger(__name__)

COPY_TREE = "copy_tree"
MOVE_TREE = "move_tree"
DELETE_TREE = "delete_tree"
FIND_TREE = "find_tree"


class _Run:
    """State shared by every operation run: errors and result collections."""

    def __init__(self, operation: str, collect: bool) -> None:
        self.operation = operation
        self.collect = collect
        self.errors: list[EntryError] = []
        self.directories = DirectoryCollection()
        self.files = FileCollection()

    def record(self, error: EntryError) -> None:
        error.operation = self.operation
        logger.warning("%s", error)
        self.errors.append(error)


class _TransferRun(_Run):
    """Copies (and optionally moves) selected files into a target tree."""

    def __init__(
        self,
        operation: str,
        source: DirectoryNode,
        target: str,
        file_types: FileTypeFilter,
        evaluator: SelectionEvaluator,
        *,
        copy_empty_directories: bool,
        delete_source: bool,
        directory_permissions: int,
        collect: bool,
    ) -> None:
        super().__init__(operation, collect)
        self.stats = TreeCopyStats()
        self.visited: list[DirectoryNode] = []
        self.files_moved = 0
        self.bytes_moved = 0
        self.bytes_processed = 0

        self._source = source
        self._target = target
        self._file_types = file_types
        self._evaluator = evaluator
        self._copy_empty_directories = copy_empty_directories
        self._delete_source = delete_source
        self._directory_permissions = directory_permissions

        self._target_dir = target
        self._target_ready = False
        self._target_failed = False

    def on_directory(self, node: DirectoryNode) -> None:
        self.stats.total_dirs_scanned += 1
        self.visited.append(node)
        if self.collect:
            self.directories.append(node)

        self._target_dir = os.path.normpath(
            os.path.join(self._target, node.relative_to(self._source))
        )
        self._target_ready = False
        self._target_failed = False

        if self._copy_empty_directories:
            self._ensure_target_dir()

    def on_file(self, node: DirectoryNode, entry: EntryInfo) -> None:
        self.stats.total_files_processed += 1
        self.bytes_processed += entry.size

        if not (self._file_types.allows(entry.entry_type) and self._evaluator.matches(entry)):
            self._not_copied(entry)
            return

        if not self._ensure_target_dir():
            self._not_copied(entry)
            return

        dest = os.path.join(self._target_dir, entry.name)
        try:
            if entry.entry_type == EntryType.SYMLINK:
                copy_symlink(entry.path, dest)
            else:
                copy_file(entry.path, entry, dest)
        except FileCopyError as e:
            self.record(e)
            self._not_copied(entry)
            return

        logger.debug("Copied %s -> %s", entry.path, dest)
        self.stats.files_copied += 1
        self.stats.file_bytes_copied += entry.size

        if self._delete_source:
            if not self._remove_source(entry, dest):
                return
        if self.collect:
            self.files.append(entry)

    def prune_empty_directories(self) -> int:
        """Remove visited source directories left empty, deepest first."""
        removed = 0
        for node in reversed(self.visited):
            try:
                if os.listdir(node.path):
                    continue
                os.rmdir(node.path)
            except OSError as e:
                msg = f"Cannot remove empty source directory: {e}"
                self.record(DirectoryRemoveError(msg, path=node.path))
                continue
            logger.debug("Removed empty source directory %s", node.path)
            removed += 1
        return removed

    def _ensure_target_dir(self) -> bool:
        """Create the current target directory on first use."""
        if self._target_ready:
            return True
        if self._target_failed:
            return False
        try:
            created = make_directory(self._target_dir, self._directory_permissions)
        except DirectoryCreateError as e:
            self.record(e)
            self._target_failed = True
            return False
        if created:
            self.stats.dirs_created += 1
        self.stats.dirs_copied += 1
        self._target_ready = True
        return True

    def _remove_source(self, entry: EntryInfo, dest: str) -> bool:
        """Delete the source of a copied file; undo the copy if that fails."""
        try:
            delete_file(entry.path)
        except FileDeleteError as e:
            self.record(FileMoveError(e.message, path=entry.path))
            try:
                os.remove(dest)
            except OSError as rollback_error:
                logger.warning("Cannot remove copied file %s: %s", dest, rollback_error)
            return False
        self.files_moved += 1
        self.bytes_moved += entry.size
        return True

    def _not_copied(self, entry: EntryInfo) -> None:
        self.stats.files_not_copied += 1
        self.stats.file_bytes_not_copied += entry.size


class _DeleteRun(_Run):
    """Deletes selected files; a failed deletion ends the operation."""

    def __init__(
        self,
        operation: str,
        file_types: FileTypeFilter,
        evaluator: SelectionEvaluator,
        collect: bool,
    ) -> None:
        super().__init__(operation, collect)
        self.stats = TreeDeleteStats()
        self._file_types = file_types
        self._evaluator = evaluator
        self._dirs_with_deletions: set[str] = set()

    def on_directory(self, node: DirectoryNode) -> None:
        self.stats.total_dirs_scanned += 1
        if self.collect:
            self.directories.append(node)

    def on_file(self, node: DirectoryNode, entry: EntryInfo) -> None:
        self.stats.total_files_processed += 1

        if not (self._file_types.allows(entry.entry_type) and self._evaluator.matches(entry)):
            self.stats.files_remaining += 1
            self.stats.files_remaining_bytes += entry.size
            return

        try:
            delete_file(entry.path)
        except FileDeleteError as e:
            e.operation = self.operation
            raise

        logger.debug("Deleted %s", entry.path)
        self.stats.files_deleted += 1
        self.stats.files_deleted_bytes += entry.size
        self._dirs_with_deletions.add(node.path)
        self.stats.dirs_with_deletions = len(self._dirs_with_deletions)
        if self.collect:
            self.files.append(entry)


class _FindRun(_Run):
    """Collects selected files without modifying the filesystem."""

    def __init__(
        self,
        operation: str,
        file_types: FileTypeFilter,
        evaluator: SelectionEvaluator,
        collect: bool,
    ) -> None:
        super().__init__(operation, collect)
        self.stats = TreeFindStats()
        self._file_types = file_types
        self._evaluator = evaluator

    def on_directory(self, node: DirectoryNode) -> None:
        self.stats.total_dirs_scanned += 1
        if self.collect:
            self.directories.append(node)

    def on_file(self, node: DirectoryNode, entry: EntryInfo) -> None:
        self.stats.total_files_processed += 1
        if self._file_types.allows(entry.entry_type) and self._evaluator.matches(entry):
            self.stats.files_found += 1
            self.stats.file_bytes_found += entry.size
            if self.collect:
                self.files.append(entry)
        else:
            self.stats.files_skipped += 1


class TreeOperator:
    """Performs selective copy, move, delete and find over directory trees.

    Every method returns an OperationResult and never raises for
    operational failures: configuration problems, a missing root and
    failed deletions are reported through OperationResult.fatal, per-entry
    failures through OperationResult.errors.

    Attributes:
        _directory_permissions: Mode used for directories created in target trees.

    Example:
        >>> operator = TreeOperator()
        >>> result = operator.copy_tree(
        ...     "/src", "/dst", criteria=SelectionCriteria(name_patterns=("*.txt",))
        ... )
        >>> result.stats.files_copied
        2
    """

    def __init__(self, directory_permissions: int = DEFAULT_DIRECTORY_PERMISSIONS) -> None:
        """Initialize the TreeOperator.

        Args:
            directory_permissions: Permission bits for created directories.
        """
        self._directory_permissions = directory_permissions

    def copy_tree(
        self,
        source: str | os.PathLike[str],
        target: str | os.PathLike[str],
        *,
        file_types: FileTypeFilter | None = None,
        criteria: SelectionCriteria | None = None,
        scope: OperationScope | None = None,
        copy_empty_directories: bool = False,
        collect: bool = False,
    ) -> OperationResult[TreeCopyStats]:
        """Copy selected files from a source tree into a target tree.

        Each visited source directory maps to the directory at the same
        relative path under target. Target directories are created when
        the first selected file is copied into them, or for every visited
        directory if copy_empty_directories is set. Regular files are
        stream-copied and size-verified; symlinks are recreated. A failed
        copy is non-fatal.

        Args:
            source: Root of the source tree.
            target: Root of the target tree. Must not lie inside source.
            file_types: File types to copy (regular files only by default).
            criteria: Selection criteria (every file by default).
            scope: Part of the source tree to cover (full tree by default).
            copy_empty_directories: Create every visited directory in the target.
            collect: Record visited directories and copied files in the result.

        Returns:
            OperationResult with TreeCopyStats.
        """
        file_types = file_types or FileTypeFilter()
        criteria = criteria or SelectionCriteria()
        scope = scope or OperationScope.full_tree()

        try:
            evaluator = self._validate(COPY_TREE, file_types, criteria, scope)
            target_path = self._validate_target(COPY_TREE, source, target)
        except ConfigurationError as e:
            return self._rejected(COPY_TREE, TreeCopyStats(), e)

        run = _TransferRun(
            COPY_TREE,
            DirectoryNode.from_path(source),
            target_path,
            file_types,
            evaluator,
            copy_empty_directories=copy_empty_directories,
            delete_source=False,
            directory_permissions=self._directory_permissions,
            collect=collect,
        )
        fatal = self._walk(run, source, scope)

        stats = run.stats.snapshot()
        logger.info(
            "copy_tree %s -> %s: %d copied, %d not copied, %d dirs created, %d errors",
            os.fspath(source),
            target_path,
            stats.files_copied,
            stats.files_not_copied,
            stats.dirs_created,
            len(run.errors),
        )
        return self._result(run, stats, fatal)

    def move_tree(
        self,
        source: str | os.PathLike[str],
        target: str | os.PathLike[str],
        *,
        file_types: FileTypeFilter | None = None,
        criteria: SelectionCriteria | None = None,
        scope: OperationScope | None = None,
        copy_empty_directories: bool = False,
        delete_empty_source_directories: bool = False,
        collect: bool = False,
    ) -> OperationResult[TreeMoveStats]:
        """Move selected files from a source tree into a target tree.

        Works like copy_tree, then removes each successfully copied source
        file. If a source file cannot be removed its copy is deleted again,
        so a file always ends up in exactly one of the two trees. With
        delete_empty_source_directories, visited source directories that
        are left with no entries at all are removed afterwards; a directory
        that still holds anything is never removed.

        Args:
            source: Root of the source tree.
            target: Root of the target tree. Must not lie inside source.
            file_types: File types to move (regular files only by default).
            criteria: Selection criteria (every file by default).
            scope: Part of the source tree to cover (full tree by default).
            copy_empty_directories: Create every visited directory in the target.
            delete_empty_source_directories: Remove emptied source directories.
            collect: Record visited directories and moved files in the result.

        Returns:
            OperationResult with TreeMoveStats.
        """
        file_types = file_types or FileTypeFilter()
        criteria = criteria or SelectionCriteria()
        scope = scope or OperationScope.full_tree()

        try:
            evaluator = self._validate(MOVE_TREE, file_types, criteria, scope)
            target_path = self._validate_target(MOVE_TREE, source, target)
        except ConfigurationError as e:
            return self._rejected(MOVE_TREE, TreeMoveStats(), e)

        run = _TransferRun(
            MOVE_TREE,
            DirectoryNode.from_path(source),
            target_path,
            file_types,
            evaluator,
            copy_empty_directories=copy_empty_directories,
            delete_source=True,
            directory_permissions=self._directory_permissions,
            collect=collect,
        )
        fatal = self._walk(run, source, scope)

        dirs_deleted = 0
        if fatal is None and delete_empty_source_directories:
            dirs_deleted = run.prune_empty_directories()

        copied = run.stats
        stats = TreeMoveStats(
            total_dirs_scanned=copied.total_dirs_scanned,
            dirs_created=copied.dirs_created,
            total_src_files_processed=copied.total_files_processed,
            source_files_moved=run.files_moved,
            source_file_bytes_moved=run.bytes_moved,
            source_files_remaining=copied.total_files_processed - run.files_moved,
            source_file_bytes_remaining=run.bytes_processed - run.bytes_moved,
            source_dirs_deleted=dirs_deleted,
        )
        logger.info(
            "move_tree %s -> %s: %d moved, %d remaining, %d source dirs removed, %d errors",
            os.fspath(source),
            target_path,
            stats.source_files_moved,
            stats.source_files_remaining,
            stats.source_dirs_deleted,
            len(run.errors),
        )
        return self._result(run, stats, fatal)

    def delete_tree(
        self,
        root: str | os.PathLike[str],
        *,
        file_types: FileTypeFilter | None = None,
        criteria: SelectionCriteria | None = None,
        scope: OperationScope | None = None,
        collect: bool = False,
    ) -> OperationResult[TreeDeleteStats]:
        """Delete selected files in a tree. Directories are never deleted.

        A file that cannot be deleted is a fatal error: the walk stops and
        the statistics gathered up to that point are returned together
        with the error in OperationResult.fatal.

        Args:
            root: Root of the tree.
            file_types: File types to delete (regular files only by default).
            criteria: Selection criteria (every file by default).
            scope: Part of the tree to cover (full tree by default).
            collect: Record visited directories and deleted files in the result.

        Returns:
            OperationResult with TreeDeleteStats.
        """
        file_types = file_types or FileTypeFilter()
        criteria = criteria or SelectionCriteria()
        scope = scope or OperationScope.full_tree()

        try:
            evaluator = self._validate(DELETE_TREE, file_types, criteria, scope)
        except ConfigurationError as e:
            return self._rejected(DELETE_TREE, TreeDeleteStats(), e)

        run = _DeleteRun(DELETE_TREE, file_types, evaluator, collect)
        fatal = self._walk(run, root, scope)

        stats = run.stats.snapshot()
        logger.info(
            "delete_tree %s: %d deleted, %d remaining, %d errors",
            os.fspath(root),
            stats.files_deleted,
            stats.files_remaining,
            len(run.errors),
        )
        return self._result(run, stats, fatal)

    def find_tree(
        self,
        root: str | os.PathLike[str],
        *,
        file_types: FileTypeFilter | None = None,
        criteria: SelectionCriteria | None = None,
        scope: OperationScope | None = None,
        collect: bool = True,
    ) -> OperationResult[TreeFindStats]:
        """Find selected files in a tree without modifying anything.

        Args:
            root: Root of the tree.
            file_types: File types to report (all types by default).
            criteria: Selection criteria (every file by default).
            scope: Part of the tree to cover (full tree by default).
            collect: Record visited directories and found files in the result.

        Returns:
            OperationResult with TreeFindStats.
        """
        file_types = file_types or FileTypeFilter.all()
        criteria = criteria or SelectionCriteria()
        scope = scope or OperationScope.full_tree()

        try:
            evaluator = self._validate(FIND_TREE, file_types, criteria, scope)
        except ConfigurationError as e:
            return self._rejected(FIND_TREE, TreeFindStats(), e)

        run = _FindRun(FIND_TREE, file_types, evaluator, collect)
        fatal = self._walk(run, root, scope)

        stats = run.stats.snapshot()
        logger.info(
            "find_tree %s: %d found, %d skipped in %d directories",
            os.fspath(root),
            stats.files_found,
            stats.files_skipped,
            stats.total_dirs_scanned,
        )
        return self._result(run, stats, fatal)

    @staticmethod
    def _validate(
        operation: str,
        file_types: FileTypeFilter,
        criteria: SelectionCriteria,
        scope: OperationScope,
    ) -> SelectionEvaluator:
        """Validate an operation's configuration before any filesystem access.

        Raises:
            ConfigurationError: If the scope, file type filter or criteria are invalid.
        """
        scope.validate(operation)
        file_types.validate(operation)
        return SelectionEvaluator(criteria, operation)

    @staticmethod
    def _validate_target(
        operation: str,
        source: str | os.PathLike[str],
        target: str | os.PathLike[str] | None,
    ) -> str:
        """Validate the target root of a copy or move.

        Returns:
            Absolute, normalized target path.

        Raises:
            ConfigurationError: If the target is missing, equals the source,
                or lies inside the source tree.
        """
        if target is None or not os.fspath(target):
            raise ConfigurationError("Target directory is required", operation=operation)

        source_path = os.path.abspath(os.fspath(source))
        target_path = os.path.abspath(os.fspath(target))
        if os.path.commonpath([source_path, target_path]) == source_path:
            raise ConfigurationError(
                f"Target directory must not be the source or lie inside it: {source_path}",
                operation=operation,
                path=target_path,
            )
        return target_path

    @staticmethod
    def _walk(
        run: _TransferRun | _DeleteRun | _FindRun,
        root: str | os.PathLike[str],
        scope: OperationScope,
    ) -> TreeOpsError | None:
        """Drive the walker for a run; return the fatal error, if any."""
        try:
            TreeWalker(scope).walk(
                root,
                run.on_directory,
                run.on_file,
                operation=run.operation,
                errors=run.errors,
            )
        except (RootNotFoundError, FileDeleteError, ConfigurationError) as e:
            e.operation = run.operation
            logger.error("%s", e)
            return e
        return None

    @staticmethod
    def _result(
        run: _Run,
        stats: S,
        fatal: TreeOpsError | None,
    ) -> OperationResult[S]:
        return OperationResult(
            operation=run.operation,
            stats=stats,
            errors=list(run.errors),
            fatal=fatal,
            directories=run.directories,
            files=run.files,
        )

    @staticmethod
    def _rejected(
        operation: str,
        stats: S,
        error: ConfigurationError,
    ) -> OperationResult[S]:
        logger.error("%s", error)
        return OperationResult(operation=operation, stats=stats, fatal=error)

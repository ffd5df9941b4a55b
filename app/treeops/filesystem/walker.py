"""Directory tree walker.

Traverses a directory tree depth-first in pre-order, reading every
directory exactly once. Each visited directory is reported through an
on_directory callback, then each of its non-directory entries through
an on_file callback. Which part of the tree is visited is decided by an
OperationScope.
"""

import logging
import os
from collections.abc import Callable
from pathlib import Path

from treeops.errors import DirectoryReadError, EntryError, RootNotFoundError
from treeops.filesystem import primitives
from treeops.models.entry import DirectoryNode, EntryInfo, EntryType
from treeops.models.filters import OperationScope

logger = logging.getLogger(__name__)

OnDirectory = Callable[[DirectoryNode], None]
OnFile = Callable[[DirectoryNode, EntryInfo], None]


class TreeWalker:
    """Walks a directory tree within an OperationScope.

    The walker never follows symbolic links: a link to a directory is
    reported to on_file as a SYMLINK entry. Entries of a directory are
    delivered sorted by name, so two walks of an unchanged tree produce
    the same sequence of callbacks.

    Args:
        scope: Part of the tree to visit.
    """

    def __init__(self, scope: OperationScope | None = None) -> None:
        self._scope = scope if scope is not None else OperationScope.full_tree()

    @property
    def scope(self) -> OperationScope:
        """Scope this walker covers."""
        return self._scope

    def walk(
        self,
        root: str | os.PathLike[str],
        on_directory: OnDirectory,
        on_file: OnFile,
        *,
        operation: str = "walk",
        errors: list[EntryError] | None = None,
    ) -> list[EntryError]:
        """Walk the tree rooted at root.

        With include_parent_directory, root is the first directory passed
        to on_directory and its files are passed to on_file. Without it,
        the walk starts at the immediate subdirectories of root and files
        located directly in root are never reported. Subdirectories are
        only descended into with include_subtree.

        A directory that cannot be read is recorded as a non-fatal
        DirectoryReadError; its subtree is skipped and the walk continues.
        Exceptions raised by the callbacks propagate to the caller and end
        the walk.

        Args:
            root: Root directory of the walk.
            on_directory: Called once per visited directory, in walk order.
            on_file: Called once per non-directory entry of a visited directory.
            operation: Operation name attached to errors.
            errors: List to append non-fatal errors to. A new list is
                created if omitted.

        Returns:
            The list of non-fatal errors encountered during the walk.

        Raises:
            ConfigurationError: If the scope is empty.
            RootNotFoundError: If root is not an existing directory.
        """
        self._scope.validate(operation)

        root_node = DirectoryNode.from_path(root)
        if not root_node.exists:
            raise RootNotFoundError(
                "Root directory does not exist", operation=operation, path=root_node.path
            )

        if errors is None:
            errors = []
        include_parent = self._scope.include_parent_directory
        include_subtree = self._scope.include_subtree

        logger.debug(
            "Walking %s (parent=%s, subtree=%s)", root_node.path, include_parent, include_subtree
        )

        if include_parent:
            on_directory(root_node)

        root_entries = self._read(root_node, operation, errors)
        if root_entries is None:
            return errors

        pending: list[DirectoryNode] = []
        if include_parent:
            for entry in root_entries:
                if entry.entry_type != EntryType.DIRECTORY:
                    on_file(root_node, entry)
        if include_subtree:
            pending.extend(reversed(self._subdirectories(root_entries)))

        while pending:
            node = pending.pop()
            on_directory(node)

            entries = self._read(node, operation, errors)
            if entries is None:
                continue

            for entry in entries:
                if entry.entry_type != EntryType.DIRECTORY:
                    on_file(node, entry)
            pending.extend(reversed(self._subdirectories(entries)))

        return errors

    @staticmethod
    def _read(
        node: DirectoryNode, operation: str, errors: list[EntryError]
    ) -> list[EntryInfo] | None:
        """Read a directory, recording a non-fatal error on failure."""
        try:
            return primitives.read_directory_entries(node.path)
        except DirectoryReadError as e:
            e.operation = operation
            logger.warning("%s", e)
            errors.append(e)
            return None

    @staticmethod
    def _subdirectories(entries: list[EntryInfo]) -> list[DirectoryNode]:
        return [
            DirectoryNode(
                path=entry.path,
                exists=True,
                parent=entry.directory,
                volume=Path(entry.path).anchor,
            )
            for entry in entries
            if entry.entry_type == EntryType.DIRECTORY
        ]

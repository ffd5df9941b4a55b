"""Ordered result collections.

Tree operations record the directories and files they touched in these
collections when the caller asks for it. Insertion order is the walk
order and is significant.
"""

import copy
from collections.abc import Iterator
from typing import Generic, TypeVar

from treeops.models.entry import DirectoryNode, EntryInfo

T = TypeVar("T", DirectoryNode, EntryInfo)


class _EntryCollection(Generic[T]):
    """Ordered, append-only sequence of entries."""

    def __init__(self, items: list[T] | None = None) -> None:
        self._items: list[T] = list(items) if items else []

    def append(self, item: T) -> None:
        """Append an entry at the end of the collection."""
        self._items.append(item)

    def paths(self) -> list[str]:
        """Absolute paths of all entries, in insertion order."""
        return [item.path for item in self._items]

    def copy(self) -> "_EntryCollection[T]":
        """Return a deep copy of the collection."""
        return type(self)(copy.deepcopy(self._items))

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _EntryCollection):
            return NotImplemented
        return type(self) is type(other) and self._items == other._items

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._items)} items)"


class DirectoryCollection(_EntryCollection[DirectoryNode]):
    """Directories visited by a tree operation."""


class FileCollection(_EntryCollection[EntryInfo]):
    """Files selected or processed by a tree operation."""

    @property
    def total_bytes(self) -> int:
        """Sum of the sizes of all files in the collection."""
        return sum(item.size for item in self._items)

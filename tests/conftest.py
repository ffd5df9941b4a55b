"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from pathlib import Path

import pytest

from treeops.models.entry import EntryInfo, EntryType

TreeBuilder = Callable[[Mapping[str, str | None]], Path]

# Fixed modification time for files created by the tree builder
BASE_MTIME = datetime(2024, 1, 15, 10, 0, tzinfo=UTC)


@pytest.fixture
def make_tree(tmp_path: Path) -> TreeBuilder:
    """Build a directory tree under tmp_path/src.

    Keys are paths relative to the root; a value of None creates a
    directory, a string creates a file with that content. Every file gets
    BASE_MTIME as its modification time.
    """

    def build(layout: Mapping[str, str | None], root_name: str = "src") -> Path:
        root = tmp_path / root_name
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in layout.items():
            path = root / rel
            if content is None:
                path.mkdir(parents=True, exist_ok=True)
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
            stamp = BASE_MTIME.timestamp()
            os.utime(path, (stamp, stamp))
        return root

    return build


@pytest.fixture
def sample_tree(make_tree: TreeBuilder) -> Path:
    """Tree with files at the root, one level down and two levels down.

    Layout:
        a.txt, b.log, sub/c.txt, sub/deep/d.txt, sub/deep/e.log, other/f.txt
    """
    return make_tree(
        {
            "a.txt": "alpha",
            "b.log": "bravo-log",
            "sub/c.txt": "charlie",
            "sub/deep/d.txt": "delta",
            "sub/deep/e.log": "echo",
            "other/f.txt": "foxtrot",
        }
    )


def make_entry(
    name: str = "file.txt",
    *,
    directory: str = "/data",
    size: int = 10,
    mtime: datetime = BASE_MTIME,
    mode: int = 0o100644,
    entry_type: EntryType = EntryType.REGULAR,
) -> EntryInfo:
    """Create an EntryInfo without touching the filesystem."""
    return EntryInfo(
        path=f"{directory}/{name}",
        name=name,
        size=size,
        mtime=mtime,
        mode=mode,
        entry_type=entry_type,
    )


@pytest.fixture
def entry_factory() -> Callable[..., EntryInfo]:
    """Factory for EntryInfo objects (see make_entry)."""
    return make_entry

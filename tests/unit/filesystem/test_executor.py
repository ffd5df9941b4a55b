"""Unit tests for TreeOperator.

Tests copy, move, delete and find over real trees in tmp_path, with
fault injection through unittest.mock for the failure paths.
"""

import os
from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import patch

import pytest

from treeops.errors import (
    ConfigurationError,
    DirectoryCreateError,
    DirectoryReadError,
    FileCopyError,
    FileDeleteError,
    FileMoveError,
    RootNotFoundError,
)
from treeops.filesystem import primitives
from treeops.filesystem.executor import TreeOperator
from treeops.models.criteria import SelectCriterionMode, SelectionCriteria
from treeops.models.filters import FileTypeFilter, OperationScope
from treeops.models.stats import TreeCopyStats, TreeDeleteStats, TreeFindStats, TreeMoveStats

# Modification time the tree builder gives every file
FILE_MTIME = datetime(2024, 1, 15, 10, 0, tzinfo=UTC)

TXT = SelectionCriteria(name_patterns=("*.txt",))
NULL_SCOPE = OperationScope(include_parent_directory=False, include_subtree=False)


def _files(root: Path) -> set[str]:
    """Relative paths of all non-directory entries under root."""
    return {
        p.relative_to(root).as_posix()
        for p in root.rglob("*")
        if p.is_symlink() or not p.is_dir()
    }


def _dirs(root: Path) -> set[str]:
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_dir()}


class TestCopyTree:
    """Tests for TreeOperator.copy_tree."""

    def test_pattern_scenario(self, make_tree, tmp_path: Path) -> None:
        """Only *.txt files are copied, keeping their relative paths."""
        src = make_tree({"a.txt": "aa", "b.log": "bbb", "sub/c.txt": "c"})
        dst = tmp_path / "dst"

        result = TreeOperator().copy_tree(src, dst, criteria=TXT)

        assert result.ok
        assert _files(dst) == {"a.txt", "sub/c.txt"}
        assert (dst / "sub" / "c.txt").read_text() == "c"
        assert result.stats == TreeCopyStats(
            total_dirs_scanned=2,
            dirs_copied=2,
            dirs_created=2,
            total_files_processed=3,
            files_copied=2,
            file_bytes_copied=3,
            files_not_copied=1,
            file_bytes_not_copied=3,
        )

    def test_open_selection_copies_everything(self, sample_tree: Path, tmp_path: Path) -> None:
        """Without criteria every regular file is copied."""
        dst = tmp_path / "dst"

        result = TreeOperator().copy_tree(sample_tree, dst)

        assert _files(dst) == _files(sample_tree)
        assert result.stats.files_copied == 6
        assert result.stats.files_not_copied == 0

    def test_target_dirs_created_lazily(self, make_tree, tmp_path: Path) -> None:
        """Directories without qualifying files are not created."""
        src = make_tree({"a.txt": "a", "logs/x.log": "x", "empty": None})
        dst = tmp_path / "dst"

        result = TreeOperator().copy_tree(src, dst, criteria=TXT)

        assert _dirs(dst) == set()
        assert result.stats.total_dirs_scanned == 3
        assert result.stats.dirs_created == 1

    def test_copy_empty_directories(self, make_tree, tmp_path: Path) -> None:
        """Every visited directory is created when requested."""
        src = make_tree({"a.txt": "a", "logs/x.log": "x", "empty": None})
        dst = tmp_path / "dst"

        result = TreeOperator().copy_tree(
            src, dst, criteria=TXT, copy_empty_directories=True
        )

        assert _dirs(dst) == {"empty", "logs"}
        assert result.stats.dirs_created == 3
        assert result.stats.dirs_copied == 3

    def test_existing_target_dirs_not_counted_as_created(
        self, sample_tree: Path, tmp_path: Path
    ) -> None:
        """Directories already present in the target are used, not created."""
        dst = tmp_path / "dst"
        (dst / "sub").mkdir(parents=True)

        result = TreeOperator().copy_tree(sample_tree, dst)

        assert result.stats.dirs_copied == 4
        assert result.stats.dirs_created == 2

    def test_subtree_scope_skips_root_files(self, sample_tree: Path, tmp_path: Path) -> None:
        """Subtree-only copies never touch root-level files."""
        dst = tmp_path / "dst"

        result = TreeOperator().copy_tree(
            sample_tree, dst, scope=OperationScope.subtree_only()
        )

        assert "a.txt" not in _files(dst)
        assert "b.log" not in _files(dst)
        assert _files(dst) == {"other/f.txt", "sub/c.txt", "sub/deep/d.txt", "sub/deep/e.log"}
        assert result.stats.total_files_processed == 4

    def test_parent_scope_copies_root_only(self, sample_tree: Path, tmp_path: Path) -> None:
        """Parent-only copies ignore subdirectories."""
        dst = tmp_path / "dst"

        TreeOperator().copy_tree(sample_tree, dst, scope=OperationScope.parent_only())

        assert _files(dst) == {"a.txt", "b.log"}

    def test_symlinks_recreated(self, make_tree, tmp_path: Path) -> None:
        """Selected symlinks are recreated, not dereferenced."""
        src = make_tree({"a.txt": "a"})
        (src / "link").symlink_to("a.txt")
        dst = tmp_path / "dst"

        result = TreeOperator().copy_tree(
            src, dst, file_types=FileTypeFilter(include_symlink=True)
        )

        assert (dst / "link").is_symlink()
        assert os.readlink(dst / "link") == "a.txt"
        assert result.stats.files_copied == 2

    def test_symlinks_excluded_by_default(self, make_tree, tmp_path: Path) -> None:
        """Symlinks count as not copied under the default filter."""
        src = make_tree({"a.txt": "a"})
        (src / "link").symlink_to("a.txt")
        dst = tmp_path / "dst"

        result = TreeOperator().copy_tree(src, dst)

        assert not (dst / "link").exists()
        assert result.stats.files_not_copied == 1

    def test_other_files_rejected_non_fatally(self, make_tree, tmp_path: Path) -> None:
        """Pipes pass the filter but cannot be copied; the copy continues."""
        src = make_tree({"a.txt": "a"})
        os.mkfifo(src / "pipe")
        dst = tmp_path / "dst"

        result = TreeOperator().copy_tree(src, dst, file_types=FileTypeFilter.all())

        assert result.aborted is False
        assert len(result.errors) == 1
        assert isinstance(result.errors[0], FileCopyError)
        assert result.errors[0].operation == "copy_tree"
        assert result.stats.files_copied == 1
        assert result.stats.files_not_copied == 1
        assert (dst / "a.txt").exists()

    def test_copy_failure_is_non_fatal(self, sample_tree: Path, tmp_path: Path) -> None:
        """A failed copy is recorded and the remaining files are still copied."""
        real_copy = primitives.copy_file
        failing = str(sample_tree / "sub" / "c.txt")

        def fake_copy(source, entry, dest):
            if source == failing:
                raise FileCopyError("disk full", path=source)
            return real_copy(source, entry, dest)

        with patch("treeops.filesystem.executor.copy_file", side_effect=fake_copy):
            result = TreeOperator().copy_tree(sample_tree, tmp_path / "dst", collect=True)

        assert [e.path for e in result.errors] == [failing]
        assert result.stats.files_copied == 5
        assert result.stats.files_not_copied == 1
        assert failing not in result.files.paths()

    def test_directory_create_failure(self, sample_tree: Path, tmp_path: Path) -> None:
        """A target directory that cannot be created skips its files only."""
        dst = tmp_path / "dst"
        dst.mkdir()
        (dst / "sub").write_text("blocks the directory")

        result = TreeOperator().copy_tree(sample_tree, dst)

        create_errors = [e for e in result.errors if isinstance(e, DirectoryCreateError)]
        # sub and sub/deep cannot be created
        assert len(create_errors) == 2
        assert result.aborted is False
        assert (dst / "a.txt").exists()
        assert (dst / "other" / "f.txt").exists()
        assert result.stats.files_not_copied == 3

    def test_unreadable_directory_is_non_fatal(self, sample_tree: Path, tmp_path: Path) -> None:
        """A directory that cannot be read is skipped with an error."""
        real_read = primitives.read_directory_entries
        failing = str(sample_tree / "other")

        def fake_read(path):
            if path == failing:
                raise DirectoryReadError("denied", path=path)
            return real_read(path)

        with patch("treeops.filesystem.primitives.read_directory_entries", side_effect=fake_read):
            result = TreeOperator().copy_tree(sample_tree, tmp_path / "dst")

        assert len(result.errors) == 1
        assert result.errors[0].operation == "copy_tree"
        assert result.stats.files_copied == 5

    def test_collect(self, sample_tree: Path, tmp_path: Path) -> None:
        """Visited directories and copied files are collected on request."""
        result = TreeOperator().copy_tree(sample_tree, tmp_path / "dst", criteria=TXT, collect=True)

        assert len(result.directories) == 4
        assert result.directories[0].path == str(sample_tree)
        assert [Path(p).name for p in result.files.paths()] == ["a.txt", "f.txt", "c.txt", "d.txt"]

    def test_no_collect_by_default(self, sample_tree: Path, tmp_path: Path) -> None:
        """Collections stay empty unless requested."""
        result = TreeOperator().copy_tree(sample_tree, tmp_path / "dst")

        assert len(result.directories) == 0
        assert len(result.files) == 0

    def test_missing_source(self, tmp_path: Path) -> None:
        """A missing source is a fatal error returned in the result."""
        result = TreeOperator().copy_tree(tmp_path / "missing", tmp_path / "dst")

        assert isinstance(result.fatal, RootNotFoundError)
        assert result.fatal.operation == "copy_tree"
        assert not (tmp_path / "dst").exists()

    def test_null_scope_rejected_before_io(self, sample_tree: Path, tmp_path: Path) -> None:
        """The null scope is rejected without reading any directory."""
        with patch.object(primitives, "read_directory_entries") as mock_read:
            result = TreeOperator().copy_tree(sample_tree, tmp_path / "dst", scope=NULL_SCOPE)

        assert isinstance(result.fatal, ConfigurationError)
        mock_read.assert_not_called()
        assert result.stats == TreeCopyStats()

    def test_empty_file_type_filter_rejected(self, sample_tree: Path, tmp_path: Path) -> None:
        """A filter admitting nothing is a configuration error."""
        result = TreeOperator().copy_tree(
            sample_tree, tmp_path / "dst", file_types=FileTypeFilter(include_regular=False)
        )

        assert isinstance(result.fatal, ConfigurationError)

    def test_malformed_pattern_rejected(self, sample_tree: Path, tmp_path: Path) -> None:
        """A malformed glob is a configuration error, not a per-file error."""
        result = TreeOperator().copy_tree(
            sample_tree, tmp_path / "dst", criteria=SelectionCriteria(name_patterns=("[x",))
        )

        assert isinstance(result.fatal, ConfigurationError)
        assert result.errors == []

    @pytest.mark.parametrize("target", ["", "src", "src/sub/new"])
    def test_invalid_target_rejected(self, sample_tree: Path, tmp_path: Path, target: str) -> None:
        """Missing targets and targets inside the source are rejected."""
        target_path = str(tmp_path / target) if target else ""

        result = TreeOperator().copy_tree(sample_tree, target_path)

        assert isinstance(result.fatal, ConfigurationError)
        assert not (sample_tree / "sub" / "new").exists()

    def test_sibling_with_common_prefix_allowed(self, sample_tree: Path, tmp_path: Path) -> None:
        """A sibling named like the source plus a suffix is not inside it."""
        result = TreeOperator().copy_tree(sample_tree, tmp_path / "src-backup")

        assert result.fatal is None
        assert result.stats.files_copied == 6

    def test_directory_permissions(self, sample_tree: Path, tmp_path: Path) -> None:
        """Created directories use the configured mode (subject to umask)."""
        old_umask = os.umask(0)
        try:
            TreeOperator(directory_permissions=0o750).copy_tree(sample_tree, tmp_path / "dst")
        finally:
            os.umask(old_umask)

        assert (tmp_path / "dst" / "sub").stat().st_mode & 0o777 == 0o750


class TestMoveTree:
    """Tests for TreeOperator.move_tree."""

    def test_moves_matching_files(self, make_tree, tmp_path: Path) -> None:
        """Matching files end up in the target only."""
        src = make_tree({"a.txt": "aa", "b.log": "bbb", "sub/c.txt": "c"})
        dst = tmp_path / "dst"

        result = TreeOperator().move_tree(src, dst, criteria=TXT)

        assert result.ok
        assert _files(dst) == {"a.txt", "sub/c.txt"}
        assert _files(src) == {"b.log"}
        assert result.stats == TreeMoveStats(
            total_dirs_scanned=2,
            dirs_created=2,
            total_src_files_processed=3,
            source_files_moved=2,
            source_file_bytes_moved=3,
            source_files_remaining=1,
            source_file_bytes_remaining=3,
            source_dirs_deleted=0,
        )

    def test_empty_source_dirs_kept_by_default(self, make_tree, tmp_path: Path) -> None:
        """Emptied source directories stay unless pruning is requested."""
        src = make_tree({"sub/c.txt": "c"})

        TreeOperator().move_tree(src, tmp_path / "dst")

        assert (src / "sub").is_dir()

    def test_prune_empty_source_dirs(self, make_tree, tmp_path: Path) -> None:
        """Only directories left with no entries at all are removed."""
        src = make_tree({"a.txt": "a", "x/y/c.txt": "c", "keep/d.log": "d", "hollow/inner": None})

        result = TreeOperator().move_tree(
            src, tmp_path / "dst", criteria=TXT, delete_empty_source_directories=True
        )

        assert not (src / "x").exists()
        assert (src / "keep" / "d.log").exists()
        assert not (src / "hollow").exists()
        assert src.exists()
        # x/y, x, hollow/inner, hollow
        assert result.stats.source_dirs_deleted == 4

    def test_prune_removes_emptied_root(self, make_tree, tmp_path: Path) -> None:
        """A root left empty is removed as well when it was visited."""
        src = make_tree({"a.txt": "a"})

        result = TreeOperator().move_tree(
            src, tmp_path / "dst", delete_empty_source_directories=True
        )

        assert not src.exists()
        assert result.stats.source_dirs_deleted == 1

    def test_prune_failure_is_non_fatal(self, make_tree, tmp_path: Path) -> None:
        """A directory that cannot be removed is reported and skipped."""
        src = make_tree({"sub/c.txt": "c"})

        with patch("treeops.filesystem.executor.os.rmdir", side_effect=OSError("busy")):
            result = TreeOperator().move_tree(
                src, tmp_path / "dst", delete_empty_source_directories=True
            )

        assert result.aborted is False
        assert result.stats.source_dirs_deleted == 0
        assert result.errors
        assert all(e.operation == "move_tree" for e in result.errors)

    def test_source_delete_failure_keeps_file_in_one_place(
        self, sample_tree: Path, tmp_path: Path
    ) -> None:
        """If the source cannot be removed, the copy is undone."""
        dst = tmp_path / "dst"
        real_delete = primitives.delete_file
        failing = str(sample_tree / "a.txt")

        def fake_delete(path):
            if path == failing:
                raise FileDeleteError("busy", path=path)
            real_delete(path)

        with patch("treeops.filesystem.executor.delete_file", side_effect=fake_delete):
            result = TreeOperator().move_tree(sample_tree, dst, collect=True)

        assert result.aborted is False
        assert len(result.errors) == 1
        assert isinstance(result.errors[0], FileMoveError)
        assert (sample_tree / "a.txt").exists()
        assert not (dst / "a.txt").exists()
        assert result.stats.source_files_moved == 5
        assert result.stats.source_files_remaining == 1
        assert failing not in result.files.paths()

    def test_copy_failure_keeps_file_in_source_only(
        self, sample_tree: Path, tmp_path: Path
    ) -> None:
        """A file whose copy fails stays in the source and is absent from the target."""
        dst = tmp_path / "dst"
        real_copy = primitives.copy_file
        failing = str(sample_tree / "sub" / "c.txt")

        def fake_copy(source, entry, dest):
            if source == failing:
                raise FileCopyError("disk full", path=source)
            return real_copy(source, entry, dest)

        with patch("treeops.filesystem.executor.copy_file", side_effect=fake_copy):
            result = TreeOperator().move_tree(sample_tree, dst)

        assert result.aborted is False
        assert len(result.errors) == 1
        assert isinstance(result.errors[0], FileCopyError)
        assert _files(sample_tree) == {"sub/c.txt"}
        assert "sub/c.txt" not in _files(dst)
        assert result.stats.source_files_moved == 5
        assert result.stats.source_files_remaining == 1

    def test_interrupted_copy_leaves_nothing_in_target(
        self, sample_tree: Path, tmp_path: Path
    ) -> None:
        """A copy that fails after writing part of the file is not left behind."""
        dst = tmp_path / "dst"
        real_fsync = os.fsync
        calls = []

        def fail_first(fd):
            calls.append(fd)
            if len(calls) == 1:
                raise OSError("disk error")
            real_fsync(fd)

        with patch("treeops.filesystem.primitives.os.fsync", side_effect=fail_first):
            result = TreeOperator().move_tree(sample_tree, dst)

        assert len(result.errors) == 1
        assert _files(sample_tree) == {"a.txt"}
        assert not (dst / "a.txt").exists()
        assert _files(dst) | _files(sample_tree) == {
            "a.txt",
            "b.log",
            "sub/c.txt",
            "sub/deep/d.txt",
            "sub/deep/e.log",
            "other/f.txt",
        }

    def test_every_file_in_exactly_one_tree(self, sample_tree: Path, tmp_path: Path) -> None:
        """After a move each file exists in the source or the target, never both."""
        before = _files(sample_tree)
        dst = tmp_path / "dst"

        criteria = SelectionCriteria(name_patterns=("d*", "a*"))

        TreeOperator().move_tree(sample_tree, dst, criteria=criteria)

        after_src = _files(sample_tree)
        after_dst = _files(dst)
        assert after_src.isdisjoint(after_dst)
        assert after_src | after_dst == before

    def test_target_inside_source_rejected(self, sample_tree: Path) -> None:
        """Moving into the source tree itself is rejected before any I/O."""
        result = TreeOperator().move_tree(sample_tree, sample_tree / "sub")

        assert isinstance(result.fatal, ConfigurationError)
        assert result.stats == TreeMoveStats()
        assert len(_files(sample_tree)) == 6

    def test_missing_source(self, tmp_path: Path) -> None:
        """A missing source is fatal and nothing is pruned."""
        result = TreeOperator().move_tree(
            tmp_path / "missing", tmp_path / "dst", delete_empty_source_directories=True
        )

        assert isinstance(result.fatal, RootNotFoundError)
        assert result.fatal.operation == "move_tree"


class TestDeleteTree:
    """Tests for TreeOperator.delete_tree."""

    def test_deletes_matching_files_only(self, sample_tree: Path) -> None:
        """Matching files are deleted, directories are kept."""
        result = TreeOperator().delete_tree(sample_tree, criteria=TXT)

        assert result.ok
        assert _files(sample_tree) == {"b.log", "sub/deep/e.log"}
        assert _dirs(sample_tree) == {"other", "sub", "sub/deep"}
        assert result.stats == TreeDeleteStats(
            total_dirs_scanned=4,
            total_files_processed=6,
            files_deleted=4,
            files_deleted_bytes=5 + 7 + 5 + 7,
            files_remaining=2,
            files_remaining_bytes=9 + 4,
            dirs_with_deletions=4,
        )

    def test_older_than_before_every_file(self, sample_tree: Path) -> None:
        """A bound earlier than every file deletes nothing."""
        criteria = SelectionCriteria(older_than=FILE_MTIME - timedelta(days=365))

        result = TreeOperator().delete_tree(sample_tree, criteria=criteria)

        assert result.fatal is None
        assert result.stats.files_deleted == 0
        assert result.stats.dirs_with_deletions == 0
        assert len(_files(sample_tree)) == 6
        assert _dirs(sample_tree) == {"other", "sub", "sub/deep"}

    def test_older_than_after_every_file(self, sample_tree: Path) -> None:
        """A bound later than every file deletes everything."""
        criteria = SelectionCriteria(older_than=FILE_MTIME + timedelta(days=1))

        result = TreeOperator().delete_tree(sample_tree, criteria=criteria)

        assert result.stats.files_deleted == 6
        assert _files(sample_tree) == set()

    def test_or_combination(self, sample_tree: Path) -> None:
        """OR mode deletes files matching either criterion."""
        criteria = SelectionCriteria(
            name_patterns=("a.txt",),
            name_regexes=(r"^e\.",),
            combine=SelectCriterionMode.OR,
        )

        result = TreeOperator().delete_tree(sample_tree, criteria=criteria)

        assert result.stats.files_deleted == 2
        assert "a.txt" not in _files(sample_tree)
        assert "sub/deep/e.log" not in _files(sample_tree)

    def test_delete_failure_is_fatal(self, sample_tree: Path) -> None:
        """A failed deletion stops the walk and returns partial stats."""
        real_delete = primitives.delete_file
        failing = str(sample_tree / "b.log")

        def fake_delete(path):
            if path == failing:
                raise FileDeleteError("busy", path=path)
            real_delete(path)

        with patch("treeops.filesystem.executor.delete_file", side_effect=fake_delete):
            result = TreeOperator().delete_tree(sample_tree)

        assert isinstance(result.fatal, FileDeleteError)
        assert result.fatal.operation == "delete_tree"
        assert result.fatal.path == failing
        # a.txt was deleted before the failure, nothing after it
        assert result.stats.files_deleted == 1
        assert result.stats.total_dirs_scanned == 1
        assert (sample_tree / "sub" / "c.txt").exists()

    def test_symlink_deleted_not_followed(self, make_tree) -> None:
        """Selected symlinks are removed without touching their targets."""
        root = make_tree({"real/a.txt": "a"})
        (root / "link").symlink_to(root / "real")

        result = TreeOperator().delete_tree(
            root, file_types=FileTypeFilter(include_regular=False, include_symlink=True)
        )

        assert result.stats.files_deleted == 1
        assert not (root / "link").is_symlink()
        assert (root / "real" / "a.txt").exists()

    def test_missing_root(self, tmp_path: Path) -> None:
        """A missing root is fatal."""
        result = TreeOperator().delete_tree(tmp_path / "missing")

        assert isinstance(result.fatal, RootNotFoundError)

    def test_null_scope(self, sample_tree: Path) -> None:
        """The null scope deletes nothing."""
        result = TreeOperator().delete_tree(sample_tree, scope=NULL_SCOPE)

        assert isinstance(result.fatal, ConfigurationError)
        assert len(_files(sample_tree)) == 6


class TestFindTree:
    """Tests for TreeOperator.find_tree."""

    def test_finds_all_types_by_default(self, make_tree) -> None:
        """Find selects regular files, symlinks and other files by default."""
        root = make_tree({"a.txt": "a"})
        (root / "link").symlink_to("a.txt")
        os.mkfifo(root / "pipe")

        result = TreeOperator().find_tree(root)

        assert [Path(p).name for p in result.files.paths()] == ["a.txt", "link", "pipe"]
        assert result.stats.files_found == 3

    def test_counts_found_and_skipped(self, sample_tree: Path) -> None:
        """Processed files are split into found and skipped."""
        result = TreeOperator().find_tree(sample_tree, criteria=TXT)

        assert result.stats == TreeFindStats(
            total_dirs_scanned=4,
            total_files_processed=6,
            files_found=4,
            file_bytes_found=5 + 7 + 7 + 5,
            files_skipped=2,
        )
        assert len(result.directories) == 4

    def test_idempotent(self, sample_tree: Path) -> None:
        """Two finds over an unchanged tree return identical results."""
        operator = TreeOperator()

        first = operator.find_tree(sample_tree, criteria=TXT)
        second = operator.find_tree(sample_tree, criteria=TXT)

        assert first.directories == second.directories
        assert first.files == second.files
        assert first.stats == second.stats

    def test_does_not_modify(self, sample_tree: Path) -> None:
        """Find never changes the tree."""
        before = _files(sample_tree)

        TreeOperator().find_tree(sample_tree)

        assert _files(sample_tree) == before

    def test_partition_completeness(self, sample_tree: Path, tmp_path: Path) -> None:
        """Copied plus not copied equals every file an open find reports."""
        everything = TreeOperator().find_tree(sample_tree)
        copy = TreeOperator().copy_tree(sample_tree, tmp_path / "dst", criteria=TXT)

        assert copy.stats.total_files_processed == everything.stats.files_found
        assert (
            copy.stats.files_copied + copy.stats.files_not_copied
            == copy.stats.total_files_processed
        )

    def test_mode_criterion(self, sample_tree: Path) -> None:
        """Files are selected by exact permission bits."""
        for rel in _files(sample_tree):
            (sample_tree / rel).chmod(0o644)
        (sample_tree / "sub" / "c.txt").chmod(0o600)
        (sample_tree / "a.txt").chmod(0o640)

        result = TreeOperator().find_tree(sample_tree, criteria=SelectionCriteria(mode=0o600))

        assert result.files.paths() == [str(sample_tree / "sub" / "c.txt")]

    def test_without_collect(self, sample_tree: Path) -> None:
        """Counters are kept even when collections are not."""
        result = TreeOperator().find_tree(sample_tree, collect=False)

        assert len(result.files) == 0
        assert result.stats.files_found == 6

    def test_missing_root(self, tmp_path: Path) -> None:
        """A missing root is reported as fatal."""
        result = TreeOperator().find_tree(tmp_path / "missing")

        assert isinstance(result.fatal, RootNotFoundError)
        assert result.fatal.operation == "find_tree"

"""Single-entry filesystem primitives.

Low-level operations on one file or directory at a time. Tree operations
are built from these; each raises a typed error naming the path on
failure and leaves error classification to the caller.
"""

import logging
import os
import shutil
from datetime import UTC, datetime

from treeops.errors import DirectoryCreateError, DirectoryReadError, FileCopyError, FileDeleteError
from treeops.filesystem.classifier import classify_mode
from treeops.models.entry import EntryInfo, EntryType

logger = logging.getLogger(__name__)

DEFAULT_DIRECTORY_PERMISSIONS = 0o755

# Chunk size for stream copies
_COPY_BUFFER_SIZE = 1024 * 1024


def read_directory_entries(path: str) -> list[EntryInfo]:
    """List the immediate children of a directory with their metadata.

    Entries are returned sorted by name. An entry that disappears between
    listing and lstat is skipped with a warning.

    Args:
        path: Absolute directory path.

    Returns:
        EntryInfo for every child ("." and ".." are never included).

    Raises:
        DirectoryReadError: If the directory cannot be listed.
    """
    entries: list[EntryInfo] = []
    try:
        with os.scandir(path) as it:
            for dir_entry in it:
                try:
                    st = dir_entry.stat(follow_symlinks=False)
                except OSError:
                    logger.warning("Cannot stat entry: %s", dir_entry.path)
                    continue
                entries.append(
                    EntryInfo(
                        path=os.path.join(path, dir_entry.name),
                        name=dir_entry.name,
                        size=st.st_size,
                        mtime=datetime.fromtimestamp(st.st_mtime, tz=UTC),
                        mode=st.st_mode,
                        entry_type=classify_mode(st.st_mode),
                    )
                )
    except OSError as e:
        raise DirectoryReadError(f"Cannot read directory: {e}", path=path) from e

    entries.sort(key=lambda entry: entry.name)
    return entries


def make_directory(path: str, permission_bits: int = DEFAULT_DIRECTORY_PERMISSIONS) -> bool:
    """Create a directory and any missing parents.

    Args:
        path: Directory to create.
        permission_bits: Mode for newly created directories (subject to umask).

    Returns:
        True if the directory was created, False if it already existed.

    Raises:
        DirectoryCreateError: If the directory cannot be created.
    """
    if os.path.isdir(path):
        return False
    try:
        os.makedirs(path, mode=permission_bits, exist_ok=True)
    except OSError as e:
        raise DirectoryCreateError(f"Cannot create directory: {e}", path=path) from e
    return True


def copy_file(source: str, source_entry: EntryInfo, dest: str) -> int:
    """Copy a regular file byte for byte and verify the result.

    The destination is flushed to disk and its size compared against the
    source size recorded in source_entry.

    Args:
        source: Path of the file to copy.
        source_entry: Metadata of the source file.
        dest: Destination file path. An existing file is overwritten and an
            existing symlink is replaced, never written through. A failed
            copy leaves nothing at dest.

    Returns:
        Number of bytes copied.

    Raises:
        FileCopyError: If the source is not a regular file, the copy fails,
            or the destination size does not match.
    """
    if source_entry.entry_type != EntryType.REGULAR:
        raise FileCopyError(
            f"Source is not a regular file ({source_entry.entry_type.value})",
            path=source,
        )

    written = False
    try:
        # Never write through a link left at the destination
        if os.path.islink(dest):
            os.unlink(dest)
        with open(source, "rb") as src, open(dest, "wb") as dst:
            written = True
            shutil.copyfileobj(src, dst, _COPY_BUFFER_SIZE)
            dst.flush()
            os.fsync(dst.fileno())
        copied = os.stat(dest).st_size
    except OSError as e:
        if written:
            _discard_partial_copy(dest)
        raise FileCopyError(f"Copy to {dest} failed: {e}", path=source) from e

    if copied != source_entry.size:
        _discard_partial_copy(dest)
        raise FileCopyError(
            f"Size mismatch after copy to {dest}: expected {source_entry.size}, got {copied}",
            path=source,
        )
    return copied


def _discard_partial_copy(dest: str) -> None:
    """Remove an incomplete destination file after a failed copy."""
    try:
        os.remove(dest)
    except OSError as e:
        logger.warning("Cannot remove incomplete copy %s: %s", dest, e)


def copy_symlink(source: str, dest: str) -> None:
    """Recreate a symbolic link at dest pointing where source points.

    Raises:
        FileCopyError: If the link cannot be read or created.
    """
    try:
        link_target = os.readlink(source)
        if os.path.lexists(dest):
            os.unlink(dest)
        os.symlink(link_target, dest)
    except OSError as e:
        raise FileCopyError(f"Symlink copy to {dest} failed: {e}", path=source) from e


def delete_file(path: str) -> None:
    """Delete a single non-directory entry (symlinks are removed, not followed).

    Raises:
        FileDeleteError: If the entry cannot be removed.
    """
    try:
        os.remove(path)
    except OSError as e:
        raise FileDeleteError(f"Cannot delete file: {e}", path=path) from e

"""File type classification.

Classifies filesystem entries from their mode bits. Symlinks are
examined with lstat so a link is always reported as SYMLINK, whatever
its target is.
"""

import os
import stat

from treeops.models.entry import EntryType


def classify_mode(mode: int) -> EntryType:
    """Classify an entry from its st_mode.

    Args:
        mode: Raw st_mode as returned by lstat.

    Returns:
        EntryType for the mode bits.
    """
    if stat.S_ISDIR(mode):
        return EntryType.DIRECTORY
    if stat.S_ISLNK(mode):
        return EntryType.SYMLINK
    if stat.S_ISREG(mode):
        return EntryType.REGULAR
    return EntryType.OTHER


def classify_path(path: str | os.PathLike[str]) -> EntryType:
    """Classify the entry at a path without following symlinks.

    Raises:
        OSError: If the path cannot be examined.
    """
    return classify_mode(os.lstat(path).st_mode)

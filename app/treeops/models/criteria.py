"""File selection criteria.

A SelectionCriteria describes which files participate in a tree
operation. Each sub-criterion is either active or inactive; inactive
sub-criteria are left out of the evaluation entirely and a criteria
object with no active sub-criterion selects every file.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from treeops.models.permissions import MAX_MODE


class SelectCriterionMode(str, Enum):
    """How active sub-criteria are combined.

    Attributes:
        AND: A file is selected only if every active sub-criterion matches.
        OR: A file is selected if any active sub-criterion matches.
    """

    AND = "and"
    OR = "or"


def _normalize_patterns(patterns: tuple[str, ...] | list[str] | str) -> tuple[str, ...]:
    if isinstance(patterns, str):
        patterns = (patterns,)
    return tuple(p for p in patterns if p)


def _as_aware(value: datetime | None) -> datetime | None:
    # Naive datetimes are taken as local time
    if value is None or value.tzinfo is not None:
        return value
    return value.astimezone()


@dataclass(frozen=True, slots=True)
class SelectionCriteria:
    """Declarative filter applied to every file of a tree operation.

    Attributes:
        name_patterns: Shell-style globs matched against the base name.
            A file matches if it matches any pattern.
        name_regexes: Regular expressions searched in the base name.
            A file matches if any expression is found.
        older_than: Match files modified strictly before this time.
        newer_than: Match files modified strictly after this time.
        mode: Match files whose permission bits equal this value.
        combine: How active sub-criteria are combined (AND by default).
    """

    name_patterns: tuple[str, ...] = field(default_factory=tuple)
    name_regexes: tuple[str, ...] = field(default_factory=tuple)
    older_than: datetime | None = None
    newer_than: datetime | None = None
    mode: int | None = None
    combine: SelectCriterionMode = SelectCriterionMode.AND

    def __post_init__(self) -> None:
        """Normalize pattern collections and timestamps."""
        object.__setattr__(self, "name_patterns", _normalize_patterns(self.name_patterns))
        object.__setattr__(self, "name_regexes", _normalize_patterns(self.name_regexes))
        object.__setattr__(self, "older_than", _as_aware(self.older_than))
        object.__setattr__(self, "newer_than", _as_aware(self.newer_than))
        if self.mode is not None and not 0 <= self.mode <= MAX_MODE:
            msg = f"Selection mode out of range (0-0o7777): {self.mode:o}"
            raise ValueError(msg)

    @property
    def patterns_active(self) -> bool:
        """Check if the name pattern sub-criterion is active."""
        return bool(self.name_patterns)

    @property
    def regexes_active(self) -> bool:
        """Check if the name regex sub-criterion is active."""
        return bool(self.name_regexes)

    @property
    def older_than_active(self) -> bool:
        """Check if the older-than sub-criterion is active."""
        return self.older_than is not None

    @property
    def newer_than_active(self) -> bool:
        """Check if the newer-than sub-criterion is active."""
        return self.newer_than is not None

    @property
    def mode_active(self) -> bool:
        """Check if the mode-equality sub-criterion is active."""
        return self.mode is not None

    @property
    def is_active(self) -> bool:
        """Check if any sub-criterion is active.

        Returns:
            False for an open selection that matches every file.
        """
        return (
            self.patterns_active
            or self.regexes_active
            or self.older_than_active
            or self.newer_than_active
            or self.mode_active
        )

    @classmethod
    def open(cls) -> "SelectionCriteria":
        """Create criteria that select every file."""
        return cls()

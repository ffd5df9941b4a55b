"""Selection criteria evaluation.

Decides whether a single file matches a SelectionCriteria. Patterns are
compiled once per evaluator so a tree operation pays the cost a single
time; malformed patterns surface as ConfigurationError at that point,
never as per-file errors.
"""

import fnmatch
import re

from treeops.errors import ConfigurationError
from treeops.models.criteria import SelectCriterionMode, SelectionCriteria
from treeops.models.entry import EntryInfo


def _prepare_glob(pattern: str) -> str:
    """Check a glob pattern and normalize it for fnmatch.

    A class opened with "[^" is negated, as in shell globs; fnmatch only
    negates with "[!", so the caret is rewritten.

    Raises:
        ConfigurationError: If a character class is unterminated.
    """
    chars = list(pattern)
    i = 0
    n = len(chars)
    while i < n:
        if chars[i] == "[":
            j = i + 1
            if j < n and chars[j] in "!^":
                chars[j] = "!"
                j += 1
            # A ']' right after the opening bracket is a literal member
            if j < n and chars[j] == "]":
                j += 1
            while j < n and chars[j] != "]":
                j += 1
            if j >= n:
                msg = f"Unterminated character class in pattern: {pattern!r}"
                raise ConfigurationError(msg)
            i = j
        i += 1
    return "".join(chars)


class SelectionEvaluator:
    """Evaluates one SelectionCriteria against many files.

    Args:
        criteria: Criteria to evaluate.
        operation: Operation name used in error messages.

    Raises:
        ConfigurationError: If a glob or regular expression is malformed.
    """

    def __init__(self, criteria: SelectionCriteria, operation: str = "") -> None:
        self._criteria = criteria

        globs: list[re.Pattern[str]] = []
        for pattern in criteria.name_patterns:
            try:
                normalized = _prepare_glob(pattern)
            except ConfigurationError as e:
                raise ConfigurationError(e.message, operation=operation) from None
            globs.append(re.compile(fnmatch.translate(normalized)))
        self._globs = tuple(globs)

        regexes: list[re.Pattern[str]] = []
        for expression in criteria.name_regexes:
            try:
                regexes.append(re.compile(expression))
            except re.error as e:
                msg = f"Invalid regular expression {expression!r}: {e}"
                raise ConfigurationError(msg, operation=operation) from e
        self._regexes = tuple(regexes)

    @property
    def criteria(self) -> SelectionCriteria:
        """The criteria this evaluator applies."""
        return self._criteria

    def matches(self, entry: EntryInfo) -> bool:
        """Check if a file satisfies the criteria.

        Args:
            entry: Metadata of the file to test.

        Returns:
            True if the file is selected.
        """
        criteria = self._criteria
        if not criteria.is_active:
            return True

        results: list[bool] = []
        if criteria.patterns_active:
            results.append(any(g.match(entry.name) for g in self._globs))
        if criteria.regexes_active:
            results.append(any(r.search(entry.name) for r in self._regexes))
        if criteria.older_than is not None:
            results.append(entry.mtime < criteria.older_than)
        if criteria.newer_than is not None:
            results.append(entry.mtime > criteria.newer_than)
        if criteria.mode is not None:
            results.append(entry.permission_bits == criteria.mode)

        if criteria.combine == SelectCriterionMode.OR:
            return any(results)
        return all(results)


def matches(entry: EntryInfo, criteria: SelectionCriteria) -> bool:
    """Check if a file satisfies a SelectionCriteria.

    Convenience wrapper for one-off checks; tree operations build a
    SelectionEvaluator once and reuse it.

    Raises:
        ConfigurationError: If a pattern in the criteria is malformed.
    """
    return SelectionEvaluator(criteria).matches(entry)

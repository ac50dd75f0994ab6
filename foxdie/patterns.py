"""Shell-glob patterns for protected branch rules."""

import fnmatch
import re

from foxdie.exceptions import PatternError


class GlobPattern:
    """
    A compiled shell-glob pattern.

    ``*`` matches any run of characters (including ``/``), ``?`` matches one
    character and ``[...]`` is a character class (``[!...]`` negates it).
    Matching is case-sensitive and anchored at both ends.

    Example:
        ```python
        pattern = GlobPattern("release-*")
        pattern.matches("release-1.2")     # True
        pattern.matches("prerelease-1.2")  # False
        ```
    """

    __slots__ = ("_source", "_regex")

    def __init__(self, pattern: str) -> None:
        """
        Validate and compile a pattern.

        Args:
            pattern: The glob source, e.g. a provider's protected branch name

        Raises:
            PatternError: If the pattern has an unterminated character class
                or a ``**`` wildcard that is not a whole path component
        """
        _validate(pattern)
        self._source = pattern
        self._regex = re.compile(fnmatch.translate(pattern))

    @property
    def source(self) -> str:
        return self._source

    def matches(self, name: str) -> bool:
        """Return True if the whole of ``name`` matches the pattern."""
        return self._regex.match(name) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GlobPattern):
            return NotImplemented
        return self._source == other._source

    def __hash__(self) -> int:
        return hash(self._source)

    def __repr__(self) -> str:
        return f"GlobPattern({self._source!r})"

    def __str__(self) -> str:
        return self._source


def _validate(pattern: str) -> None:
    i, n = 0, len(pattern)
    while i < n:
        char = pattern[i]
        if char == "*":
            j = i
            while j < n and pattern[j] == "*":
                j += 1
            run = j - i
            if run > 2:
                raise PatternError(pattern, "wildcards are either regular `*` or recursive `**`")
            if run == 2:
                starts_component = i == 0 or pattern[i - 1] == "/"
                ends_component = j == n or pattern[j] == "/"
                if not (starts_component and ends_component):
                    raise PatternError(pattern, "recursive wildcards must form a single path component")
            i = j
        elif char == "[":
            j = i + 1
            if j < n and pattern[j] == "!":
                j += 1
            # A leading "]" is a literal member of the class
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                raise PatternError(pattern, "unterminated character class")
            i = j + 1
        else:
            i += 1

"""Shell-style glob expansion for the files to embed.

Patterns use the `glob` module's syntax (`*`, `?`, `[...]`, `[!...]`) without
recursive `**`. `*` also matches names starting with a dot. Bracket
expressions are checked up front so a malformed pattern fails the run instead
of silently matching nothing.
"""

from __future__ import annotations

import glob
import logging
import os
from collections.abc import Iterable

from embedfiles.errors import BadPatternError

logger = logging.getLogger(__name__)


def _check_class(pattern: str, start: int) -> int:
    """Validate the bracket expression opening at `start`; return the index after `]`."""

    i = start + 1
    if i < len(pattern) and pattern[i] in "!^":
        i += 1
    items = 0
    while True:
        if i >= len(pattern):
            raise BadPatternError(pattern, "unterminated character class")
        ch = pattern[i]
        if ch == "]" and items > 0:
            return i + 1
        if ch in "]-":
            raise BadPatternError(pattern, f"unexpected {ch!r} in character class")
        i += 1
        if i < len(pattern) and pattern[i] == "-":
            i += 1
            if i >= len(pattern):
                raise BadPatternError(pattern, "unterminated character class")
            if pattern[i] in "]-":
                raise BadPatternError(pattern, "character range is missing its end")
            i += 1
        items += 1


def check_pattern(pattern: str) -> None:
    """Raise BadPatternError if `pattern` has malformed syntax."""

    if not pattern:
        raise BadPatternError(pattern, "empty pattern")
    i = 0
    while i < len(pattern):
        if pattern[i] == "[":
            i = _check_class(pattern, i)
        else:
            i += 1


def iter_matches(pattern: str) -> list[str]:
    check_pattern(pattern)
    # Sorted by raw bytes so repeated runs over the same tree agree.
    matches = sorted(glob.glob(pattern, include_hidden=True), key=os.fsencode)
    logger.debug("pattern %r matched %d path(s)", pattern, len(matches))
    return matches


def expand_patterns(patterns: Iterable[str]) -> list[str]:
    """Resolve every pattern in order, keeping duplicates across patterns."""

    paths: list[str] = []
    for pattern in patterns:
        paths.extend(iter_matches(pattern))
    return paths


__all__ = [
    "check_pattern",
    "expand_patterns",
    "iter_matches",
]

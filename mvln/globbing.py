"""
Expansion of shell-style patterns in source arguments.

Shells usually expand ``*.txt`` before ``mvln`` sees it, but not when the
pattern is quoted or when the tool is driven from a script.  Arguments that
contain glob metacharacters are expanded here; anything else passes through
untouched, even if it does not exist (the move engine reports that).
"""

from __future__ import annotations

import glob
import logging
from pathlib import Path
from typing import Iterable, List, Sequence

__all__ = [
    "GlobError",
    "InvalidPatternError",
    "NoMatchesError",
    "is_glob_pattern",
    "expand_globs",
    "find_original_input",
]

logger = logging.getLogger(__name__)

GLOB_CHARS = frozenset("*?[]")


class GlobError(Exception):
    def __init__(self, pattern: str, message: str) -> None:
        self.pattern = pattern
        super().__init__(message)


class InvalidPatternError(GlobError):
    def __init__(self, pattern: str, reason: str) -> None:
        self.reason = reason
        super().__init__(pattern, f"invalid glob pattern '{pattern}': {reason}")


class NoMatchesError(GlobError):
    def __init__(self, pattern: str) -> None:
        super().__init__(pattern, f"no files matched pattern: {pattern}")


def is_glob_pattern(text: str) -> bool:
    """Return True if ``text`` contains any of ``*``, ``?``, ``[`` or ``]``."""
    return any(char in GLOB_CHARS for char in text)


def _check_brackets(pattern: str) -> None:
    # fnmatch silently treats an unterminated "[" as a literal; reject it instead.
    i = 0
    while i < len(pattern):
        if pattern[i] == "[":
            j = i + 1
            if j < len(pattern) and pattern[j] in "!^":
                j += 1
            if j < len(pattern) and pattern[j] == "]":
                j += 1
            while j < len(pattern) and pattern[j] != "]":
                j += 1
            if j >= len(pattern):
                raise InvalidPatternError(pattern, f"unterminated character class at position {i}")
            i = j
        i += 1


def expand_globs(patterns: Iterable[str]) -> List[Path]:
    """Expand glob patterns into a sorted list of paths.

    ``**`` matches any number of directories.  Hidden files are only matched
    when the pattern spells out the leading dot, as in the shell.

    Raises
    ------
    InvalidPatternError
        A pattern contains an unterminated ``[`` character class.
    NoMatchesError
        A pattern matched nothing.
    """
    paths: List[Path] = []
    for pattern in patterns:
        if not is_glob_pattern(pattern):
            paths.append(Path(pattern))
            continue
        _check_brackets(pattern)
        matches = glob.glob(pattern, recursive=True)
        if not matches:
            raise NoMatchesError(pattern)
        logger.debug("Pattern %r matched %d path(s)", pattern, len(matches))
        paths.extend(Path(match) for match in matches)
    return sorted(paths)


def find_original_input(arguments: Sequence[str], expanded: Path) -> str:
    """Return how the user spelled ``expanded`` on the command line.

    ``./file.txt`` should be echoed back as ``./file.txt`` and not as
    ``file.txt``.  Paths that came out of a glob have no spelling of their
    own and are shown as expanded.
    """
    for argument in arguments:
        if not is_glob_pattern(argument) and Path(argument) == expanded:
            return argument
    return str(expanded)

"""Glob-style file name patterns: ``*`` and ``?`` only."""

from __future__ import annotations

import re
from dataclasses import dataclass

from examiner.core.errors import InvalidParameterError


@dataclass(frozen=True, slots=True)
class MatchPattern:
    """Compiled, case-insensitive, whole-name pattern."""

    pattern: str
    regex: re.Pattern[str]

    def matches(self, name: str) -> bool:
        return self.regex.fullmatch(name) is not None


def _translate(pattern: str) -> str:
    parts: list[str] = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return "".join(parts)


def compile_pattern(pattern: object) -> MatchPattern:
    """Compile *pattern* into a :class:`MatchPattern`.

    Every character other than ``*`` (any run, possibly empty) and ``?``
    (exactly one character) matches itself literally.

    Raises:
        InvalidParameterError: If *pattern* is not a non-empty string.
    """
    if not isinstance(pattern, str) or not pattern:
        msg = "Parameter 'pattern' must be a non-empty string"
        raise InvalidParameterError(msg)
    regex = re.compile(_translate(pattern), re.IGNORECASE | re.DOTALL)
    return MatchPattern(pattern=pattern, regex=regex)


def matches(name: str, pattern: str) -> bool:
    """One-shot helper: does *name* match *pattern*?"""
    return compile_pattern(pattern).matches(name)

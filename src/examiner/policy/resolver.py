"""Path canonicalisation and restricted-prefix enforcement.

Every operation routes its caller-supplied path through
:meth:`PathResolver.resolve` before touching the filesystem. The resolver
turns the raw string into an absolute path with ``~``, ``.``/``..`` and
symlinks resolved, then refuses it if it is equal to or nested under a
restricted prefix.

Prefix comparison works on path segments (``/a/b`` never matches
``/a/bc``), ignores case, and treats ``\\`` and ``/`` alike. On a
case-sensitive filesystem this may deny a path that only differs in case
from a restricted one; it never allows one that should be denied.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import PurePath
from typing import TYPE_CHECKING

from examiner.core.errors import AccessDeniedError, InvalidPathError

if TYPE_CHECKING:
    from examiner.policy.model import PolicyConfig

logger = logging.getLogger(__name__)


def canonicalize(raw: str) -> str:
    """Return the absolute, symlink-free form of *raw*.

    Missing trailing components are kept as written (after ``..``
    elimination), so a non-existent path still canonicalises.

    Raises:
        ValueError: If *raw* is empty, contains a NUL byte, or cannot be
            resolved by the operating system.
    """
    if not raw or not raw.strip():
        msg = "path is empty"
        raise ValueError(msg)
    if "\x00" in raw:
        msg = "path contains a NUL byte"
        raise ValueError(msg)
    try:
        return os.path.realpath(os.path.expanduser(raw))
    except OSError as e:
        raise ValueError(str(e)) from e


def path_segments(path: str) -> tuple[str, ...]:
    """Split *path* into case-folded segments for comparison."""
    normalized = path.replace("\\", "/").casefold()
    return tuple(part for part in normalized.split("/") if part)


@dataclass(frozen=True, slots=True)
class ResolvedPath:
    """A caller-supplied path after canonicalisation and policy checks."""

    requested: str
    path: str

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def extension(self) -> str:
        """Lower-case extension of the final segment, ``""`` if none."""
        return PurePath(self.path).suffix.lower()

    def __str__(self) -> str:
        return self.path


class PathResolver:
    """Canonicalises paths and rejects those under restricted prefixes."""

    def __init__(self, policy: PolicyConfig) -> None:
        self._policy = policy
        self._prefixes: tuple[tuple[str, tuple[str, ...]], ...] = tuple(
            (prefix, path_segments(prefix)) for prefix in policy.restricted_prefixes
        )

    @property
    def policy(self) -> PolicyConfig:
        return self._policy

    def restricted_prefix_for(self, path: str) -> str | None:
        """Return the restricted prefix covering *path*, if any."""
        segments = path_segments(path)
        for prefix, prefix_segments in self._prefixes:
            if segments[: len(prefix_segments)] == prefix_segments:
                return prefix
        return None

    def is_restricted(self, path: str) -> bool:
        """Whether *path*, once canonicalised, falls under a restricted prefix.

        Paths that cannot be canonicalised count as restricted.
        """
        try:
            canonical = canonicalize(path)
        except ValueError:
            return True
        return self.restricted_prefix_for(canonical) is not None

    def resolve(self, raw_path: object) -> ResolvedPath:
        """Canonicalise *raw_path* and apply the restricted-prefix policy.

        Both the canonical path and the purely lexical absolute path are
        checked, so neither a symlink nor a ``..`` segment can step around
        a restricted prefix.

        Raises:
            InvalidPathError: If the path is not a usable string.
            AccessDeniedError: If the path is under a restricted prefix.
        """
        if not isinstance(raw_path, str):
            msg = "path must be a string"
            raise InvalidPathError(msg)
        try:
            canonical = canonicalize(raw_path)
        except ValueError as e:
            raise InvalidPathError(str(e)) from e

        lexical = os.path.abspath(os.path.expanduser(raw_path))
        prefix = self.restricted_prefix_for(canonical) or self.restricted_prefix_for(
            lexical
        )
        if prefix is not None:
            logger.info("Denied %r: under restricted prefix %s", raw_path, prefix)
            msg = f"Access denied: Path is in restricted directory: {prefix}"
            raise AccessDeniedError(msg)

        return ResolvedPath(requested=raw_path, path=canonical)

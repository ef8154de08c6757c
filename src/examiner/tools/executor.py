"""The four read-only file operations behind one policy snapshot.

:class:`OperationExecutor` is the only place that turns raised
:class:`~examiner.core.errors.ToolError` and :class:`OSError` into error
envelopes. Each call captures the current policy once at entry, so a
concurrent :meth:`OperationExecutor.reconfigure` never produces a call
that sees half of the old policy and half of the new one.

Nothing in this module opens a file for writing or changes the
filesystem in any way.
"""

from __future__ import annotations

import codecs
import logging
import os
import stat
from dataclasses import dataclass
from pathlib import PurePath
from typing import TYPE_CHECKING, Any

from examiner.core.errors import (
    ErrorKind,
    FileTooLargeError,
    InvalidParameterError,
    NotADirectoryPathError,
    NotAFileError,
    PathNotFoundError,
    ToolError,
)
from examiner.policy.extensions import ExtensionGate, category_for
from examiner.policy.resolver import PathResolver
from examiner.tools.metadata import (
    created_time,
    describe_file,
    format_file_size,
    isoformat,
    mime_type,
)
from examiner.tools.pattern import compile_pattern
from examiner.tools.result import OperationResult

if TYPE_CHECKING:
    from collections.abc import Callable

    from examiner.policy.model import PolicyConfig
    from examiner.policy.resolver import ResolvedPath

logger = logging.getLogger(__name__)

MAX_SEARCH_DEPTH = 10
BINARY_PLACEHOLDER = "[Binary file - content not readable as text]"
HIDDEN_PREFIX = "."
DEFAULT_ENCODING = "utf8"
_SNIFF_BYTES = 8192


@dataclass(frozen=True, slots=True)
class _PolicyState:
    policy: PolicyConfig
    resolver: PathResolver
    gate: ExtensionGate

    @classmethod
    def build(cls, policy: PolicyConfig) -> _PolicyState:
        return cls(policy=policy, resolver=PathResolver(policy), gate=ExtensionGate(policy))


def _os_error_result(exc: OSError) -> OperationResult:
    """Map an operating-system error onto the error taxonomy."""
    target = exc.filename if exc.filename is not None else ""
    if isinstance(exc, FileNotFoundError):
        return OperationResult.fail(ErrorKind.NOT_FOUND, f"Path not found: {target}")
    if isinstance(exc, PermissionError):
        return OperationResult.fail(ErrorKind.ACCESS_DENIED, f"Permission denied: {target}")
    if isinstance(exc, NotADirectoryError):
        return OperationResult.fail(ErrorKind.NOT_A_DIRECTORY, "Path is not a directory")
    if isinstance(exc, IsADirectoryError):
        return OperationResult.fail(ErrorKind.NOT_A_FILE, "Path is not a file")
    logger.warning("I/O error on %s: %s", target or "<unknown>", exc)
    return OperationResult.fail(ErrorKind.UNKNOWN, str(exc))


def _stat(path: str) -> os.stat_result:
    try:
        return os.stat(path)
    except FileNotFoundError:
        raise PathNotFoundError(path) from None


def _file_type(mode: int) -> str:
    if stat.S_ISDIR(mode):
        return "directory"
    if stat.S_ISREG(mode):
        return "file"
    return "other"


def _check_encoding(encoding: object) -> str:
    if not isinstance(encoding, str) or not encoding:
        msg = "Parameter 'encoding' must be a non-empty string"
        raise InvalidParameterError(msg)
    try:
        info = codecs.lookup(encoding)
    except LookupError:
        info = None
    # bytes-to-bytes and str-to-str codecs (base64, hex, rot13) can't decode a file
    if info is None or not info._is_text_encoding:
        msg = f"Unsupported encoding: {encoding}"
        raise InvalidParameterError(msg)
    return encoding


def _entry_record(entry: os.DirEntry[str]) -> dict[str, Any] | None:
    """Metadata for one directory entry; ``None`` if it vanished."""
    try:
        st = entry.stat()
    except OSError:
        try:
            st = entry.stat(follow_symlinks=False)
        except OSError:
            return None

    kind = _file_type(st.st_mode)
    is_file = kind == "file"
    return {
        "name": entry.name,
        "path": entry.path,
        "directory": os.path.dirname(entry.path),
        "type": kind,
        "size": st.st_size,
        "sizeFormatted": format_file_size(st.st_size),
        "lastModified": isoformat(st.st_mtime),
        "extension": PurePath(entry.name).suffix if is_file else None,
        "mimeType": mime_type(entry.name) if is_file else None,
    }


class OperationExecutor:
    """Runs ``read``, ``list``, ``stat`` and ``search`` under a policy.

    Every method returns an :class:`OperationResult`; none raises for
    policy violations, missing files or I/O failures.
    """

    def __init__(self, policy: PolicyConfig) -> None:
        self._state = _PolicyState.build(policy)

    @property
    def policy(self) -> PolicyConfig:
        return self._state.policy

    def reconfigure(self, policy: PolicyConfig) -> None:
        """Publish a new policy. Calls already running keep the old one."""
        self._state = _PolicyState.build(policy)
        logger.info(
            "Policy replaced: %d extensions, %d restricted prefixes",
            len(policy.allowed_extensions),
            len(policy.restricted_prefixes),
        )

    # ── Public operations ─────────────────────────────────────

    def read(self, path: object, encoding: object = DEFAULT_ENCODING) -> OperationResult:
        """Read a file's text, or its metadata if it is binary."""
        return self._run("read_file", self._read, path, encoding)

    def list(self, path: object, include_hidden: bool = False) -> OperationResult:
        """List the immediate entries of a directory."""
        return self._run("list_directory", self._list, path, include_hidden)

    def stat(self, path: object) -> OperationResult:
        """Full metadata for a file or directory."""
        return self._run("get_file_info", self._stat_info, path)

    def search(
        self, path: object, pattern: object, recursive: bool = False
    ) -> OperationResult:
        """Find files whose name matches *pattern* under a directory."""
        return self._run("search_files", self._search, path, pattern, recursive)

    # ── Plumbing ──────────────────────────────────────────────

    def _run(
        self,
        operation: str,
        func: Callable[..., dict[str, Any]],
        *args: Any,
    ) -> OperationResult:
        state = self._state
        try:
            return OperationResult.ok(func(state, *args))
        except ToolError as exc:
            logger.debug("%s failed: %s", operation, exc.message)
            return OperationResult.fail(exc.kind, exc.message)
        except OSError as exc:
            return _os_error_result(exc)
        except Exception as exc:
            logger.exception("Unexpected error during %s", operation)
            return OperationResult.fail(ErrorKind.UNKNOWN, str(exc) or "Unknown error occurred")

    # ── read_file ─────────────────────────────────────────────

    def _read(self, state: _PolicyState, path: object, encoding: object) -> dict[str, Any]:
        resolved = state.resolver.resolve(path)
        category = state.gate.check(resolved)
        encoding = _check_encoding(encoding)
        limit = state.policy.max_file_size_bytes

        st = _stat(resolved.path)
        if not stat.S_ISREG(st.st_mode):
            raise NotAFileError
        if st.st_size > limit:
            raise FileTooLargeError(st.st_size, limit)

        if category.is_binary:
            return self._binary_payload(resolved, st, category.value)

        with open(resolved.path, "rb") as f:
            # the file may have changed since the stat above
            current = os.fstat(f.fileno())
            if not stat.S_ISREG(current.st_mode):
                raise NotAFileError
            raw = f.read(limit + 1)
        if len(raw) > limit:
            raise FileTooLargeError(max(current.st_size, len(raw)), limit)

        if b"\x00" in raw[:_SNIFF_BYTES]:
            return self._binary_payload(resolved, current, category.value)

        try:
            content = raw.decode(encoding)
        except UnicodeDecodeError as exc:
            msg = f"Cannot decode file as {encoding}: {exc.reason}"
            raise ToolError(msg) from exc

        return {
            "isBinary": False,
            "content": content,
            "path": resolved.path,
            "size": len(raw),
            "sizeFormatted": format_file_size(len(raw)),
            "encoding": encoding,
            "mimeType": mime_type(resolved.path),
            "lastModified": isoformat(current.st_mtime),
        }

    @staticmethod
    def _binary_payload(
        resolved: ResolvedPath, st: os.stat_result, category: str
    ) -> dict[str, Any]:
        ext = resolved.extension
        return {
            "isBinary": True,
            "content": BINARY_PLACEHOLDER,
            "path": resolved.path,
            "size": st.st_size,
            "sizeFormatted": format_file_size(st.st_size),
            "mimeType": mime_type(resolved.path),
            "lastModified": isoformat(st.st_mtime),
            "fileType": ext,
            "category": category,
            "message": (
                f"This is a binary file ({ext or 'no extension'}). Only metadata is "
                "shown. Use get_file_info for detailed information."
            ),
        }

    # ── list_directory ────────────────────────────────────────

    def _list(
        self, state: _PolicyState, path: object, include_hidden: bool
    ) -> dict[str, Any]:
        resolved = state.resolver.resolve(path)
        st = _stat(resolved.path)
        if not stat.S_ISDIR(st.st_mode):
            raise NotADirectoryPathError

        with os.scandir(resolved.path) as it:
            entries = sorted(it, key=lambda e: e.name)

        items: list[dict[str, Any]] = []
        for entry in entries:
            if not include_hidden and entry.name.startswith(HIDDEN_PREFIX):
                continue
            if state.resolver.is_restricted(entry.path):
                continue
            record = _entry_record(entry)
            if record is not None:
                items.append(record)

        return {"path": resolved.path, "items": items, "count": len(items)}

    # ── get_file_info ─────────────────────────────────────────

    def _stat_info(self, state: _PolicyState, path: object) -> dict[str, Any]:
        resolved = state.resolver.resolve(path)
        st = _stat(resolved.path)
        kind = _file_type(st.st_mode)
        ext = resolved.extension
        is_file = kind == "file"

        info: dict[str, Any] = {
            "path": resolved.path,
            "name": resolved.name,
            "directory": os.path.dirname(resolved.path),
            "extension": ext,
            "type": kind,
            "size": st.st_size,
            "sizeFormatted": format_file_size(st.st_size),
            "created": isoformat(created_time(st)),
            "lastModified": isoformat(st.st_mtime),
            "lastAccessed": isoformat(st.st_atime),
            "mimeType": mime_type(resolved.path) if is_file else None,
            "category": category_for(ext).value if is_file else None,
            "readable": os.access(resolved.path, os.R_OK),
            "writable": False,
        }
        if is_file:
            info.update(describe_file(ext))
        return info

    # ── search_files ──────────────────────────────────────────

    def _search(
        self,
        state: _PolicyState,
        path: object,
        pattern: object,
        recursive: bool,
    ) -> dict[str, Any]:
        resolved = state.resolver.resolve(path)
        matcher = compile_pattern(pattern)
        st = _stat(resolved.path)
        if not stat.S_ISDIR(st.st_mode):
            raise NotADirectoryPathError

        results: list[dict[str, Any]] = []
        stack: list[tuple[str, int]] = [(resolved.path, 0)]
        while stack:
            directory, depth = stack.pop()
            try:
                with os.scandir(directory) as it:
                    entries = sorted(it, key=lambda e: e.name)
            except OSError as exc:
                if depth == 0:
                    raise
                logger.debug("Skipping unreadable directory %s: %s", directory, exc)
                continue

            subdirs: list[str] = []
            for entry in entries:
                try:
                    if entry.is_dir(follow_symlinks=False):
                        if (
                            recursive
                            and depth < MAX_SEARCH_DEPTH
                            and not state.resolver.is_restricted(entry.path)
                        ):
                            subdirs.append(entry.path)
                        continue
                    is_file = entry.is_file()
                except OSError:
                    continue
                if not is_file or not matcher.matches(entry.name):
                    continue
                if state.resolver.is_restricted(entry.path):
                    continue
                record = _entry_record(entry)
                if record is not None:
                    results.append(record)

            stack.extend((subdir, depth + 1) for subdir in reversed(subdirs))

        return {
            "searchPath": resolved.path,
            "pattern": matcher.pattern,
            "recursive": recursive,
            "results": results,
            "count": len(results),
        }

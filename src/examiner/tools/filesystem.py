"""File tools: the four read-only operations as :class:`Tool` objects.

All four share one :class:`OperationExecutor`, and therefore one policy.
Each tool validates its call parameters, runs the blocking operation in
the default thread pool, and returns the JSON envelope
``{"success": ..., "data" | "error": ...}``.
"""

from __future__ import annotations

import asyncio
import functools
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from examiner.core.errors import ErrorKind, InvalidParameterError
from examiner.tools.executor import DEFAULT_ENCODING
from examiner.tools.result import OperationResult

if TYPE_CHECKING:
    from examiner.tools.executor import OperationExecutor


def _require_str(kwargs: dict[str, Any], key: str) -> str:
    value = kwargs.get(key)
    if not value or not isinstance(value, str):
        msg = f"Parameter '{key}' is required and must be a non-empty string."
        raise InvalidParameterError(msg)
    return value


def _optional_bool(kwargs: dict[str, Any], key: str) -> bool:
    value = kwargs.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        msg = f"Parameter '{key}' must be a boolean."
        raise InvalidParameterError(msg)
    return value


class _FileTool(ABC):
    """Shared plumbing for the file tools.

    Implements the :class:`Tool` protocol; subclasses provide the name,
    description, schema and :meth:`_dispatch`.
    """

    def __init__(self, executor: OperationExecutor) -> None:
        self._executor = executor

    @abstractmethod
    def _dispatch(self, kwargs: dict[str, Any]) -> OperationResult:
        """Validate *kwargs* and call the matching executor operation."""

    def run(self, **kwargs: Any) -> OperationResult:
        """Validate parameters and run the operation synchronously."""
        try:
            return self._dispatch(kwargs)
        except InvalidParameterError as exc:
            return OperationResult.fail(ErrorKind.INVALID_PARAMETER, exc.message)

    async def execute(self, **kwargs: Any) -> str:
        """Run the operation off the event loop and return the envelope JSON."""
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, functools.partial(self.run, **kwargs))
        return result.to_json()


class ReadFileTool(_FileTool):
    """``read_file``: text content, or metadata only for binary files."""

    @property
    def name(self) -> str:
        return "read_file"

    @property
    def description(self) -> str:
        return (
            "Read the contents of a file from the local file system. File types "
            "and restrictions are configurable. Restricted from accessing system "
            "directories. For binary files (images, executables), returns "
            "metadata instead of content."
        )

    @property
    def parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "file_path": {
                    "type": "string",
                    "description": "Absolute path to the file to read.",
                },
                "encoding": {
                    "type": "string",
                    "default": DEFAULT_ENCODING,
                    "description": "File encoding (default: utf8).",
                },
            },
            "required": ["file_path"],
        }

    def _dispatch(self, kwargs: dict[str, Any]) -> OperationResult:
        path = _require_str(kwargs, "file_path")
        encoding = kwargs.get("encoding")
        if encoding is None:
            encoding = DEFAULT_ENCODING
        return self._executor.read(path, encoding)


class ListDirectoryTool(_FileTool):
    """``list_directory``: immediate entries of one directory."""

    @property
    def name(self) -> str:
        return "list_directory"

    @property
    def description(self) -> str:
        return (
            "List the contents of a directory. Returns information about files "
            "and subdirectories."
        )

    @property
    def parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "dir_path": {
                    "type": "string",
                    "description": "Absolute path to the directory to list.",
                },
                "include_hidden": {
                    "type": "boolean",
                    "default": False,
                    "description": "Whether to include hidden files.",
                },
            },
            "required": ["dir_path"],
        }

    def _dispatch(self, kwargs: dict[str, Any]) -> OperationResult:
        path = _require_str(kwargs, "dir_path")
        include_hidden = _optional_bool(kwargs, "include_hidden")
        return self._executor.list(path, include_hidden)


class GetFileInfoTool(_FileTool):
    """``get_file_info``: metadata for any permitted path."""

    @property
    def name(self) -> str:
        return "get_file_info"

    @property
    def description(self) -> str:
        return (
            "Get detailed metadata and information about a file or directory, "
            "including category details for images, .NET files and executables."
        )

    @property
    def parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "file_path": {
                    "type": "string",
                    "description": "Absolute path to the file or directory.",
                },
            },
            "required": ["file_path"],
        }

    def _dispatch(self, kwargs: dict[str, Any]) -> OperationResult:
        return self._executor.stat(_require_str(kwargs, "file_path"))


class SearchFilesTool(_FileTool):
    """``search_files``: wildcard name search, optionally recursive."""

    @property
    def name(self) -> str:
        return "search_files"

    @property
    def description(self) -> str:
        return (
            "Search for files matching a pattern in the specified directory. "
            "Supports wildcard patterns (* and ?)."
        )

    @property
    def parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "search_path": {
                    "type": "string",
                    "description": "Directory path to search in.",
                },
                "pattern": {
                    "type": "string",
                    "description": "File name pattern (supports wildcards * and ?).",
                },
                "recursive": {
                    "type": "boolean",
                    "default": False,
                    "description": "Whether to search recursively.",
                },
            },
            "required": ["search_path", "pattern"],
        }

    def _dispatch(self, kwargs: dict[str, Any]) -> OperationResult:
        path = _require_str(kwargs, "search_path")
        pattern = _require_str(kwargs, "pattern")
        recursive = _optional_bool(kwargs, "recursive")
        return self._executor.search(path, pattern, recursive)


FILE_TOOLS: tuple[type[_FileTool], ...] = (
    ReadFileTool,
    ListDirectoryTool,
    GetFileInfoTool,
    SearchFilesTool,
)

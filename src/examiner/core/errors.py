"""Exception hierarchy for examiner.

Every module imports from here. The hierarchy is:

    ExaminerError
    ├── ConfigError
    └── ToolError(kind, message)
        ├── InvalidPathError
        ├── InvalidParameterError
        ├── AccessDeniedError
        ├── ExtensionNotAllowedError(extension)
        ├── CategoryDisabledError(category)
        ├── NotAFileError
        ├── NotADirectoryPathError
        ├── FileTooLargeError(size, limit)
        └── PathNotFoundError

``ToolError`` subclasses are expected outcomes of a tool call. They never
leave :class:`~examiner.tools.executor.OperationExecutor`, which turns them
into an error envelope. ``ConfigError`` is the only fatal error.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Kind tag carried by every failed operation."""

    INVALID_PATH = "InvalidPath"
    INVALID_PARAMETER = "InvalidParameter"
    ACCESS_DENIED = "AccessDenied"
    EXTENSION_NOT_ALLOWED = "ExtensionNotAllowed"
    CATEGORY_DISABLED = "CategoryDisabled"
    NOT_A_FILE = "NotAFile"
    NOT_A_DIRECTORY = "NotADirectory"
    TOO_LARGE = "TooLarge"
    NOT_FOUND = "NotFound"
    UNKNOWN = "Unknown"


class ExaminerError(Exception):
    """Base exception for all examiner errors."""


# ─── Configuration Errors ─────────────────────────────────────


class ConfigError(ExaminerError):
    """Invalid configuration."""


# ─── Tool Errors ──────────────────────────────────────────────


class ToolError(ExaminerError):
    """Base for errors reported back to the caller of a tool."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidPathError(ToolError):
    """Path cannot be canonicalised (empty, NUL byte, symlink loop...)."""

    kind = ErrorKind.INVALID_PATH

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid path: {reason}")


class InvalidParameterError(ToolError):
    """A call parameter is missing or malformed."""

    kind = ErrorKind.INVALID_PARAMETER


class AccessDeniedError(ToolError):
    """Path is restricted by policy or by the operating system."""

    kind = ErrorKind.ACCESS_DENIED


class ExtensionNotAllowedError(ToolError):
    """File extension is absent from the allowlist."""

    kind = ErrorKind.EXTENSION_NOT_ALLOWED

    def __init__(self, extension: str) -> None:
        self.extension = extension
        shown = extension or "(no extension)"
        super().__init__(f"File type not allowed: {shown}")


class CategoryDisabledError(ToolError):
    """Extension is allowlisted but its category toggle is off."""

    kind = ErrorKind.CATEGORY_DISABLED

    def __init__(self, category: str, label: str) -> None:
        self.category = category
        super().__init__(f"{label} files are disabled in plugin configuration")


class NotAFileError(ToolError):
    """Path exists but is not a regular file."""

    kind = ErrorKind.NOT_A_FILE

    def __init__(self) -> None:
        super().__init__("Path is not a file")


class NotADirectoryPathError(ToolError):
    """Path exists but is not a directory."""

    kind = ErrorKind.NOT_A_DIRECTORY

    def __init__(self) -> None:
        super().__init__("Path is not a directory")


class FileTooLargeError(ToolError):
    """File exceeds the configured size limit."""

    kind = ErrorKind.TOO_LARGE

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"File too large: {size} bytes (max: {limit})")


class PathNotFoundError(ToolError):
    """Nothing exists at the resolved path."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path not found: {path}")

"""Core types and errors."""

from examiner.core.errors import (
    AccessDeniedError,
    CategoryDisabledError,
    ConfigError,
    ErrorKind,
    ExaminerError,
    ExtensionNotAllowedError,
    FileTooLargeError,
    InvalidParameterError,
    InvalidPathError,
    NotADirectoryPathError,
    NotAFileError,
    PathNotFoundError,
    ToolError,
)

__all__ = [
    "AccessDeniedError",
    "CategoryDisabledError",
    "ConfigError",
    "ErrorKind",
    "ExaminerError",
    "ExtensionNotAllowedError",
    "FileTooLargeError",
    "InvalidParameterError",
    "InvalidPathError",
    "NotADirectoryPathError",
    "NotAFileError",
    "PathNotFoundError",
    "ToolError",
]

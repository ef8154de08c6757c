"""Pydantic models for examiner configuration."""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_ALLOWED_EXTENSIONS: list[str] = [
    ".txt", ".md", ".json", ".xml", ".csv", ".log",
    ".yml", ".yaml", ".ini", ".cfg", ".conf", ".properties",
    ".js", ".ts", ".py", ".java", ".cpp", ".c", ".h",
    ".html", ".css", ".sql", ".php", ".rb", ".go", ".rs",
    ".cs", ".vb", ".fs", ".csproj", ".vbproj", ".fsproj",
    ".sln", ".config", ".resx", ".xaml", ".razor",
    ".cshtml", ".vbhtml", ".aspx", ".ascx", ".asmx",
    ".dll", ".exe", ".msi", ".nupkg",
    ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tiff", ".tif",
    ".webp", ".svg", ".ico", ".heic", ".heif", ".raw",
    ".cr2", ".nef", ".arw", ".dng",
]  # fmt: skip

WINDOWS_RESTRICTED_PATHS: list[str] = [
    "C:\\Windows\\System32",
    "C:\\Program Files",
    "C:\\Program Files (x86)",
]

POSIX_RESTRICTED_PATHS: list[str] = ["/etc", "/proc", "/sys", "/dev", "/boot"]


def default_restricted_paths() -> list[str]:
    """Return the restricted paths that suit the host platform."""
    if os.name == "nt":
        return list(WINDOWS_RESTRICTED_PATHS)
    return list(POSIX_RESTRICTED_PATHS)


def _split_csv(value: Any) -> Any:
    """Accept either a list or a comma-separated string."""
    if isinstance(value, str):
        return [part.strip() for part in value.split(",")]
    return value


def normalize_extension(raw: str) -> str:
    """Lower-case *raw* and give it a leading dot.

    A lone ``.`` stands for files without an extension and maps to ``""``.
    """
    ext = raw.strip().lower()
    if ext == ".":
        return ""
    if not ext.startswith("."):
        ext = "." + ext
    return ext


class PolicySettings(BaseModel):
    """File access policy as written in config files or the environment."""

    allowed_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_EXTENSIONS)
    )
    restricted_paths: list[str] = Field(default_factory=default_restricted_paths)
    max_file_size_mb: int = Field(default=10, ge=1, le=100)
    enable_image_files: bool = True
    enable_dotnet_files: bool = True
    enable_binary_files: bool = True

    @field_validator("allowed_extensions", mode="before")
    @classmethod
    def _parse_extensions(cls, value: Any) -> Any:
        value = _split_csv(value)
        if isinstance(value, list):
            value = [
                normalize_extension(v)
                for v in value
                if isinstance(v, str) and v.strip()
            ]
            if not value:
                msg = "allowed_extensions must contain at least one extension"
                raise ValueError(msg)
        return value

    @field_validator("restricted_paths", mode="before")
    @classmethod
    def _parse_restricted(cls, value: Any) -> Any:
        value = _split_csv(value)
        if isinstance(value, list):
            value = [v.strip() for v in value if isinstance(v, str) and v.strip()]
        return value


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    structured: bool = False


class ExaminerConfig(BaseModel):
    """Top-level configuration for examiner."""

    policy: PolicySettings = Field(default_factory=PolicySettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

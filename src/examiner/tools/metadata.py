"""Metadata helpers: MIME lookup, size strings, timestamps, descriptions."""

from __future__ import annotations

import mimetypes
import os
from datetime import UTC, datetime
from typing import Any

UNKNOWN_MIME = "unknown"

_SIZE_UNITS = ("B", "KB", "MB", "GB")

_DOTNET_LANGUAGES = {".cs": "C#", ".vb": "VB.NET", ".fs": "F#"}
_DOTNET_PROJECTS = (".csproj", ".vbproj", ".fsproj")
_DOTNET_FILES = (*_DOTNET_LANGUAGES, *_DOTNET_PROJECTS, ".sln", ".config")
_IMAGE_FILES = (
    ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tiff", ".tif", ".webp", ".svg", ".ico",
)  # fmt: skip
_EXECUTABLES = {
    ".dll": ("Dynamic Link Library", ".NET assembly or Windows library"),
    ".exe": ("Executable", "Windows application or .NET assembly"),
    ".msi": ("Installer Package", "Windows Installer package"),
}


def mime_type(path: str) -> str:
    """Guess a MIME type from the file name alone."""
    guessed, _ = mimetypes.guess_type(path, strict=False)
    return guessed or UNKNOWN_MIME


def format_file_size(size: int) -> str:
    """Render *size* bytes as e.g. ``"1.5 KB"`` (1024 base)."""
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.1f} {_SIZE_UNITS[unit]}"


def isoformat(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=UTC).isoformat()


def created_time(st: os.stat_result) -> float:
    """Birth time where the platform records it, else ctime."""
    return getattr(st, "st_birthtime", st.st_ctime)


def describe_file(extension: str) -> dict[str, Any]:
    """Descriptive extras for well-known file types."""
    ext = extension.lower()
    info: dict[str, Any] = {}

    if ext in _DOTNET_FILES:
        info["fileCategory"] = ".NET Development File"
        info["framework"] = "Microsoft .NET"
        if ext in _DOTNET_LANGUAGES:
            info["fileType"] = "Source Code"
            info["language"] = _DOTNET_LANGUAGES[ext]
        elif ext in _DOTNET_PROJECTS:
            info["fileType"] = "Project File"
            info["description"] = "MSBuild project definition"
        elif ext == ".sln":
            info["fileType"] = "Solution File"
            info["description"] = "Visual Studio solution"

    if ext in _IMAGE_FILES:
        image_format = ext.lstrip(".").upper()
        info["fileCategory"] = "Image File"
        info["imageFormat"] = image_format
        info["description"] = f"{image_format} image file"
        info["note"] = "Use image processing tools to get dimensions and detailed metadata"

    if ext in _EXECUTABLES:
        file_type, description = _EXECUTABLES[ext]
        info["fileCategory"] = "Binary/Executable"
        info["warning"] = "Binary file - content cannot be read as text"
        info["fileType"] = file_type
        info["description"] = description

    return info

"""Configuration loading from TOML layers and ``EXAMINER_*`` variables.

Layers, lowest priority first:

1. model defaults
2. ``$XDG_CONFIG_HOME/examiner/config.toml`` (``~/.config`` without XDG)
3. ``./examiner.toml``
4. the file named by ``$EXAMINER_CONFIG``
5. the ``path`` given to :func:`load_config`
6. ``EXAMINER_*`` policy variables, see :data:`ENV_OVERRIDES`
7. the ``overrides`` mapping given to :func:`load_config`

Variables use the textual form a settings UI produces: comma-separated
lists, a whole number of megabytes, and ``true``/``false``-style toggles.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from examiner.core.errors import ConfigError

from .schema import ExaminerConfig

CONFIG_DIR_NAME = "examiner"
PROJECT_CONFIG_NAME = "examiner.toml"
CONFIG_ENV_VAR = "EXAMINER_CONFIG"

# env var -> (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "EXAMINER_ALLOWED_EXTENSIONS": ("policy", "allowed_extensions"),
    "EXAMINER_RESTRICTED_PATHS": ("policy", "restricted_paths"),
    "EXAMINER_MAX_FILE_SIZE_MB": ("policy", "max_file_size_mb"),
    "EXAMINER_ENABLE_IMAGE_FILES": ("policy", "enable_image_files"),
    "EXAMINER_ENABLE_DOTNET_FILES": ("policy", "enable_dotnet_files"),
    "EXAMINER_ENABLE_BINARY_FILES": ("policy", "enable_binary_files"),
    "EXAMINER_LOG_LEVEL": ("logging", "level"),
}


def user_config_path() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / CONFIG_DIR_NAME / "config.toml"


def config_files(path: str | Path | None = None) -> list[Path]:
    """Config files that exist, lowest priority first.

    Raises:
        ConfigError: If ``$EXAMINER_CONFIG`` or *path* names a missing file.
    """
    found = [
        candidate
        for candidate in (user_config_path(), Path.cwd() / PROJECT_CONFIG_NAME)
        if candidate.is_file()
    ]

    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        if not Path(from_env).is_file():
            msg = f"{CONFIG_ENV_VAR} points to non-existent file: {from_env}"
            raise ConfigError(msg)
        found.append(Path(from_env))

    if path is not None:
        if not Path(path).is_file():
            msg = f"Config file not found: {path}"
            raise ConfigError(msg)
        found.append(Path(path))
    return found


def _parse_toml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read config file {path}: {e}"
        raise ConfigError(msg) from e
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigError(msg) from e


def merge_layers(lower: dict[str, Any], upper: dict[str, Any]) -> dict[str, Any]:
    """Return *lower* updated with *upper*, merging nested tables.

    Neither argument is modified.
    """
    merged = dict(lower)
    for key, value in upper.items():
        below = merged.get(key)
        if isinstance(below, dict) and isinstance(value, dict):
            value = merge_layers(below, value)
        merged[key] = value
    return merged


def env_layer() -> dict[str, Any]:
    """The ``EXAMINER_*`` variables that are set, as a nested table."""
    layer: dict[str, dict[str, str]] = {}
    for var, (section, key) in ENV_OVERRIDES.items():
        if var in os.environ:
            layer.setdefault(section, {})[key] = os.environ[var]
    return layer


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}"
        for item in error.errors()
    )


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> ExaminerConfig:
    """Merge every configuration layer and validate the result.

    Raises:
        ConfigError: On a missing or unreadable file, bad TOML, or a value
            the schema rejects (including an empty extension allowlist).
    """
    merged: dict[str, Any] = {}
    for config_file in config_files(path):
        merged = merge_layers(merged, _parse_toml(config_file))
    merged = merge_layers(merged, env_layer())
    if overrides:
        merged = merge_layers(merged, overrides)

    try:
        return ExaminerConfig.model_validate(merged)
    except ValidationError as e:
        msg = f"Configuration validation failed: {_describe(e)}"
        raise ConfigError(msg) from e

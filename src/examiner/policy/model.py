"""Immutable access policy.

A :class:`PolicyConfig` is built once from settings and shared by every
call. Reconfiguration builds a new instance; nothing mutates one in place.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING

from examiner.core.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from examiner.config.schema import PolicySettings

MB = 1024 * 1024


class Category(StrEnum):
    """Coarse file classification used by the category toggles."""

    IMAGE = "image"
    MANAGED_BINARY = "managed_binary"
    GENERIC_BINARY = "generic_binary"
    TEXT = "text"

    @property
    def label(self) -> str:
        """Name used in user-facing messages."""
        return _LABELS[self]

    @property
    def is_binary(self) -> bool:
        """Whether files of this category are never returned as text."""
        return self in (Category.IMAGE, Category.GENERIC_BINARY)


_LABELS = {
    Category.IMAGE: "Image",
    Category.MANAGED_BINARY: ".NET",
    Category.GENERIC_BINARY: "Binary",
    Category.TEXT: "Text",
}


@dataclass(frozen=True, slots=True)
class PolicyConfig:
    """What may be touched, and how much of it.

    ``allowed_extensions`` holds lower-case, dot-prefixed extensions; the
    empty string stands for files without an extension.
    ``restricted_prefixes`` holds absolute canonical directory paths.
    """

    allowed_extensions: frozenset[str]
    restricted_prefixes: tuple[str, ...]
    max_file_size_bytes: int
    category_enabled: Mapping[Category, bool] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        if not self.allowed_extensions:
            msg = "Policy must allow at least one file extension"
            raise ConfigError(msg)
        if self.max_file_size_bytes <= 0:
            msg = f"max_file_size_bytes must be positive, got {self.max_file_size_bytes}"
            raise ConfigError(msg)
        for prefix in self.restricted_prefixes:
            if not os.path.isabs(prefix):
                msg = f"Restricted path must be absolute: {prefix}"
                raise ConfigError(msg)
        for ext in self.allowed_extensions:
            if ext and (ext != ext.lower() or not ext.startswith(".")):
                msg = f"Allowed extension must be lower-case and dot-prefixed: {ext}"
                raise ConfigError(msg)

    def is_enabled(self, category: Category) -> bool:
        """Text is always enabled; other categories default to enabled."""
        if category is Category.TEXT:
            return True
        return self.category_enabled.get(category, True)

    @classmethod
    def create(
        cls,
        *,
        allowed_extensions: Iterable[str],
        restricted_paths: Iterable[str] = (),
        max_file_size_bytes: int = 10 * MB,
        category_enabled: Mapping[Category, bool] | None = None,
    ) -> PolicyConfig:
        """Build a policy, canonicalising the restricted paths.

        Raises:
            ConfigError: If any value breaks the policy invariants.
        """
        from examiner.policy.resolver import canonicalize

        prefixes: list[str] = []
        for raw in restricted_paths:
            if not os.path.isabs(os.path.expanduser(raw)):
                msg = f"Restricted path must be absolute: {raw}"
                raise ConfigError(msg)
            try:
                canonical = canonicalize(raw)
            except ValueError as e:
                msg = f"Cannot canonicalise restricted path {raw!r}: {e}"
                raise ConfigError(msg) from e
            if canonical not in prefixes:
                prefixes.append(canonical)

        return cls(
            allowed_extensions=frozenset(allowed_extensions),
            restricted_prefixes=tuple(prefixes),
            max_file_size_bytes=max_file_size_bytes,
            category_enabled=MappingProxyType(dict(category_enabled or {})),
        )


def build_policy(settings: PolicySettings) -> PolicyConfig:
    """Translate validated settings into an immutable policy."""
    return PolicyConfig.create(
        allowed_extensions=settings.allowed_extensions,
        restricted_paths=settings.restricted_paths,
        max_file_size_bytes=settings.max_file_size_mb * MB,
        category_enabled={
            Category.IMAGE: settings.enable_image_files,
            Category.MANAGED_BINARY: settings.enable_dotnet_files,
            Category.GENERIC_BINARY: settings.enable_binary_files,
        },
    )

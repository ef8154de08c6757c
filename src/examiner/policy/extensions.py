"""Extension allowlist and category toggles for the read operation."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING

from examiner.core.errors import CategoryDisabledError, ExtensionNotAllowedError
from examiner.policy.model import Category

if TYPE_CHECKING:
    from examiner.policy.model import PolicyConfig
    from examiner.policy.resolver import ResolvedPath

logger = logging.getLogger(__name__)

_IMAGE = (
    ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tiff", ".tif", ".webp",
    ".svg", ".ico", ".heic", ".heif", ".raw", ".cr2", ".nef", ".arw", ".dng",
)  # fmt: skip
_MANAGED = (
    ".cs", ".vb", ".fs", ".csproj", ".vbproj", ".fsproj", ".sln",
    ".razor", ".cshtml", ".vbhtml", ".aspx", ".ascx", ".asmx",
)  # fmt: skip
_BINARY = (".dll", ".exe", ".msi", ".nupkg")

EXTENSION_CATEGORIES = MappingProxyType(
    {
        **{ext: Category.IMAGE for ext in _IMAGE},
        **{ext: Category.MANAGED_BINARY for ext in _MANAGED},
        **{ext: Category.GENERIC_BINARY for ext in _BINARY},
    }
)


def category_for(extension: str) -> Category:
    """Map a lower-case extension to its category (text if unlisted)."""
    return EXTENSION_CATEGORIES.get(extension.lower(), Category.TEXT)


class ExtensionGate:
    """Allowlist membership AND category toggle, both required."""

    def __init__(self, policy: PolicyConfig) -> None:
        self._policy = policy

    def check(self, resolved: ResolvedPath) -> Category:
        """Return the file's category if reading it is permitted.

        Raises:
            ExtensionNotAllowedError: Extension missing from the allowlist.
            CategoryDisabledError: Extension allowed but category switched off.
        """
        ext = resolved.extension
        if ext not in self._policy.allowed_extensions:
            logger.info("Denied %s: extension %r not allowed", resolved.path, ext)
            raise ExtensionNotAllowedError(ext)

        category = category_for(ext)
        if not self._policy.is_enabled(category):
            logger.info("Denied %s: category %s disabled", resolved.path, category)
            raise CategoryDisabledError(category.value, category.label)
        return category

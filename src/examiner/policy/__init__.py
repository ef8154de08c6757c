"""Access policy: immutable config, path resolution, extension gating."""

from examiner.policy.extensions import EXTENSION_CATEGORIES, ExtensionGate, category_for
from examiner.policy.model import Category, PolicyConfig, build_policy
from examiner.policy.resolver import PathResolver, ResolvedPath, canonicalize

__all__ = [
    "EXTENSION_CATEGORIES",
    "Category",
    "ExtensionGate",
    "PathResolver",
    "PolicyConfig",
    "ResolvedPath",
    "build_policy",
    "canonicalize",
    "category_for",
]

"""Tests for PolicyConfig, Category and build_policy."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path

import pytest

from examiner.config.schema import PolicySettings
from examiner.core.errors import ConfigError
from examiner.policy.model import MB, Category, PolicyConfig, build_policy


class TestCategory:
    def test_binary_categories(self):
        assert Category.IMAGE.is_binary
        assert Category.GENERIC_BINARY.is_binary
        assert not Category.MANAGED_BINARY.is_binary
        assert not Category.TEXT.is_binary

    def test_labels(self):
        assert Category.IMAGE.label == "Image"
        assert Category.MANAGED_BINARY.label == ".NET"
        assert Category.GENERIC_BINARY.label == "Binary"


class TestPolicyInvariants:
    def test_empty_allowlist_is_fatal(self):
        with pytest.raises(ConfigError, match="at least one"):
            PolicyConfig.create(allowed_extensions=[])

    def test_non_positive_size_is_fatal(self):
        with pytest.raises(ConfigError, match="positive"):
            PolicyConfig.create(allowed_extensions=[".txt"], max_file_size_bytes=0)

    def test_relative_restricted_path_is_fatal(self):
        with pytest.raises(ConfigError, match="absolute"):
            PolicyConfig.create(allowed_extensions=[".txt"], restricted_paths=["relative/dir"])

    def test_direct_construction_checks_prefixes(self):
        with pytest.raises(ConfigError, match="absolute"):
            PolicyConfig(
                allowed_extensions=frozenset({".txt"}),
                restricted_prefixes=("relative",),
                max_file_size_bytes=1,
            )

    def test_uppercase_extension_rejected(self):
        with pytest.raises(ConfigError, match="lower-case"):
            PolicyConfig.create(allowed_extensions=[".TXT"])

    def test_immutable(self):
        policy = PolicyConfig.create(allowed_extensions=[".txt"])
        with pytest.raises(dataclasses.FrozenInstanceError):
            policy.max_file_size_bytes = 5  # type: ignore[misc]

    def test_category_flags_are_read_only(self):
        policy = PolicyConfig.create(
            allowed_extensions=[".txt"], category_enabled={Category.IMAGE: False}
        )
        with pytest.raises(TypeError):
            policy.category_enabled[Category.IMAGE] = True  # type: ignore[index]


class TestPolicyCreate:
    def test_restricted_paths_canonicalised(self, tmp_path: Path):
        real = tmp_path / "real"
        real.mkdir()
        link = tmp_path / "link"
        link.symlink_to(real, target_is_directory=True)
        policy = PolicyConfig.create(
            allowed_extensions=[".txt"],
            restricted_paths=[str(link) + os.sep, str(tmp_path / "real" / ".." / "real")],
        )
        assert policy.restricted_prefixes == (os.path.realpath(real),)

    def test_text_always_enabled(self):
        policy = PolicyConfig.create(
            allowed_extensions=[".txt"], category_enabled={Category.TEXT: False}
        )
        assert policy.is_enabled(Category.TEXT)

    def test_unlisted_category_defaults_to_enabled(self):
        policy = PolicyConfig.create(allowed_extensions=[".txt"])
        assert policy.is_enabled(Category.IMAGE)


class TestBuildPolicy:
    def test_from_settings(self, tmp_path: Path):
        settings = PolicySettings(
            allowed_extensions=".txt,.png",
            restricted_paths=[str(tmp_path)],
            max_file_size_mb=2,
            enable_image_files=False,
            enable_dotnet_files=True,
            enable_binary_files=False,
        )
        policy = build_policy(settings)
        assert policy.allowed_extensions == frozenset({".txt", ".png"})
        assert policy.restricted_prefixes == (os.path.realpath(tmp_path),)
        assert policy.max_file_size_bytes == 2 * MB
        assert policy.is_enabled(Category.IMAGE) is False
        assert policy.is_enabled(Category.MANAGED_BINARY) is True
        assert policy.is_enabled(Category.GENERIC_BINARY) is False

    @pytest.mark.skipif(os.name == "nt", reason="POSIX defaults")
    def test_default_settings_build(self):
        policy = build_policy(PolicySettings())
        assert len(policy.allowed_extensions) == 63
        assert policy.max_file_size_bytes == 10 * MB
        assert len(policy.restricted_prefixes) == 5

"""Shared test fixtures for examiner."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from examiner.config.loader import ENV_OVERRIDES
from examiner.policy.model import Category, PolicyConfig
from examiner.tools.executor import OperationExecutor


@pytest.fixture(autouse=True)
def _isolated_config(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> None:
    """Keep user/project config files and EXAMINER_* variables out of tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.chdir(home)
    monkeypatch.delenv("EXAMINER_CONFIG", raising=False)
    for var in ENV_OVERRIDES:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _restore_logger() -> Iterator[None]:
    """Undo any configure_logging() call made by a test."""
    logger = logging.getLogger("examiner")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def sandbox(tmp_path: Path) -> Path:
    """A canonical working tree with one restricted directory.

    Layout::

        sandbox/
            notes.txt
            data.json
            picture.png
            tool.exe
            Program.cs
            README
            .hidden.txt
            docs/guide.md
            restricted/secret.txt
    """
    root = Path(os.path.realpath(tmp_path)) / "sandbox"
    root.mkdir()
    (root / "notes.txt").write_text("hello notes\n", encoding="utf-8")
    (root / "data.json").write_text('{"a": 1}\n', encoding="utf-8")
    (root / "picture.png").write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 32)
    (root / "tool.exe").write_bytes(b"MZ\x90\x00" + b"\x00" * 16)
    (root / "Program.cs").write_text("class Program {}\n", encoding="utf-8")
    (root / "README").write_text("no extension\n", encoding="utf-8")
    (root / ".hidden.txt").write_text("hidden\n", encoding="utf-8")
    (root / "docs").mkdir()
    (root / "docs" / "guide.md").write_text("# Guide\n", encoding="utf-8")
    (root / "restricted").mkdir()
    (root / "restricted" / "secret.txt").write_text("top secret\n", encoding="utf-8")
    return root


@pytest.fixture
def make_policy(sandbox: Path) -> Any:
    """Factory fixture for PolicyConfig restricting ``sandbox/restricted``."""

    def _make(**overrides: Any) -> PolicyConfig:
        defaults: dict[str, Any] = {
            "allowed_extensions": [".txt", ".md", ".json", ".png", ".exe", ".cs"],
            "restricted_paths": [str(sandbox / "restricted")],
            "max_file_size_bytes": 1024 * 1024,
            "category_enabled": {
                Category.IMAGE: True,
                Category.MANAGED_BINARY: True,
                Category.GENERIC_BINARY: True,
            },
        }
        defaults.update(overrides)
        return PolicyConfig.create(**defaults)

    return _make


@pytest.fixture
def executor(make_policy: Any) -> OperationExecutor:
    return OperationExecutor(make_policy())

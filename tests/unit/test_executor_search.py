"""Tests for OperationExecutor.search (the search_files operation)."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import pytest

from examiner.core.errors import ErrorKind
from examiner.tools.executor import MAX_SEARCH_DEPTH, OperationExecutor


def _names(result: Any) -> list[str]:
    return [item["name"] for item in result.data["results"]]


@pytest.fixture
def deep_tree(sandbox: Path) -> Path:
    """``chain/level0.txt``, ``chain/d0/level1.txt`` ... fifteen levels deep."""
    root = sandbox / "chain"
    current = root
    current.mkdir()
    for level in range(15):
        (current / f"level{level}.txt").write_text(str(level), encoding="utf-8")
        current = current / f"d{level}"
        current.mkdir()
    return root


class TestSearchBasics:
    def test_non_recursive(self, executor: OperationExecutor, sandbox: Path):
        result = executor.search(str(sandbox), "*.txt")
        assert result.success
        assert _names(result) == [".hidden.txt", "notes.txt"]
        assert result.data["searchPath"] == str(sandbox)
        assert result.data["pattern"] == "*.txt"
        assert result.data["recursive"] is False
        assert result.data["count"] == 2

    def test_recursive(self, executor: OperationExecutor, sandbox: Path):
        result = executor.search(str(sandbox), "*.md", recursive=True)
        assert _names(result) == ["guide.md"]
        assert result.data["results"][0]["path"] == str(sandbox / "docs" / "guide.md")

    def test_non_recursive_skips_subdirectories(
        self, executor: OperationExecutor, sandbox: Path
    ):
        assert executor.search(str(sandbox), "*.md").data["count"] == 0

    def test_case_insensitive(self, executor: OperationExecutor, sandbox: Path):
        assert _names(executor.search(str(sandbox), "PROGRAM.CS")) == ["Program.cs"]

    def test_directories_never_match(self, executor: OperationExecutor, sandbox: Path):
        assert executor.search(str(sandbox), "docs").data["count"] == 0

    def test_record_shape_matches_list(self, executor: OperationExecutor, sandbox: Path):
        found = executor.search(str(sandbox), "notes.txt").data["results"][0]
        listed = {
            item["name"]: item for item in executor.list(str(sandbox)).data["items"]
        }["notes.txt"]
        assert found == listed

    def test_ignores_extension_allowlist(self, make_policy: Any, sandbox: Path):
        executor = OperationExecutor(make_policy(allowed_extensions=[".md"]))
        assert _names(executor.search(str(sandbox), "*.exe")) == ["tool.exe"]

    def test_files_before_subdirectories(self, executor: OperationExecutor, sandbox: Path):
        (sandbox / "docs" / "notes.txt").write_text("x", encoding="utf-8")
        result = executor.search(str(sandbox), "notes.txt", recursive=True)
        assert [item["path"] for item in result.data["results"]] == [
            str(sandbox / "notes.txt"),
            str(sandbox / "docs" / "notes.txt"),
        ]


class TestSearchDepth:
    def test_stops_at_ceiling(self, executor: OperationExecutor, deep_tree: Path):
        result = executor.search(str(deep_tree), "level*.txt", recursive=True)
        assert result.success
        assert result.data["count"] == MAX_SEARCH_DEPTH + 1
        assert sorted(_names(result)) == sorted(
            f"level{n}.txt" for n in range(MAX_SEARCH_DEPTH + 1)
        )

    def test_non_recursive_root_only(self, executor: OperationExecutor, deep_tree: Path):
        result = executor.search(str(deep_tree), "level*.txt")
        assert _names(result) == ["level0.txt"]


class TestSearchPolicy:
    def test_restricted_directory_not_entered(
        self, executor: OperationExecutor, sandbox: Path
    ):
        result = executor.search(str(sandbox), "secret*", recursive=True)
        assert result.success
        assert result.data["count"] == 0

    def test_restricted_directory_differently_cased(
        self, executor: OperationExecutor, make_policy: Any, sandbox: Path
    ):
        executor.reconfigure(make_policy(restricted_paths=[str(sandbox / "DOCS")]))
        result = executor.search(str(sandbox), "*.md", recursive=True)
        assert result.data["count"] == 0

    def test_symlinked_file_into_restricted_omitted(
        self, executor: OperationExecutor, sandbox: Path
    ):
        (sandbox / "leak.txt").symlink_to(sandbox / "restricted" / "secret.txt")
        (sandbox / "alias.txt").symlink_to(sandbox / "notes.txt")
        names = _names(executor.search(str(sandbox), "*.txt"))
        assert "leak.txt" not in names
        assert "alias.txt" in names

    def test_symlinked_directories_not_followed(
        self, executor: OperationExecutor, sandbox: Path
    ):
        (sandbox / "mirror").symlink_to(sandbox / "docs", target_is_directory=True)
        (sandbox / "docs" / "loop").symlink_to(sandbox, target_is_directory=True)
        result = executor.search(str(sandbox), "*.md", recursive=True)
        assert [item["path"] for item in result.data["results"]] == [
            str(sandbox / "docs" / "guide.md")
        ]

    def test_restricted_root(self, executor: OperationExecutor, sandbox: Path):
        result = executor.search(f"{sandbox}/docs/../restricted", "*")
        assert result.kind is ErrorKind.ACCESS_DENIED


class TestSearchFailures:
    def test_unreadable_subdirectory_skipped(
        self, executor: OperationExecutor, sandbox: Path, monkeypatch: pytest.MonkeyPatch
    ):
        real_scandir = os.scandir

        def _scandir(path: str) -> Any:
            if os.path.basename(path) == "docs":
                raise PermissionError(13, "Permission denied", path)
            return real_scandir(path)

        (sandbox / "more").mkdir()
        (sandbox / "more" / "extra.md").write_text("x", encoding="utf-8")
        monkeypatch.setattr("examiner.tools.executor.os.scandir", _scandir)
        result = executor.search(str(sandbox), "*.md", recursive=True)
        assert result.success
        assert _names(result) == ["extra.md"]

    def test_unreadable_root_fails(
        self, executor: OperationExecutor, sandbox: Path, monkeypatch: pytest.MonkeyPatch
    ):
        def _denied(path: str) -> Any:
            raise PermissionError(13, "Permission denied", path)

        monkeypatch.setattr("examiner.tools.executor.os.scandir", _denied)
        result = executor.search(str(sandbox), "*")
        assert result.kind is ErrorKind.ACCESS_DENIED

    def test_file_root(self, executor: OperationExecutor, sandbox: Path):
        result = executor.search(str(sandbox / "notes.txt"), "*")
        assert result.kind is ErrorKind.NOT_A_DIRECTORY

    def test_missing_root(self, executor: OperationExecutor, sandbox: Path):
        result = executor.search(str(sandbox / "nowhere"), "*")
        assert result.kind is ErrorKind.NOT_FOUND

    def test_empty_pattern(self, executor: OperationExecutor, sandbox: Path):
        result = executor.search(str(sandbox), "")
        assert result.kind is ErrorKind.INVALID_PARAMETER

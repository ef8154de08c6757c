"""Tests for glob-style name matching."""

import pytest

from examiner.core.errors import InvalidParameterError
from examiner.tools.pattern import compile_pattern, matches


class TestMatches:
    @pytest.mark.parametrize(
        ("name", "pattern", "expected"),
        [
            ("notes.txt", "*.txt", True),
            ("NOTES.TXT", "*.txt", True),
            ("notes.txt", "*.TXT", True),
            ("a.txt", "?.txt", True),
            ("ab.txt", "?.txt", False),
            (".txt", "*.txt", True),
            ("notes.txt.bak", "*.txt", False),
            ("xnotes.txt", "notes.txt", False),
            ("notes", "*", True),
            ("", "*", True),
            ("report-2024.csv", "report-????.csv", True),
        ],
    )
    def test_table(self, name: str, pattern: str, expected: bool):
        assert matches(name, pattern) is expected

    def test_dot_is_literal(self):
        assert not matches("notesXtxt", "notes.txt")

    def test_regex_metacharacters_are_literal(self):
        assert matches("a+b(1).txt", "a+b(1).txt")
        assert not matches("aab1.txt", "a+b(1).txt")
        assert matches("[draft].md", "[draft].md")
        assert not matches("d.md", "[draft].md")

    def test_whole_name_only(self):
        assert not matches("my_notes.txt", "notes*")

    def test_question_mark_matches_dot(self):
        assert matches("a.b", "a?b")


class TestCompilePattern:
    def test_keeps_source(self):
        assert compile_pattern("*.md").pattern == "*.md"

    @pytest.mark.parametrize("bad", ["", None, 3, ["*.txt"]])
    def test_rejects_non_strings_and_empty(self, bad: object):
        with pytest.raises(InvalidParameterError, match="pattern"):
            compile_pattern(bad)

from __future__ import annotations

import io
import os
import tempfile
import unittest

from rich.console import Console

from changecheck.config import CheckConfig
from changecheck.filters import TargetMatcher, build_target_matcher
from changecheck.models import DirectoryEntry, FileType


def _file(name: str, directory: str = "src") -> DirectoryEntry:
    return DirectoryEntry(directory, name, FileType.REGULAR, 1, 1)


class TargetMatcherTests(unittest.TestCase):
    def test_extension_match_is_case_insensitive(self) -> None:
        matcher = TargetMatcher(extensions=(".txt",))

        self.assertTrue(matcher.matches(_file("report.txt")))
        self.assertTrue(matcher.matches(_file("REPORT.TXT")))
        self.assertFalse(matcher.matches(_file("report.md")))

    def test_configured_extensions_are_folded(self) -> None:
        config = CheckConfig(targets=("src",), db_path="db", extensions=(".TXT",))
        matcher = build_target_matcher(config)

        self.assertTrue(matcher.matches(_file("report.txt")))
        self.assertTrue(matcher.matches(_file("REPORT.TXT")))

    def test_empty_extension_matches_every_file(self) -> None:
        config = CheckConfig(targets=("src",), db_path="db", extensions=("", ".c"))
        matcher = build_target_matcher(config)

        self.assertTrue(matcher.matches(_file("notes.txt")))
        self.assertTrue(matcher.matches(_file("a.c")))

    def test_extensions_are_not_trimmed(self) -> None:
        config = CheckConfig(targets=("src",), db_path="db", extensions=(" .c",))
        matcher = build_target_matcher(config)

        self.assertFalse(matcher.matches(_file("a.c")))
        self.assertTrue(matcher.matches(_file("a .C")))

    def test_empty_extension_list_matches_every_file(self) -> None:
        matcher = TargetMatcher()

        self.assertTrue(matcher.matches(_file("anything")))

    def test_directories_match_only_when_included(self) -> None:
        directory = DirectoryEntry("", "src", FileType.DIRECTORY)

        self.assertFalse(TargetMatcher().matches(directory))
        self.assertTrue(TargetMatcher(include_directories=True).matches(directory))
        self.assertTrue(TargetMatcher(include_directories=True, extensions=(".c",)).matches(directory))

    def test_error_entry_never_matches_and_reports_path(self) -> None:
        buffer = io.StringIO()
        matcher = TargetMatcher(include_directories=True, console=Console(file=buffer, width=200))

        self.assertFalse(matcher.matches(DirectoryEntry("src", "gone.c")))
        self.assertIn(os.path.join("src", "gone.c"), buffer.getvalue())

    def test_database_file_is_never_a_target(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            db_path = os.path.join(tmp, "state.db")
            config = CheckConfig(targets=(tmp,), db_path=db_path)
            matcher = build_target_matcher(config)

            self.assertFalse(matcher.matches(_file("state.db", tmp)))
            self.assertTrue(matcher.matches(_file("other.db", tmp)))


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import os
import unittest

from changecheck.models import DirectoryEntry, DirSummary, FileType
from changecheck.paths import join_path, split_path


class PathTests(unittest.TestCase):
    def test_join_never_doubles_separator(self) -> None:
        self.assertEqual(join_path("src" + os.sep, "a.c"), os.path.join("src", "a.c"))
        self.assertEqual(join_path("src", "a.c"), os.path.join("src", "a.c"))

    def test_join_with_empty_part_returns_other_part(self) -> None:
        self.assertEqual(join_path("", "a.c"), "a.c")
        self.assertEqual(join_path("src", ""), "src")

    def test_trailing_separator_round_trips_to_directory(self) -> None:
        directory, name = split_path("src" + os.sep)
        self.assertEqual((directory, name), ("src", ""))
        self.assertEqual(join_path(directory, name), "src")


class DirectoryEntryTests(unittest.TestCase):
    def test_from_path_decomposes_and_rebuilds_path(self) -> None:
        path = os.path.join("proj", "src", "a.c")
        entry = DirectoryEntry.from_path(path, FileType.REGULAR, 10, 1000)

        self.assertEqual(entry.directory, os.path.join("proj", "src"))
        self.assertEqual(entry.name, "a.c")
        self.assertEqual(entry.path, path)
        self.assertTrue(entry.is_regular_file)
        self.assertFalse(entry.is_directory)

    def test_default_entry_is_error_type(self) -> None:
        entry = DirectoryEntry("missing", "file.txt")

        self.assertIs(entry.file_type, FileType.ERROR)
        self.assertFalse(entry.is_regular_file)
        self.assertFalse(entry.is_directory)
        self.assertEqual(entry.path, os.path.join("missing", "file.txt"))

    def test_same_state_compares_type_size_and_time(self) -> None:
        entry = DirectoryEntry("d", "a", FileType.REGULAR, 10, 1000)

        self.assertTrue(entry.same_state(DirectoryEntry("other", "b", FileType.REGULAR, 10, 1000)))
        self.assertFalse(entry.same_state(DirectoryEntry("d", "a", FileType.REGULAR, 11, 1000)))
        self.assertFalse(entry.same_state(DirectoryEntry("d", "a", FileType.REGULAR, 10, 1001)))
        self.assertFalse(entry.same_state(DirectoryEntry("d", "a", FileType.DIRECTORY, 10, 1000)))


class DirSummaryTests(unittest.TestCase):
    def test_add_accumulates_count_size_and_latest_time(self) -> None:
        summary = DirSummary()
        summary.add(DirectoryEntry("d", "a.c", FileType.REGULAR, 10, 2000))
        summary.add(DirectoryEntry("d", "b.c", FileType.REGULAR, 5, 1000))

        self.assertEqual(summary, DirSummary(2, 15, 2000))

    def test_equality_is_exact(self) -> None:
        self.assertNotEqual(DirSummary(1, 10, 1000), DirSummary(1, 10, 1001))


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

from rich.console import Console

from changecheck.config import CheckConfig
from changecheck.diagnostics import warn
from changecheck.errors import SnapshotFormatError
from changecheck.filters import build_target_matcher
from changecheck.models import ChangeRecord, DirectoryEntry, DirSummary
from changecheck.scanner import DirectoryEnumerator, entry_for_path
from changecheck.state_db import (
    BinaryReader,
    BinaryWriter,
    make_magic,
    open_snapshot_for_read,
    open_snapshot_for_write,
)


DB_MAGIC = make_magic(b"dfc1")
TOP_LEVEL_LABEL = "<targets>"


def read_dir_summary(reader: BinaryReader) -> DirSummary:
    file_count = reader.read_u32()
    total_size = reader.read_u64()
    latest_time = reader.read_u64()
    return DirSummary(file_count, total_size, latest_time)


def write_dir_summary(writer: BinaryWriter, summary: DirSummary) -> None:
    writer.write_u32(summary.file_count)
    writer.write_u64(summary.total_size)
    writer.write_u64(summary.latest_time)


def read_summary_snapshot(reader: BinaryReader) -> tuple[DirSummary, dict[str, DirSummary]]:
    reader.expect_magic(DB_MAGIC)
    top_level = read_dir_summary(reader)
    dir_count = reader.read_size()
    dirs: dict[str, DirSummary] = {}
    for _ in range(dir_count):
        path = reader.read_string()
        dirs[path] = read_dir_summary(reader)
    return top_level, dirs


def write_summary_snapshot(
    writer: BinaryWriter, top_level: DirSummary, dirs: dict[str, DirSummary]
) -> None:
    writer.write_u32(DB_MAGIC)
    write_dir_summary(writer, top_level)
    writer.write_size(len(dirs))
    for path, summary in dirs.items():
        writer.write_string(path)
        write_dir_summary(writer, summary)


class DirSummaryStrategy:
    """Compare per-directory totals: target count, total size, newest time.

    Targets named on the command line are summarized together as children of
    one synthetic top-level directory. Every directory descended into gets a
    summary of its immediate in-scope children only. Swapping one file for
    another with the same size and timestamp leaves the summary identical
    and is not detected.
    """

    def __init__(self, config: CheckConfig, *, console: Console | None = None) -> None:
        self.config = config
        self.console = console
        self.matcher = build_target_matcher(config, console)
        self.changes: list[ChangeRecord] = []
        self.top_level = DirSummary()
        self.dirs: dict[str, DirSummary] = {}
        self._top_level_prev = DirSummary()
        self._dirs_prev: dict[str, DirSummary] = {}
        self._changed = False

    def read_previous_state(self) -> None:
        try:
            fh = open_snapshot_for_read(self.config.db_file)
            if fh is None:
                return
            with fh:
                top_level, dirs = read_summary_snapshot(BinaryReader(fh))
        except (OSError, SnapshotFormatError) as exc:
            warn(
                f"Ignoring unreadable database '{self.config.db_path}': {exc}",
                console=self.console,
            )
            return
        self._top_level_prev = top_level
        self._dirs_prev = dirs

    def check(self) -> bool:
        for target in self.config.targets:
            entry = entry_for_path(target)
            if self.matcher.matches(entry):
                self.top_level.add(entry)
            if entry.is_directory and self.config.recursive:
                self._check_tree(entry.path)

        if self.top_level != self._top_level_prev:
            self._mark("modified", TOP_LEVEL_LABEL, self._top_level_prev, self.top_level)
        # Whatever was not drained during the scan no longer exists.
        for path in self._dirs_prev:
            self._mark("deleted", path)
        return self._changed

    def _check_tree(self, root: str) -> None:
        pending = [root]
        while pending:
            pending.extend(self._check_directory(pending.pop()))

    def _check_directory(self, directory: str) -> list[str]:
        """Summarize one directory and return the subdirectories still to visit."""
        if directory in self.dirs:
            return []
        summary = DirSummary()
        self.dirs[directory] = summary
        subdirectories: list[str] = []
        with DirectoryEnumerator(directory) as children:
            for child in children:
                if child.is_directory:
                    subdirectories.append(child.path)
                if self.matcher.matches(child):
                    summary.add(child)

        previous = self._dirs_prev.pop(directory, None)
        if previous is None:
            self._mark("new", directory)
        elif previous != summary:
            self._mark("modified", directory, previous, summary)
        return subdirectories

    def _mark(
        self,
        kind: str,
        path: str,
        previous: DirSummary | None = None,
        current: DirSummary | None = None,
    ) -> None:
        self._changed = True
        detail = ""
        if previous is not None and current is not None:
            detail = (
                f"count {previous.file_count}->{current.file_count}, "
                f"size {previous.total_size}->{current.total_size}, "
                f"latest {previous.latest_time}->{current.latest_time}"
            )
        self.changes.append(ChangeRecord(kind, path, detail))

    def write_state(self) -> None:
        try:
            with open_snapshot_for_write(self.config.db_file) as fh:
                write_summary_snapshot(BinaryWriter(fh), self.top_level, self.dirs)
        except OSError as exc:
            warn(f"Could not write database '{self.config.db_path}': {exc}", console=self.console)

from __future__ import annotations

from rich.console import Console

from changecheck.config import CheckConfig
from changecheck.diagnostics import warn
from changecheck.errors import SnapshotFormatError
from changecheck.filters import build_target_matcher
from changecheck.models import ChangeRecord, DirectoryEntry, FileType
from changecheck.scanner import DirectoryEnumerator, entry_for_path
from changecheck.state_db import (
    BinaryReader,
    BinaryWriter,
    make_magic,
    open_snapshot_for_read,
    open_snapshot_for_write,
)


DB_MAGIC = make_magic(b"dfc2")


def read_entry_snapshot(reader: BinaryReader) -> dict[str, DirectoryEntry]:
    reader.expect_magic(DB_MAGIC)
    count = reader.read_size()
    entries: dict[str, DirectoryEntry] = {}
    for _ in range(count):
        path = reader.read_string()
        raw_type = reader.read_u32()
        size = reader.read_u64()
        last_write_time = reader.read_u64()
        try:
            file_type = FileType(raw_type)
        except ValueError:
            raise SnapshotFormatError(f"unknown file type {raw_type} for '{path}'") from None
        entries.setdefault(path, DirectoryEntry.from_path(path, file_type, size, last_write_time))
    return entries


def write_entry_snapshot(writer: BinaryWriter, entries: dict[str, DirectoryEntry]) -> None:
    writer.write_u32(DB_MAGIC)
    writer.write_size(len(entries))
    for path, entry in entries.items():
        writer.write_string(path)
        writer.write_u32(int(entry.file_type))
        writer.write_u64(entry.size)
        writer.write_u64(entry.last_write_time)


class FileStatStrategy:
    """Track type, size and modification time of every target by path.

    The most accurate strategy and the default: it notices additions,
    deletions and any metadata change, at the cost of one record per target
    in the database.
    """

    def __init__(self, config: CheckConfig, *, console: Console | None = None) -> None:
        self.config = config
        self.console = console
        self.matcher = build_target_matcher(config, console)
        self.changes: list[ChangeRecord] = []
        self.targets: dict[str, DirectoryEntry] = {}
        self._targets_prev: dict[str, DirectoryEntry] = {}
        self._changed = False

    def read_previous_state(self) -> None:
        try:
            fh = open_snapshot_for_read(self.config.db_file)
            if fh is None:
                return
            with fh:
                entries = read_entry_snapshot(BinaryReader(fh))
        except (OSError, SnapshotFormatError) as exc:
            warn(
                f"Ignoring unreadable database '{self.config.db_path}': {exc}",
                console=self.console,
            )
            return
        self._targets_prev = entries

    def check(self) -> bool:
        for target in self.config.targets:
            entry = entry_for_path(target)
            self._check_entry(entry)
            if entry.is_directory and self.config.recursive:
                self._check_tree(entry.path)

        # Whatever was not drained during the scan no longer exists.
        for path in self._targets_prev:
            self._mark("deleted", path)
        return self._changed

    def _check_tree(self, root: str) -> None:
        pending = [root]
        while pending:
            with DirectoryEnumerator(pending.pop()) as children:
                for child in children:
                    self._check_entry(child)
                    if child.is_directory:
                        pending.append(child.path)

    def _check_entry(self, entry: DirectoryEntry) -> None:
        if self.matcher.matches(entry):
            self._check_target(entry)

    def _check_target(self, entry: DirectoryEntry) -> None:
        path = entry.path
        if path in self.targets:
            return
        self.targets[path] = entry

        previous = self._targets_prev.pop(path, None)
        if previous is None:
            self._mark("new", path)
        elif not entry.same_state(previous):
            self._mark(
                "modified",
                path,
                f"size {previous.size}->{entry.size}, "
                f"mtime {previous.last_write_time}->{entry.last_write_time}",
            )

    def _mark(self, kind: str, path: str, detail: str = "") -> None:
        self._changed = True
        self.changes.append(ChangeRecord(kind, path, detail))

    def write_state(self) -> None:
        try:
            with open_snapshot_for_write(self.config.db_file) as fh:
                write_entry_snapshot(BinaryWriter(fh), self.targets)
        except OSError as exc:
            warn(f"Could not write database '{self.config.db_path}': {exc}", console=self.console)

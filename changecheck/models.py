from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from changecheck.paths import join_path, split_path


class FileType(IntEnum):
    ERROR = 0
    REGULAR = 1
    DIRECTORY = 2


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    directory: str
    name: str
    file_type: FileType = FileType.ERROR
    size: int = 0
    last_write_time: int = 0

    @classmethod
    def from_path(
        cls,
        path: str,
        file_type: FileType = FileType.ERROR,
        size: int = 0,
        last_write_time: int = 0,
    ) -> DirectoryEntry:
        directory, name = split_path(path)
        return cls(directory, name, file_type, size, last_write_time)

    @property
    def path(self) -> str:
        return join_path(self.directory, self.name)

    @property
    def is_directory(self) -> bool:
        return self.file_type is FileType.DIRECTORY

    @property
    def is_regular_file(self) -> bool:
        return self.file_type is FileType.REGULAR

    def same_state(self, other: DirectoryEntry) -> bool:
        return (
            self.file_type == other.file_type
            and self.size == other.size
            and self.last_write_time == other.last_write_time
        )


@dataclass(slots=True)
class DirSummary:
    file_count: int = 0
    total_size: int = 0
    latest_time: int = 0

    def add(self, entry: DirectoryEntry) -> None:
        self.file_count += 1
        self.total_size += entry.size
        if entry.last_write_time > self.latest_time:
            self.latest_time = entry.last_write_time


@dataclass(slots=True)
class ChangeRecord:
    kind: str
    path: str
    detail: str = ""

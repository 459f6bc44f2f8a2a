from __future__ import annotations

import os
import stat as stat_mode
from types import TracebackType
from typing import Iterator

from changecheck.models import DirectoryEntry, FileType
from changecheck.paths import split_path


def _entry_from_stat(directory: str, name: str, st: os.stat_result | None) -> DirectoryEntry:
    if st is None:
        return DirectoryEntry(directory, name)
    mtime_ns = max(st.st_mtime_ns, 0)
    if stat_mode.S_ISDIR(st.st_mode):
        # Directory st_size is filesystem bookkeeping, not content.
        return DirectoryEntry(directory, name, FileType.DIRECTORY, 0, mtime_ns)
    return DirectoryEntry(directory, name, FileType.REGULAR, st.st_size, mtime_ns)


def entry_for_path(path: str) -> DirectoryEntry:
    """Stat a single path, such as a command-line target."""
    directory, name = split_path(path)
    try:
        st = os.stat(path)
    except OSError:
        st = None
    return _entry_from_stat(directory, name, st)


def path_last_write_time(path: str) -> int:
    try:
        return max(os.stat(path).st_mtime_ns, 0)
    except OSError:
        return 0


class DirectoryEnumerator:
    """One-shot iterator over the immediate children of a directory.

    A directory that cannot be opened behaves as an empty one. The scandir
    handle is released when iteration ends, on ``close()`` or when leaving a
    ``with`` block, whichever comes first.
    """

    def __init__(self, directory: str) -> None:
        self.directory = directory
        self._handle: Iterator[os.DirEntry[str]] | None
        try:
            self._handle = os.scandir(directory)
        except OSError:
            self._handle = None

    @property
    def is_end(self) -> bool:
        return self._handle is None

    def __iter__(self) -> DirectoryEnumerator:
        return self

    def __next__(self) -> DirectoryEntry:
        if self._handle is None:
            raise StopIteration
        try:
            item = next(self._handle)
        except StopIteration:
            self.close()
            raise
        except OSError:
            self.close()
            raise StopIteration from None

        try:
            st = item.stat()
        except OSError:
            st = None
        return _entry_from_stat(self.directory, item.name, st)

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> DirectoryEnumerator:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

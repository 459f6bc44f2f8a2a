from __future__ import annotations

from rich.console import Console

from changecheck.config import CheckConfig
from changecheck.diagnostics import warn
from changecheck.filters import build_target_matcher
from changecheck.models import ChangeRecord, DirectoryEntry
from changecheck.scanner import DirectoryEnumerator, entry_for_path, path_last_write_time
from changecheck.state_db import open_snapshot_for_write


class FastStrategy:
    """Report a change as soon as any target is newer than the database file.

    The database carries no payload; its own modification time is the
    baseline. The scan stops at the first newer entry, so paths after it are
    never visited (and never produce diagnostics). Deletions and changes that
    do not advance a timestamp go unnoticed.
    """

    def __init__(self, config: CheckConfig, *, console: Console | None = None) -> None:
        self.config = config
        self.console = console
        self.matcher = build_target_matcher(config, console)
        self.changes: list[ChangeRecord] = []
        self._db_time = 0

    def read_previous_state(self) -> None:
        self._db_time = path_last_write_time(self.config.db_path)

    def check(self) -> bool:
        for target in self.config.targets:
            entry = entry_for_path(target)
            if self._is_newer(entry):
                return True
            if entry.is_directory and self.config.recursive and self._check_tree(entry.path):
                return True
        return False

    def _is_newer(self, entry: DirectoryEntry) -> bool:
        if self.matcher.matches(entry) and entry.last_write_time > self._db_time:
            self.changes.append(ChangeRecord("newer", entry.path))
            return True
        return False

    def _check_tree(self, root: str) -> bool:
        pending = [root]
        while pending:
            with DirectoryEnumerator(pending.pop()) as children:
                for child in children:
                    if self._is_newer(child):
                        return True
                    if child.is_directory:
                        pending.append(child.path)
        return False

    def write_state(self) -> None:
        try:
            with open_snapshot_for_write(self.config.db_file):
                pass
        except OSError as exc:
            warn(f"Could not write database '{self.config.db_path}': {exc}", console=self.console)
